"""Command line interface for follow-redirects."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from follow_redirects.config import Config, load_config
from follow_redirects.errors import RedirectError, TooManyRedirects, TransportError, UnsupportedScheme
from follow_redirects.logging_utils import configure_logging, get_logger
from follow_redirects.registry import TransportRegistry
from follow_redirects.transport import Response
from follow_redirects.urls import parse_url

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="follow-redirects CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    trace = subparsers.add_parser("trace", help="Follow the redirects of a URL and print the chain")
    trace.add_argument("url", help="URL to request")
    trace.add_argument("--method", default="GET", help="HTTP method of the first request")
    trace.add_argument("--header", action="append", default=[], help="Extra header as 'Name: value'")
    trace.add_argument("--data", type=str, help="Request body for the first request")
    trace.add_argument("--max-redirects", type=int, help="Redirect ceiling")
    trace.add_argument("--timeout", type=float, help="Per-hop request timeout")
    trace.add_argument("--retries", type=int, default=0, help="Retries on transport errors")
    trace.add_argument("--json", action="store_true", help="Print the result as JSON")
    trace.add_argument("--log-file", type=str, help="Optional log file path")
    trace.add_argument("--log-level", type=str, help="Logging level")

    return parser


def parse_headers(values: List[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"invalid header {value!r}, expected 'Name: value'")
        headers[name.strip()] = content.strip()
    return headers


def build_client(config: Config) -> httpx.AsyncClient:
    return httpx.AsyncClient(headers={"User-Agent": config.user_agent}, timeout=config.timeout)


async def trace_url(
    registry: TransportRegistry,
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    data: Optional[bytes] = None,
    timeout: Optional[float] = None,
) -> Response:
    scheme = parse_url(url).scheme
    if scheme not in registry:
        raise UnsupportedScheme(scheme)
    handle = registry[scheme].request(
        {"url": url, "method": method, "headers": headers or {}, "timeout": timeout}
    )
    handle.end(data)
    return await handle.result()


async def trace_command(args: argparse.Namespace) -> int:
    config = load_config()

    if args.max_redirects is not None:
        config.max_redirects = args.max_redirects
    if args.timeout:
        config.timeout = args.timeout
    if args.log_level:
        config.log_level = args.log_level

    configure_logging(Path(args.log_file) if args.log_file else None, level=config.log_level)

    try:
        headers = parse_headers(args.header)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2
    data = args.data.encode("utf-8") if args.data is not None else None

    async with build_client(config) as client:
        registry = TransportRegistry.from_client(client, max_redirects=config.max_redirects)
        try:
            async for attempt in AsyncRetrying(
                reraise=True,
                stop=stop_after_attempt(args.retries + 1),
                wait=wait_exponential(multiplier=1, min=1, max=4),
                retry=retry_if_exception_type(TransportError),
            ):
                with attempt:
                    response = await trace_url(
                        registry,
                        args.url,
                        method=args.method,
                        headers=headers,
                        data=data,
                        timeout=config.timeout,
                    )
        except TooManyRedirects as exc:
            logger.error("Trace of %s stopped after %s redirects", args.url, exc.max_redirects)
            print_chain(list(reversed(exc.fetched_urls)), None, args.json, error=str(exc))
            return 1
        except (RedirectError, ValueError) as exc:
            logger.error("Trace of %s failed: %s", args.url, exc)
            print_chain([], None, args.json, error=str(exc))
            return 1

        await response.drain()

    chain = list(reversed(response.fetched_urls))
    logger.info("Resolved %s in %s hop(s)", args.url, len(chain))
    print_chain(chain, response.status_code, args.json)
    return 0


def print_chain(chain: List[str], status_code: Optional[int], as_json: bool, error: Optional[str] = None) -> None:
    if as_json:
        payload = {
            "chain": chain,
            "final_url": chain[-1] if chain else None,
            "status_code": status_code,
            "redirects": max(len(chain) - 1, 0),
            "error": error,
        }
        print(json.dumps(payload, indent=2))
        return
    for index, url in enumerate(chain, start=1):
        print(f"{index}. {url}")
    if status_code is not None:
        print(f"status: {status_code}")
    if error:
        print(f"error: {error}")


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "trace":
        sys.exit(asyncio.run(trace_command(args)))
    else:
        parser.error("Unknown command")


if __name__ == "__main__":
    main()
