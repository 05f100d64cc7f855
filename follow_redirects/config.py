"""Configuration utilities for follow-redirects."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .options import DEFAULT_MAX_REDIRECTS


@dataclass
class Config:
    """Runtime configuration parameters."""

    max_redirects: int = DEFAULT_MAX_REDIRECTS
    timeout: float = 12.0
    user_agent: str = "follow-redirects/0.1"
    log_level: str = "INFO"


def load_config(env_file: Optional[str] = ".env") -> Config:
    """Load configuration from environment variables and optional .env file."""

    if env_file:
        load_dotenv(env_file, override=False)

    return Config(
        max_redirects=int(os.getenv("FR_MAX_REDIRECTS", Config.max_redirects)),
        timeout=float(os.getenv("FR_TIMEOUT", Config.timeout)),
        user_agent=os.getenv("FR_USER_AGENT", Config.user_agent),
        log_level=os.getenv("FR_LOG_LEVEL", Config.log_level),
    )


__all__ = ["Config", "load_config"]
