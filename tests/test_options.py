import pytest

from follow_redirects.errors import ProtocolMismatch
from follow_redirects.options import DEFAULT_MAX_REDIRECTS, RequestDescriptor, normalize_options


def test_normalize_url_string_uses_default_ceiling():
    descriptor = normalize_options("http://example.com/path?x=1", "http")
    assert descriptor.scheme == "http"
    assert descriptor.host == "example.com"
    assert descriptor.path == "/path"
    assert descriptor.query == "x=1"
    assert descriptor.method == "GET"
    assert descriptor.max_redirects == DEFAULT_MAX_REDIRECTS
    assert descriptor.url == "http://example.com/path?x=1"


def test_normalize_url_string_with_configured_ceiling():
    descriptor = normalize_options("https://example.com", "https", max_redirects=9)
    assert descriptor.max_redirects == 9
    assert descriptor.url == "https://example.com/"


def test_normalize_same_url_twice_gives_independent_equal_descriptors():
    first = normalize_options("http://example.com/", "http")
    second = normalize_options("http://example.com/", "http")
    assert first == second
    assert first is not second
    first.headers["X-Test"] = "1"
    assert second.headers == {}


def test_mapping_fields_override_defaults():
    headers = {"Accept": "text/html"}
    descriptor = normalize_options(
        {"host": "example.com", "path": "/a", "method": "post", "max_redirects": 2, "headers": headers},
        "http",
    )
    assert descriptor.scheme == "http"
    assert descriptor.method == "POST"
    assert descriptor.max_redirects == 2
    assert descriptor.url == "http://example.com/a"
    assert descriptor.headers == headers
    assert descriptor.headers is not headers


def test_mapping_url_key_is_parsed_before_explicit_fields():
    descriptor = normalize_options({"url": "http://example.com/a?b=c", "path": "/z"}, "http")
    assert descriptor.path == "/z"
    assert descriptor.query == "b=c"


def test_scheme_with_colon_is_accepted():
    descriptor = normalize_options({"scheme": "HTTPS:", "host": "example.com"}, "https")
    assert descriptor.scheme == "https"


@pytest.mark.parametrize(
    "options",
    [
        "https://example.com/",
        {"scheme": "https", "host": "example.com"},
        {"url": "ftp://example.com/"},
        "example.com/path",
        {"url": "//example.com/path"},
    ],
)
def test_scheme_mismatch_raises(options):
    with pytest.raises(ProtocolMismatch) as excinfo:
        normalize_options(options, "http")
    assert excinfo.value.expected == "http"


def test_unknown_option_raises_type_error():
    with pytest.raises(TypeError, match="hostname"):
        normalize_options({"hostname": "example.com"}, "http")


def test_internal_fields_cannot_be_seeded():
    with pytest.raises(TypeError, match="transport"):
        normalize_options({"host": "example.com", "transport": object()}, "http")


def test_descriptor_input_is_copied_not_mutated():
    original = RequestDescriptor(scheme="http", host="example.com", headers={"A": "1"}, max_redirects=1)
    descriptor = normalize_options(original, "http")
    descriptor.method = "DELETE"
    descriptor.headers["B"] = "2"
    assert original.method == "GET"
    assert original.headers == {"A": "1"}
    assert descriptor.max_redirects == 1


def test_unsupported_input_type():
    with pytest.raises(TypeError):
        normalize_options(42, "http")


def test_apply_url_resets_missing_components():
    descriptor = normalize_options("http://u:p@example.com:81/a?q#f", "http")
    descriptor.apply_url("https://other.org")
    assert (descriptor.scheme, descriptor.host, descriptor.port, descriptor.path) == ("https", "other.org", None, "/")
    assert descriptor.username is None
    assert descriptor.password is None
    assert descriptor.query is None
    assert descriptor.fragment is None


def test_drop_header_is_case_insensitive():
    descriptor = RequestDescriptor(headers={"content-length": "3", "Accept": "*/*"})
    descriptor.drop_header("Content-Length")
    assert descriptor.headers == {"Accept": "*/*"}
