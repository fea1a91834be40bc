import ipaddress
import re
from urllib.parse import urlparse

from .errors import ValidationError

MAX_URL_LENGTH = 255
DEFAULT_PORTS = {"http": 80, "https": 443}

ABSOLUTE_URL_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")
BARE_DOMAIN_RE = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
WHITESPACE_RE = re.compile(r"\s")
HOST_LABEL_RE = re.compile(r"^(?!-)[a-z0-9-]{1,63}(?<!-)$")


def normalize_url(input_url: str, assume_scheme: bool = False) -> str:
    """Reduce *input_url* to ``scheme://host[:port]``.

    The host is lower-cased and the port is kept only when it differs from
    the scheme's default. Raises :class:`ValidationError` when the input is
    not an absolute http(s) URL. With ``assume_scheme`` a bare domain such
    as ``example.com`` is read as ``http://example.com``.
    """
    value = (input_url or "").strip()
    if not value:
        raise ValidationError("URL is empty")
    if len(value) > MAX_URL_LENGTH:
        raise ValidationError(f"URL is longer than {MAX_URL_LENGTH} characters")
    if WHITESPACE_RE.search(value):
        raise ValidationError(f"URL contains whitespace: {value!r}")

    if assume_scheme and not ABSOLUTE_URL_RE.match(value) and BARE_DOMAIN_RE.match(value):
        value = f"http://{value}"
    if not ABSOLUTE_URL_RE.match(value):
        raise ValidationError(f"Not an absolute URL: {value!r}")

    try:
        parsed = urlparse(value)
    except ValueError as exc:
        raise ValidationError(f"Malformed URL: {value!r}") from exc
    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise ValidationError(f"Unsupported scheme: {parsed.scheme!r}")

    host = parsed.hostname
    if not host:
        raise ValidationError(f"URL has no host: {value!r}")
    if not _is_valid_host(host, bracketed="[" in parsed.netloc.rpartition("@")[2]):
        raise ValidationError(f"Malformed host in {value!r}")
    if ":" in host:
        host = f"[{host}]"

    try:
        port = parsed.port
    except ValueError as exc:
        raise ValidationError(f"Invalid port in {value!r}") from exc
    if port == 0:
        raise ValidationError(f"Invalid port in {value!r}")

    if port is None or port == DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def _is_valid_host(host: str, bracketed: bool = False) -> bool:
    if bracketed or ":" in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            return False
        return True

    try:
        ascii_host = host.encode("idna").decode("ascii")
    except UnicodeError:
        return False
    return all(HOST_LABEL_RE.match(label) for label in ascii_host.split("."))
