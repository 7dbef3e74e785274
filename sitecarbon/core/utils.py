import hashlib
import ipaddress
from typing import Any, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

DEFAULT_PORTS = {"http": 80, "https": 443}

# WHATWG forbidden host code points, plus "%" which only appears percent-encoded
FORBIDDEN_HOST_CHARS = set("\x00\t\n\r #/:<>?@[\\]^|%")


def is_valid_host(hostname: str, bracketed: bool = False) -> bool:
    if bracketed:
        try:
            return ipaddress.ip_address(hostname).version == 6
        except ValueError:
            return False
    if not hostname or any(c in FORBIDDEN_HOST_CHARS or ord(c) < 0x20 or c == "\x7f" for c in hostname):
        return False
    try:
        ipaddress.ip_address(hostname)
        return True
    except ValueError:
        pass
    try:
        hostname.encode("idna")
    except UnicodeError:
        return False
    return True


def is_valid_url(value: Optional[str]) -> bool:
    """True when value parses as an absolute URL with a scheme and a well-formed host."""
    if not value or not isinstance(value, str):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # raises ValueError on a malformed port
    except ValueError:
        return False
    if not (parts.scheme and parts.netloc and parts.hostname):
        return False
    return is_valid_host(parts.hostname, bracketed="[" in parts.netloc)


def get_safe_value(obj: Any, path: str, default: Any = None) -> Any:
    """
    Walk a dotted path through nested dicts/lists.
    Returns default as soon as a segment is missing or the value is None.
    """
    current = obj
    for part in path.split("."):
        if current is None:
            return default
        if isinstance(current, dict):
            if part not in current:
                return default
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            idx = int(part)
            if idx >= len(current):
                return default
            current = current[idx]
        else:
            return default
    return default if current is None else current


def canonicalize_url(url: str) -> str:
    parts = urlsplit(url.strip())
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    netloc = host if port is None or DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    if parts.username:
        creds = parts.username + (f":{parts.password}" if parts.password else "")
        netloc = f"{creds}@{netloc}"
    path = parts.path or "/"
    query = urlencode(sorted(parse_qsl(parts.query, keep_blank_values=True)))
    return urlunsplit((scheme, netloc, path, query, ""))


def cache_key_for_url(url: str) -> str:
    return "analysis:" + hashlib.sha256(canonicalize_url(url).encode()).hexdigest()
