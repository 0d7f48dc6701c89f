from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit
from typing import Optional

MAX_URL_LENGTH = 2083

ALLOWED_SCHEMES = ("http", "https")

DEFAULT_PORTS = {"http": 80, "https": 443}


def _remove_dot_segments(path: str) -> str:
    """Resolve "." and ".." segments of an absolute path (RFC 3986 5.2.4)."""
    segments = path.split("/")[1:]
    output: list[str] = []
    for i, segment in enumerate(segments):
        last = i == len(segments) - 1
        if segment == "..":
            if output:
                output.pop()
            if last:
                output.append("")
        elif segment == ".":
            if last:
                output.append("")
        else:
            output.append(segment)
    return "/" + "/".join(output)


def _finalize(href: str) -> Optional[str]:
    """Strip the fragment and enforce scheme/host rules on an absolute URL."""
    try:
        href, _ = urldefrag(href)
        parts = urlsplit(href)
        # Raises ValueError on a malformed port
        port = parts.port
    except ValueError:
        return None
    if parts.scheme not in ALLOWED_SCHEMES or not parts.netloc:
        return None

    netloc = parts.netloc
    if port == DEFAULT_PORTS[parts.scheme] or netloc.endswith(":"):
        netloc = netloc[: netloc.rfind(":")]
    if not netloc:
        return None

    path = _remove_dot_segments(parts.path) if parts.path.startswith("/") else "/"
    canonical = urlunsplit((parts.scheme, netloc, path, parts.query, ""))
    if len(canonical) > MAX_URL_LENGTH:
        return None
    return canonical


def canonicalize(raw: str | None, base: str) -> Optional[str]:
    """
    Resolve a raw href against base into a canonical URL.

    Returns None for non-http(s) schemes, hostless or malformed input.
    Default ports and dot segments are removed, so equal resources compare
    equal as strings.
    """
    if raw is None:
        return None
    try:
        href = urljoin(base, raw.strip())
    except ValueError:
        return None
    return _finalize(href)


def validate_seed(raw: str | None) -> Optional[str]:
    """Canonicalize an absolute URL without a base (seed URLs, absolute links)."""
    if not raw:
        return None
    return _finalize(raw.strip())
