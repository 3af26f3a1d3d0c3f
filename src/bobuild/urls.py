"""Endpoint URL construction for the Bobuild API.

Every API route lives under the fixed /_api prefix of the target host.
"""

from urllib.parse import urlsplit, urlunsplit

__all__ = ["API_PREFIX", "is_absolute_url", "make_url", "with_page"]

API_PREFIX = "/_api"

_SCHEMES = ("http://", "https://")


def is_absolute_url(value: str) -> bool:
    """Return True if value starts with an http:// or https:// scheme."""
    return value.startswith(_SCHEMES)


def _has_api_prefix(path: str) -> bool:
    return path == API_PREFIX or path.startswith((API_PREFIX + "/", API_PREFIX + "?"))


def make_url(host: str, endpoint: str, use_tls: bool = True) -> str:
    """Compose the full URL for an API endpoint.

    Args:
        host: Configured host, e.g. "app.example.com". A host that already
            carries a scheme ("http://127.0.0.1:8080") is used as-is.
        endpoint: Relative path ("/users/123?active=1") or an absolute URL.
            An absolute URL keeps its own scheme and host.
        use_tls: Pick https over http when the base is built from host.

    Returns:
        base + "/_api" + path. No well-formedness checks are made on path.

    Example:
        >>> make_url("app.example.com", "/users/1")
        'https://app.example.com/_api/users/1'
        >>> make_url("app.example.com", "http://other.example.com/users/1")
        'http://other.example.com/_api/users/1'
    """
    if is_absolute_url(endpoint):
        parts = urlsplit(endpoint)
        base = f"{parts.scheme}://{parts.netloc}"
        path = urlunsplit(("", "", parts.path, parts.query, parts.fragment))
        # An absolute URL copied from a previous response may already be prefixed
        if _has_api_prefix(path):
            return base + path
    elif is_absolute_url(host):
        base = host.rstrip("/")
        path = endpoint
    else:
        scheme = "https" if use_tls else "http"
        base = f"{scheme}://{host}"
        path = endpoint

    return base + API_PREFIX + path


def with_page(endpoint: str, page: int) -> str:
    """Append the zero-based page query parameter to an endpoint."""
    separator = "&" if "?" in endpoint else "?"
    return f"{endpoint}{separator}page={page}"
