"""
URL utility functions for the statement client.
"""

from urllib.parse import urlsplit, urlunsplit


def normalize_host_with_protocol(host: str) -> str:
    """
    Normalize a workspace hostname by ensuring it has a protocol and removing
    trailing slashes.

    Args:
        host: Workspace hostname which may or may not include a protocol prefix
              (https:// or http://) and may or may not have a trailing slash

    Returns:
        Normalized hostname with a lower-case protocol prefix and no trailing slash

    Examples:
        normalize_host_with_protocol("myserver.com") -> "https://myserver.com"
        normalize_host_with_protocol("HTTP://myserver.com/") -> "http://myserver.com"
    """
    host = host.strip().rstrip("/")

    lowered = host.lower()
    for scheme in ("https://", "http://"):
        if lowered.startswith(scheme):
            return scheme + host[len(scheme) :]

    return f"https://{host}"


def redact_url(url: str) -> str:
    """Drop the query string and fragment from a URL before it is logged."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
