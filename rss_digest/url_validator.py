"""
URL Validator - Keep caller-supplied feed URLs pointed at the public web.

Ad-hoc sources arrive with the request, so their URLs are untrusted. This
module rejects URLs that would make the fetcher:
- Access internal network services (localhost, 127.0.0.1, etc.)
- Probe cloud metadata endpoints (169.254.169.254)
- Access internal infrastructure via private IP ranges
"""

import ipaddress
from urllib.parse import urlparse


class SSRFError(Exception):
    """Raised when a URL fails SSRF validation."""

    pass


# Blocked IP ranges (private, loopback, link-local, metadata)
BLOCKED_IP_RANGES = [
    # IPv4 private ranges
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    # Loopback
    ipaddress.ip_network("127.0.0.0/8"),
    # Link-local
    ipaddress.ip_network("169.254.0.0/16"),
    # Reserved
    ipaddress.ip_network("0.0.0.0/8"),
    # IPv6 equivalents
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]

BLOCKED_HOSTNAMES = {
    "localhost",
    "localhost.localdomain",
    "metadata",
    "metadata.google.internal",
}

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")

ALLOWED_SCHEMES = {"http", "https"}


def is_ip_blocked(ip_str: str) -> bool:
    """Check if an IP address is in a blocked range."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    return any(ip in network for network in BLOCKED_IP_RANGES)


def validate_url(url: str) -> str:
    """
    Validate an absolute http(s) URL without network lookups.

    Args:
        url: The URL to validate

    Returns:
        The validated URL

    Raises:
        SSRFError: If the URL fails validation
    """
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise SSRFError(f"Invalid URL format: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise SSRFError(f"URL scheme '{parsed.scheme}' is not allowed. Use http or https.")

    if not parsed.hostname:
        raise SSRFError("URL must include a hostname")

    hostname = parsed.hostname.lower()

    try:
        parsed.port
    except ValueError as e:
        raise SSRFError(f"Invalid URL port: {e}")

    if hostname in BLOCKED_HOSTNAMES:
        raise SSRFError(f"Access to '{hostname}' is not allowed")

    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        if hostname.endswith(BLOCKED_SUFFIXES):
            raise SSRFError(f"Access to '{hostname}' is not allowed")
    else:
        if is_ip_blocked(str(ip)):
            raise SSRFError(f"Access to IP address '{ip}' is not allowed")

    return url
