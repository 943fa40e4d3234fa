"""
URL Validator - check subscription URLs before anything touches the
network or the store.

Two levels:
- validate_feed_url: syntax only, the string must be an absolute http(s) URL
- validate_public_url: additionally refuses internal network targets
  (localhost, private ranges, cloud metadata) to prevent SSRF
"""

import ipaddress
import socket
from urllib.parse import urlparse

from .exceptions import BadInput


class SSRFError(BadInput):
    """Raised when a URL points at an internal network target."""

    pass


# Networks a feed fetch must never reach
BLOCKED_IP_RANGES = [
    ipaddress.ip_network(cidr)
    for cidr in (
        "0.0.0.0/8",        # "this" network
        "10.0.0.0/8",       # RFC 1918
        "100.64.0.0/10",    # carrier-grade NAT
        "127.0.0.0/8",      # loopback
        "169.254.0.0/16",   # link-local, cloud metadata
        "172.16.0.0/12",    # RFC 1918
        "192.168.0.0/16",   # RFC 1918
        "224.0.0.0/4",      # multicast
        "::/128",
        "::1/128",
        "fc00::/7",         # unique local
        "fe80::/10",        # link-local
        "ff00::/8",         # multicast
    )
]

BLOCKED_HOSTNAMES = frozenset({
    "localhost",
    "localhost.localdomain",
    "ip6-localhost",
    "ip6-loopback",
    "metadata",
    "metadata.google.internal",
})

BLOCKED_SUFFIXES = (".local", ".internal", ".localhost")

ALLOWED_SCHEMES = frozenset({"http", "https"})


def is_ip_blocked(ip_str: str) -> bool:
    """True if ip_str is an address inside a blocked network."""
    try:
        ip = ipaddress.ip_address(ip_str)
    except ValueError:
        return False
    # ::ffff:127.0.0.1 reaches the IPv4 loopback
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    return any(ip in network for network in BLOCKED_IP_RANGES)


def validate_feed_url(url: str) -> str:
    """
    Check that url is an absolute http(s) URL with a host.

    Performs no I/O and does not normalize: the returned value is the
    input string, which is what gets stored and deduplicated on.

    Raises:
        BadInput: If the string is not a usable absolute URL
    """
    if not isinstance(url, str) or not url:
        raise BadInput("A feed URL is required")

    try:
        parsed = urlparse(url)
        # Accessing port validates it
        parsed.port
    except ValueError as e:
        raise BadInput(f"Invalid URL: {e}")

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise BadInput(f"Invalid URL: scheme must be http or https, got {parsed.scheme!r}")

    if not parsed.hostname:
        raise BadInput("Invalid URL: a hostname is required")

    if any(ch.isspace() for ch in url):
        raise BadInput("Invalid URL: whitespace is not allowed")

    return url


def validate_public_url(url: str, resolve_dns: bool = True) -> str:
    """
    Validate url and refuse internal network targets.

    Args:
        url: The URL to validate
        resolve_dns: Whether to resolve DNS and check the resulting addresses

    Returns:
        The validated URL

    Raises:
        BadInput: If the URL is malformed
        SSRFError: If the URL targets a blocked host or address
    """
    validate_feed_url(url)
    parsed = urlparse(url)
    hostname = parsed.hostname.lower()

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

    if resolve_dns:
        try:
            addrinfo = socket.getaddrinfo(hostname, parsed.port or 80, proto=socket.IPPROTO_TCP)
        except socket.gaierror:
            # Resolution failures surface as network errors at fetch time
            return url
        for _family, _type, _proto, _canonname, sockaddr in addrinfo:
            ip_str = sockaddr[0]
            if is_ip_blocked(ip_str):
                raise SSRFError(
                    f"Hostname '{hostname}' resolves to blocked IP address '{ip_str}'"
                )

    return url
