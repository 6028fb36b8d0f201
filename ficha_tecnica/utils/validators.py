"""Input validation utilities."""

import ipaddress
import logging
import socket
from typing import Optional, Union
from urllib.parse import urlparse

from ficha_tecnica.utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

_BLOCKED_HOSTS = {"localhost", "0.0.0.0"}


def validate_url(url: str) -> str:
    """
    Validate a recipe link before fetching it.

    Only http(s) URLs are accepted, and every address the hostname resolves
    to must be public, so the fetcher cannot be pointed at the server's own
    network. The fetcher repeats this check for each redirect hop.

    Returns:
        The stripped URL

    Raises:
        ValidationError: If the URL is invalid, does not resolve or points
            to a private address
    """
    if not url or not isinstance(url, str):
        raise ValidationError("URL must be a non-empty string")

    url = url.strip()
    parsed = urlparse(url)

    if parsed.scheme not in ("http", "https"):
        raise ValidationError("URL must use http or https protocol")

    hostname = parsed.hostname
    if not hostname:
        raise ValidationError("URL must have a valid hostname")

    if hostname.lower() in _BLOCKED_HOSTS:
        raise ValidationError("URL cannot point to localhost or private IPs")

    ip = _as_ip(hostname)
    if ip is not None:
        _check_public(ip, hostname)
        return url

    try:
        addrinfos = socket.getaddrinfo(hostname, None)
    except socket.gaierror as e:
        logger.warning("DNS resolution failed for %s", hostname)
        raise ValidationError(f"Could not resolve hostname {hostname}") from e

    for _, _, _, _, sockaddr in addrinfos:
        resolved = _as_ip(str(sockaddr[0]).split("%", 1)[0])
        if resolved is None:
            raise ValidationError(f"Unexpected address for hostname {hostname}")
        _check_public(resolved, hostname)

    return url


def _check_public(ip: Union[ipaddress.IPv4Address, ipaddress.IPv6Address], hostname: str) -> None:
    if (
        ip.is_private
        or ip.is_loopback
        or ip.is_link_local
        or ip.is_reserved
        or ip.is_multicast
        or ip.is_unspecified
    ):
        logger.warning("Blocked private IP %s for hostname %s", ip, hostname)
        raise ValidationError("URL cannot point to private IP ranges")


def _as_ip(hostname: str) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
    try:
        return ipaddress.ip_address(hostname)
    except ValueError:
        return None


def clean_field(value: Optional[str]) -> Optional[str]:
    """Treat missing and whitespace-only form fields alike."""
    if value is None or not value.strip():
        return None
    return value
