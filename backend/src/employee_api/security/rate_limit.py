"""Rate limiting for the authentication endpoints."""

from functools import lru_cache
from ipaddress import IPv4Network, IPv6Network, ip_address, ip_network

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from employee_api.config import get_settings

# Loopback and private ranges, trusted as proxies only in development
DEVELOPMENT_PROXIES = ("127.0.0.1", "::1", "10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16")


@lru_cache
def trusted_proxy_networks() -> tuple[IPv4Network | IPv6Network, ...]:
    """Networks whose ``X-Forwarded-For`` header is believed.

    Single addresses become one-host networks. Entries that do not parse
    are ignored.
    """
    settings = get_settings()
    entries = settings.trusted_proxies_list
    if not entries and settings.environment == "development":
        entries = list(DEVELOPMENT_PROXIES)

    networks = []
    for entry in entries:
        try:
            networks.append(ip_network(entry, strict=False))
        except ValueError:
            continue
    return tuple(networks)


def is_trusted_proxy(host: str) -> bool:
    """Check whether the direct peer is a trusted reverse proxy."""
    try:
        addr = ip_address(host)
    except ValueError:
        # Test clients report names such as "testclient"
        return False
    return any(addr in network for network in trusted_proxy_networks())


def get_real_client_ip(request: Request) -> str:
    """Client IP used as the rate limit key and in security events.

    The first ``X-Forwarded-For`` hop is used only when the request came
    through a trusted proxy and that hop is a valid address.
    """
    peer = get_remote_address(request)
    if not is_trusted_proxy(peer):
        return peer

    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    try:
        ip_address(first_hop)
    except ValueError:
        return peer
    return first_hop


_settings = get_settings()

limiter = Limiter(
    key_func=get_real_client_ip,
    default_limits=[f"{_settings.rate_limit_default}/minute"],
    storage_uri=_settings.rate_limit_storage_uri or "memory://",
    enabled=_settings.rate_limit_enabled,
)

AUTH_LOGIN_LIMIT = f"{_settings.rate_limit_auth_login}/minute"
AUTH_REGISTER_LIMIT = f"{_settings.rate_limit_auth_register}/minute"
