"""Public IP lookup for the heartbeat agent.

Queries a plain-text lookup service (api.ipify.org style) that answers
GET / with the caller's address as the response body.
"""

import ipaddress
import logging
from typing import Optional

import httpx

logger = logging.getLogger("heartbeat-agent")


def get_public_ip(client: httpx.Client, url: str) -> Optional[str]:
    """Look up this host's public IP address.

    Args:
        client: HTTP client shared with the heartbeat loop
        url: Lookup service URL

    Returns:
        Public IP as a string, None if the lookup failed
    """
    try:
        response = client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"Public IP lookup failed: {e}")
        return None

    if response.status_code != 200:
        logger.warning(f"Public IP lookup returned status {response.status_code}")
        return None

    candidate = response.text.strip()
    try:
        return str(ipaddress.ip_address(candidate))
    except ValueError:
        logger.warning(f"Public IP lookup returned invalid address: {candidate[:64]!r}")
        return None
