"""Loopback port availability checks"""

import asyncio
import logging
import socket
from typing import Iterable, Optional, Sequence

from settings import PORT_CHECK_HOSTS, PORT_CHECK_TIMEOUT

logger = logging.getLogger(__name__)


async def _accepts_connections(port: int, host: str, timeout: float) -> bool:
    """Return True if something accepts a TCP connection on host:port"""
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
    except (OSError, asyncio.TimeoutError):
        return False

    writer.close()
    try:
        await writer.wait_closed()
    except OSError:
        pass
    return True


def _can_bind(port: int) -> bool:
    """Try to bind and listen on every interface, the way the callback server would"""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("", port))
            sock.listen(1)
    except OSError:
        return False
    return True


async def is_port_available(
    port: int,
    hosts: Sequence[str] = PORT_CHECK_HOSTS,
    timeout: float = PORT_CHECK_TIMEOUT,
) -> bool:
    """Check whether a port is free for the callback server

    A port is available only if no loopback host accepts a connection on it
    and a bind+listen attempt succeeds. The result is advisory: another
    process can still take the port before the server binds.

    Args:
        port: Port number to check
        hosts: Loopback-equivalent hosts probed concurrently
        timeout: Connect timeout per host in seconds

    Returns:
        True if the port looks free
    """
    results = await asyncio.gather(
        *(_accepts_connections(port, host, timeout) for host in hosts)
    )
    if any(results):
        logger.debug(f"Port {port} accepts connections, treating it as in use")
        return False

    available = _can_bind(port)
    if not available:
        logger.debug(f"Port {port} cannot be bound")
    return available


async def find_available_port(ports: Iterable[int], **kwargs) -> Optional[int]:
    """Return the first available port from the candidates, or None"""
    for port in ports:
        if await is_port_available(port, **kwargs):
            return port
    return None
