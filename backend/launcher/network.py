"""Local address discovery used to print reachable server URLs."""
from __future__ import annotations

import ipaddress
import socket


def local_ipv4_addresses() -> list[str]:
    """Return the IPv4 addresses this host can be reached on, loopback included."""

    addresses = {"127.0.0.1"}
    try:
        infos = socket.getaddrinfo(socket.gethostname(), None, socket.AF_INET)
    except OSError:
        infos = []
    for info in infos:
        addresses.add(info[4][0])

    # Connecting a UDP socket sends nothing but selects the outbound interface.
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as probe:
        try:
            probe.connect(("10.255.255.255", 1))
            addresses.add(probe.getsockname()[0])
        except OSError:
            pass

    return sorted(
        (address for address in addresses if ipaddress.ip_address(address).version == 4),
        key=ipaddress.IPv4Address,
    )


def server_urls(port: int) -> list[str]:
    """Build ``http://<ipv4>:<port>`` for every local IPv4 address."""

    return [f"http://{address}:{port}" for address in local_ipv4_addresses()]
