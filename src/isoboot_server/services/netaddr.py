from __future__ import annotations

import ipaddress
import socket

import psutil


def local_ipv4_addresses() -> list[str]:
    """Non-loopback IPv4 addresses of this host, in interface order."""
    addresses: list[str] = []
    for _iface, entries in psutil.net_if_addrs().items():
        for entry in entries:
            if entry.family != socket.AF_INET:
                continue
            ip = ipaddress.IPv4Address(entry.address)
            if ip.is_loopback:
                continue
            addresses.append(str(ip))
    return addresses
