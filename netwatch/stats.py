"""Connection tables and interface counters read from /proc and /sys."""

from __future__ import annotations

import os
import re
import socket
from dataclasses import dataclass
from itertools import islice
from pathlib import Path

TCP_PATH = "/proc/net/tcp"
UDP_PATH = "/proc/net/udp"
ICMP_PATH = "/proc/net/icmp"
NET_CLASS_ROOT = "/sys/class/net"

MAX_CONNECTIONS = 4096
MAX_INTERFACE_NAME = 63

_U16 = 0xFFFF
_U32 = 0xFFFFFFFF
_U64 = 0xFFFFFFFFFFFFFFFF

_HEX = re.compile(r"[+-]?(?:0[xX])?[0-9a-fA-F]+")
_DEC = re.compile(r"[+-]?[0-9]+")
_COUNTER = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class Connection:
    """One socket entry from a /proc/net table."""

    src_ip: str = "0.0.0.0"
    dst_ip: str = "0.0.0.0"
    protocol: str = ""
    sport: int = 0
    dport: int = 0
    byte_count: int = 0


@dataclass(frozen=True)
class InterfaceStat:
    """Byte counters of a network interface."""

    rx_bytes: int = 0
    tx_bytes: int = 0
    total: int = 0


@dataclass(frozen=True)
class InterfaceRate:
    """Receive and transmit rates in bits per second."""

    rx_rate: float = 0.0
    tx_rate: float = 0.0


class _NoMatch(Exception):
    """Raised by the scanner when the input stops matching."""


class _Scanner:
    """Reads numbers and literals from a line the way a scanf pattern does."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def _skip_space(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def number(self, base: int) -> int:
        self._skip_space()
        pattern = _HEX if base == 16 else _DEC
        match = pattern.match(self._text, self._pos)
        if match is None:
            raise _NoMatch
        self._pos = match.end()
        return int(match.group(), base)

    def literal(self, char: str) -> None:
        if self._text.startswith(char, self._pos):
            self._pos += len(char)
        else:
            raise _NoMatch


def hex_to_ip(hex_ip_addr: int) -> str:
    """Render an address as stored in /proc/net tables in dotted-quad form."""
    return socket.inet_ntoa((hex_ip_addr & _U32).to_bytes(4, "little"))


def parse_connection_line(line: str, protocol: str) -> Connection:
    """Parse one row of a /proc/net socket table.

    Fields that cannot be read are left at zero, and reading stops at the
    first field that does not match.
    """
    fields = {"local": 0, "sport": 0, "remote": 0, "dport": 0, "bytes": 0}
    scanner = _Scanner(line)
    try:
        scanner.number(10)
        scanner.literal(":")
        fields["local"] = scanner.number(16)
        scanner.literal(":")
        fields["sport"] = scanner.number(16)
        fields["remote"] = scanner.number(16)
        scanner.literal(":")
        fields["dport"] = scanner.number(16)
        for _ in range(4):
            scanner.number(16)
        for _ in range(2):
            scanner.number(10)
        fields["bytes"] = scanner.number(10)
    except _NoMatch:
        pass
    return Connection(
        src_ip=hex_to_ip(fields["local"]),
        dst_ip=hex_to_ip(fields["remote"]),
        protocol=protocol,
        sport=fields["sport"] & _U16,
        dport=fields["dport"] & _U16,
        byte_count=fields["bytes"] & _U64,
    )


def read_connections(
    path: str | os.PathLike[str], protocol: str, max_connections: int = MAX_CONNECTIONS
) -> list[Connection]:
    """Read at most ``max_connections`` entries from a socket table file."""
    with open(path, encoding="ascii", errors="replace") as handle:
        next(handle, None)
        return [
            parse_connection_line(line, protocol)
            for line in islice(handle, max(max_connections, 0))
        ]


def get_tcp_connections(
    max_connections: int = MAX_CONNECTIONS, path: str | os.PathLike[str] = TCP_PATH
) -> list[Connection]:
    """Return the TCP sockets of the host."""
    return read_connections(path, "TCP", max_connections)


def get_udp_connections(
    max_connections: int = MAX_CONNECTIONS, path: str | os.PathLike[str] = UDP_PATH
) -> list[Connection]:
    """Return the UDP sockets of the host."""
    return read_connections(path, "UDP", max_connections)


def get_icmp_connections(
    max_connections: int = MAX_CONNECTIONS, path: str | os.PathLike[str] = ICMP_PATH
) -> list[Connection]:
    """Return the ICMP sockets of the host."""
    return read_connections(path, "ICMP", max_connections)


def get_interfaces(root: str | os.PathLike[str] = NET_CLASS_ROOT) -> list[str]:
    """List the network interface names found under ``root``."""
    return [name[:MAX_INTERFACE_NAME] for name in os.listdir(root)]


def _read_counter(path: Path) -> int:
    with open(path, encoding="ascii", errors="replace") as handle:
        text = handle.read()
    match = _COUNTER.match(text)
    if match is None:
        raise ValueError(f"no counter value in {path}")
    return int(match.group(1)) & _U64


def get_interface_statistics(
    interface_name: str, root: str | os.PathLike[str] = NET_CLASS_ROOT
) -> InterfaceStat:
    """Read the rx and tx byte counters of an interface."""
    statistics = Path(root) / interface_name / "statistics"
    rx_path = statistics / "rx_bytes"
    tx_path = statistics / "tx_bytes"
    if not rx_path.is_file():
        raise FileNotFoundError(f"Unable to open {rx_path}")
    if not tx_path.is_file():
        raise FileNotFoundError(f"Unable to open {tx_path}")
    return InterfaceStat(rx_bytes=_read_counter(rx_path), tx_bytes=_read_counter(tx_path))


def calculate_interface_bytes(current: InterfaceStat, last: InterfaceStat) -> InterfaceStat:
    """Bytes moved between two samples, with 64-bit counter wrap-around."""
    rx = (current.rx_bytes - last.rx_bytes) & _U64
    tx = (current.tx_bytes - last.tx_bytes) & _U64
    return InterfaceStat(rx_bytes=rx, tx_bytes=tx, total=(rx + tx) & _U64)


def calculate_interface_rate(
    current: InterfaceStat, last: InterfaceStat, interval: float
) -> InterfaceRate:
    """Bit rates between two samples taken ``interval`` seconds apart."""
    rx_diff = (current.rx_bytes - last.rx_bytes) & _U64
    tx_diff = (current.tx_bytes - last.tx_bytes) & _U64
    rx_rate = rx_diff * 8.0 / interval if rx_diff else 0.0
    tx_rate = tx_diff * 8.0 / interval if tx_diff else 0.0
    return InterfaceRate(rx_rate=rx_rate, tx_rate=tx_rate)