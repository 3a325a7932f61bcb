"""Human-readable byte counts and bit rates."""

from __future__ import annotations

_BYTE_UNITS = ("B", "kB", "MB", "GB", "TB", "PB", "EB", "YB", "ZB")
_RATE_UNITS = ("bps", "kbps", "Mbps", "Gbps", "Tbps", "Pbps", "Ebps", "Ybps", "Zbps")


def _scale(value: float, units: tuple[str, ...]) -> str:
    scaled = float(value)
    index = 0
    while scaled >= 1024 and index < len(units) - 1:
        scaled /= 1024.0
        index += 1
    return f"{scaled:.2f} {units[index]}"


def format_bytes(value: int) -> str:
    """Format a byte count with a binary-scaled unit, e.g. ``'1.50 kB'``."""
    return _scale(value, _BYTE_UNITS)


def format_rate(value: float) -> str:
    """Format a bit rate; the fractional part is dropped before scaling."""
    return _scale(int(value), _RATE_UNITS)