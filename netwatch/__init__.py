"""Curses monitor for host sockets and network interface traffic on Linux."""

__version__ = "0.1.0"
__all__ = ["app", "formatting", "stats", "ui"]