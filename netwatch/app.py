"""The interactive monitor: interface selection and the refresh loop."""

from __future__ import annotations

import argparse
import curses
import signal
import sys
import threading
import time

from .stats import (
    MAX_CONNECTIONS,
    Connection,
    InterfaceRate,
    calculate_interface_bytes,
    calculate_interface_rate,
    get_icmp_connections,
    get_interface_statistics,
    get_interfaces,
    get_tcp_connections,
    get_udp_connections,
)
from .ui import (
    TABLE_WIDTH,
    Footer,
    TerminalTooSmallError,
    interfaces_menu,
    update_table,
    verify_terminal_size,
)

ALPHA = 0.1
INTERVAL = 0.1

_stop = threading.Event()


class RateSmoother:
    """Exponential moving average of interface rates."""

    def __init__(self, alpha: float = ALPHA) -> None:
        self.alpha = alpha
        self.rx_rate = 0.0
        self.tx_rate = 0.0

    def update(self, rate: InterfaceRate) -> InterfaceRate:
        """Blend a new instantaneous rate in and return the smoothed rate."""
        keep = 1.0 - self.alpha
        self.rx_rate = self.alpha * rate.rx_rate + keep * self.rx_rate
        self.tx_rate = self.alpha * rate.tx_rate + keep * self.tx_rate
        return InterfaceRate(self.rx_rate, self.tx_rate)


def scroll(start_row: int, key: int, max_visible_rows: int, num_connections: int) -> int:
    """The first visible table row after handling an arrow key."""
    if key == curses.KEY_UP and start_row > 0:
        return start_row - 1
    if key == curses.KEY_DOWN and start_row + max_visible_rows < num_connections:
        return start_row + 1
    return start_row


def collect_connections(max_connections: int = MAX_CONNECTIONS) -> list[Connection]:
    """TCP, UDP and ICMP sockets, in that order, at most ``max_connections``."""
    connections: list[Connection] = []
    for reader in (get_tcp_connections, get_udp_connections, get_icmp_connections):
        remaining = max_connections - len(connections)
        if remaining <= 0:
            break
        try:
            connections.extend(reader(remaining))
        except OSError:
            continue
    return connections


def run(stdscr) -> int:
    """Drive the monitor on a curses screen until 'q' or SIGTERM."""
    _stop.clear()
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    stdscr.keypad(True)
    stdscr.nodelay(True)

    height, width = stdscr.getmaxyx()
    verify_terminal_size(height, width)

    menu_win = curses.newwin(height // 2, width // 2, height // 4, width // 4)
    try:
        interfaces = get_interfaces()
    except OSError:
        interfaces = []
    selected = interfaces_menu(menu_win, interfaces)

    if selected is None:
        try:
            stdscr.addstr(height - 2, 2, "No interface selected. Exiting.")
        except curses.error:
            pass
        stdscr.refresh()
        time.sleep(1)
        return 0

    stdscr.clear()
    stdscr.refresh()

    table_win = curses.newwin(height - 7, TABLE_WIDTH, 2, 2)
    table_win.box()
    footer_win = curses.newwin(5, TABLE_WIDTH, height - 5, 2)
    footer_win.box()
    stdscr.refresh()
    stdscr.getch()

    max_visible_rows = height - 10
    smoother = RateSmoother(ALPHA)
    footer = Footer()
    start_row = 0
    current = get_interface_statistics(selected)

    while not _stop.is_set():
        connections = collect_connections()
        last, current = current, get_interface_statistics(selected)
        moved = calculate_interface_bytes(current, last)
        rate = smoother.update(calculate_interface_rate(current, last, INTERVAL))

        update_table(table_win, connections, start_row)
        footer.draw(footer_win, moved.rx_bytes, moved.tx_bytes, moved.total, selected, rate)

        ch = stdscr.getch()
        if ch == ord("q"):
            break
        start_row = scroll(start_row, ch, max_visible_rows, len(connections))
        time.sleep(INTERVAL)
    return 0


def _on_sigterm(signum, frame) -> None:
    _stop.set()


def main(argv: list[str] | None = None) -> int:
    """Start the monitor; return the process exit status."""
    parser = argparse.ArgumentParser(
        prog="netwatch", description="Watch sockets and interface traffic."
    )
    parser.parse_args(argv)
    signal.signal(signal.SIGTERM, _on_sigterm)
    try:
        return curses.wrapper(run)
    except TerminalTooSmallError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())