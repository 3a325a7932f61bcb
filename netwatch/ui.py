"""Curses drawing of the connection table, the footer and the interface menu."""

from __future__ import annotations

import curses
from collections.abc import Iterable, Sequence

from .formatting import format_bytes, format_rate
from .stats import Connection, InterfaceRate

MIN_TERMINAL_SIZE = 30
TABLE_WIDTH = 106

_COLUMNS = (2, 32, 62, 77, 92)
_HEADERS = ("Local Address", "Foreign Address", "Bytes", "Protocol", "Rate")
_RULE_LENGTH = 104
_MENU_ROWS = 6
_MENU_TOP = 3
_MENU_MARK = " # "
_ENTER = 10
_U64 = 1 << 64
_I64_LIMIT = 1 << 63


class TerminalTooSmallError(Exception):
    """Raised when the terminal cannot hold the interface."""

    def __init__(self, height: int, width: int) -> None:
        super().__init__("Terminal size too small. Resize and try again.")
        self.height = height
        self.width = width


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    """Write text, ignoring what falls outside the window."""
    try:
        win.addstr(y, x, text, attr)
    except curses.error:
        pass


def verify_terminal_size(height: int, width: int) -> None:
    """Raise TerminalTooSmallError if either dimension is below the minimum."""
    if height < MIN_TERMINAL_SIZE or width < MIN_TERMINAL_SIZE:
        raise TerminalTooSmallError(height, width)


def format_row(connection: Connection) -> tuple[str, str, str, str, str]:
    """The table cells of one connection, in column order."""
    count = connection.byte_count
    signed = count - _U64 if count >= _I64_LIMIT else count
    rate = count * 8 * 10 / 1024
    return (
        f"{connection.src_ip}:{connection.sport}",
        f"{connection.dst_ip}:{connection.dport}",
        f"{signed} B",
        connection.protocol,
        f"{rate:.2f} Kbps",
    )


def draw_table(win) -> None:
    """Draw the column headers and the rule beneath them."""
    for column, header in zip(_COLUMNS, _HEADERS):
        _put(win, 1, column, header)
    win.hline(2, 1, getattr(curses, "ACS_HLINE", ord("-")), _RULE_LENGTH)


def update_table(win, connections: Sequence[Connection], start_row: int) -> None:
    """Redraw the table with the rows visible from ``start_row`` on."""
    height, _ = win.getmaxyx()
    visible_rows = max(height - 4, 0)
    win.erase()
    win.box()
    draw_table(win)
    shown = connections[start_row:start_row + visible_rows]
    for offset, connection in enumerate(shown):
        for column, cell in zip(_COLUMNS, format_row(connection)):
            _put(win, 3 + offset, column, cell)
    win.refresh()


class Footer:
    """Footer panel holding running totals of traffic since start-up."""

    def __init__(self) -> None:
        self.rx = 0
        self.tx = 0
        self.total = 0

    def accumulate(self, rx_bytes: int, tx_bytes: int, total: int) -> None:
        """Add one sample's byte counts to the running totals."""
        self.rx = (self.rx + rx_bytes) % _U64
        self.tx = (self.tx + tx_bytes) % _U64
        self.total = (self.total + total) % _U64

    def lines(self, interface_name: str, rate: InterfaceRate) -> list[tuple[int, int, str]]:
        """The footer text as (row, column, text) entries."""
        return [
            (1, 2, f"RX: {format_bytes(self.rx)}"),
            (2, 2, f"TX: {format_bytes(self.tx)}"),
            (3, 2, f"Total: {format_bytes(self.total)}"),
            (1, 32, format_rate(rate.rx_rate)),
            (2, 32, format_rate(rate.tx_rate)),
            (1, 70, f"Interface:{interface_name}"),
            (3, 70, "PRESS Q TO EXIT..."),
        ]

    def draw(
        self,
        win,
        rx_bytes: int,
        tx_bytes: int,
        total: int,
        interface_name: str,
        rate: InterfaceRate,
    ) -> None:
        """Accumulate a sample and redraw the footer window."""
        self.accumulate(rx_bytes, tx_bytes, total)
        win.erase()
        win.box()
        for y, x, text in self.lines(interface_name, rate):
            _put(win, y, x, text)
        win.refresh()


def _draw_menu(win, names: list[str], current: int, top: int) -> None:
    height, width = win.getmaxyx()
    item_width = max(width - 4, 0)
    win.erase()
    win.box()
    _put(win, 0, 2, "Interfaces")
    for row, name in enumerate(names[top:top + _MENU_ROWS]):
        index = top + row
        selected = index == current
        mark = _MENU_MARK if selected else " " * len(_MENU_MARK)
        text = (mark + name).ljust(item_width)[:item_width]
        _put(win, _MENU_TOP + row, 2, text, curses.A_REVERSE if selected else 0)
    label = "Q - Exit"
    _put(win, height - 1, max(width // 2 - len(label) // 2, 0), label)
    win.refresh()


def interfaces_menu(win, interfaces: Iterable[str]) -> str | None:
    """Let the user pick an interface; return its name, or None on 'q'."""
    names = list(interfaces)
    win.keypad(True)
    current = 0
    top = 0
    while True:
        if current < top:
            top = current
        elif current >= top + _MENU_ROWS:
            top = current - _MENU_ROWS + 1
        _draw_menu(win, names, current, top)
        ch = win.getch()
        if ch == ord("q"):
            return None
        if ch == curses.KEY_DOWN and current < len(names) - 1:
            current += 1
        elif ch == curses.KEY_UP and current > 0:
            current -= 1
        elif ch == _ENTER:
            return names[current] if names else None