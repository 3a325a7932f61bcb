# netwatch

A small curses monitor for Linux that lists the host's TCP, UDP and ICMP
sockets and shows live traffic on one network interface.

## Install

    pip install .

## Run

    netwatch

The command takes no options besides `--help`.

1. A menu lists the interfaces found under `/sys/class/net`. Move with the
   up and down arrows, press Enter to choose one, or `q` to leave (the
   program then prints "No interface selected. Exiting." and stops).
2. The main screen refreshes about every 0.1 seconds and shows:
   - a table of sockets read from `/proc/net/tcp`, `/proc/net/udp` and
     `/proc/net/icmp` (in that order, at most 4096 in all) with the columns
     Local Address, Foreign Address, Bytes, Protocol and Rate; a socket table
     that cannot be opened is skipped;
   - a footer with the received, sent and total bytes counted since the
     screen opened, the receive and transmit bit rates smoothed with an
     exponential moving average (weight 0.1 for each new sample), and the
     interface name.

Use the up and down arrows to scroll the table and `q` to quit; SIGTERM also
ends the loop. The terminal must be at least 30 rows by 30 columns, otherwise
`netwatch` prints "Terminal size too small. Resize and try again." and exits
with status 1. The table and footer are 106 columns wide.

## Library use

The data collection and formatting helpers work without a terminal.

```python
from netwatch.stats import (
    get_tcp_connections,
    get_interface_statistics,
    calculate_interface_bytes,
    calculate_interface_rate,
)
from netwatch.formatting import format_bytes, format_rate

for conn in get_tcp_connections(4096, "/proc/net/tcp"):
    print(conn.protocol, f"{conn.src_ip}:{conn.sport}", f"{conn.dst_ip}:{conn.dport}")

before = get_interface_statistics("lo", "/sys/class/net")
after = get_interface_statistics("lo", "/sys/class/net")
moved = calculate_interface_bytes(after, before)
rate = calculate_interface_rate(after, before, 0.1)

print(format_bytes(moved.total))    # e.g. "0.00 B"
print(format_rate(1_500_000))       # "1.43 Mbps"
```

`netwatch.stats` provides:

- `Connection`, `InterfaceStat` and `InterfaceRate`, frozen dataclasses;
- `parse_connection_line`, `read_connections`, `get_tcp_connections`,
  `get_udp_connections` and `get_icmp_connections` for socket tables (each
  reader skips the header line and takes a path, so any file in that layout
  can be read);
- `hex_to_ip` to turn a table address into dotted-quad form;
- `get_interfaces` and `get_interface_statistics` for `/sys/class/net`
  (a missing counter file raises `FileNotFoundError`);
- `calculate_interface_bytes` and `calculate_interface_rate`, which treat the
  counters as unsigned 64-bit values and so handle wrap-around.

`netwatch.formatting` scales values by 1024 with two decimals: `format_bytes`
uses the units B, kB, MB, GB, TB, PB, EB, YB, ZB and `format_rate` uses bps,
kbps, Mbps and so on, dropping the fractional part of the rate first.

`netwatch.app` holds `RateSmoother`, `scroll`, `collect_connections`, `run`
(the curses loop) and `main`; `netwatch.ui` holds the drawing helpers,
`Footer` and `interfaces_menu`.

## Limits

- Linux only: everything is read from `/proc/net` and `/sys/class/net`.
- Only IPv4 socket tables are read.
- The Rate column is derived from each socket's byte count alone; it is not
  measured over time.

## Tests

    pip install .[test]
    pytest