import socket

import pytest

from netwatch.stats import (
    Connection,
    InterfaceStat,
    calculate_interface_bytes,
    calculate_interface_rate,
    get_icmp_connections,
    get_interface_statistics,
    get_interfaces,
    get_tcp_connections,
    get_udp_connections,
    hex_to_ip,
    parse_connection_line,
    read_connections,
)

HEADER = "  sl  local_address rem_address   st tx_queue rx_queue tr tm->when retrnsmt   uid  timeout inode\n"


def proc_hex(ip):
    return int.from_bytes(socket.inet_aton(ip), "little")


def proc_line(index, src, sport, dst, dport):
    return (
        f"{index:4d}: {proc_hex(src):08X}:{sport:04X} {proc_hex(dst):08X}:{dport:04X} "
        "0A 00000000:00000000 00:00000000 00000000     0        0 12345 1 0000000000000000 100 0 0 10 0\n"
    )


def write_table(path, rows):
    path.write_text(HEADER + "".join(rows))
    return path


def test_hex_to_ip_loopback():
    assert hex_to_ip(0x0100007F) == "127.0.0.1"


@pytest.mark.parametrize("ip", ["10.1.2.3", "192.168.0.254", "0.0.0.0", "255.255.255.255"])
def test_hex_to_ip_round_trip(ip):
    assert hex_to_ip(proc_hex(ip)) == ip


def test_hex_to_ip_keeps_low_32_bits():
    value = proc_hex("172.16.5.9")
    assert hex_to_ip(value + (7 << 32)) == hex_to_ip(value)


def test_parse_real_line():
    conn = parse_connection_line(proc_line(0, "10.0.0.5", 22, "10.0.0.9", 51234), "TCP")
    assert conn.src_ip == "10.0.0.5"
    assert conn.dst_ip == "10.0.0.9"
    assert conn.sport == 22
    assert conn.dport == 51234
    assert conn.protocol == "TCP"
    # The tx_queue:rx_queue pair stops the scan before the byte field.
    assert conn.byte_count == 0


def test_parse_reads_bytes_when_fields_are_plain():
    line = f"0: {proc_hex('10.0.0.1'):08X}:0050 00000000:0000 0A 00 00 00 0 0 98765\n"
    conn = parse_connection_line(line, "UDP")
    assert conn.byte_count == 98765
    assert conn.sport == 0x50


def test_parse_short_line_leaves_defaults():
    conn = parse_connection_line(f"3: {proc_hex('10.9.8.7'):08X}:1F90\n", "TCP")
    assert conn.src_ip == "10.9.8.7"
    assert conn.sport == 0x1F90
    assert conn == Connection(src_ip="10.9.8.7", protocol="TCP", sport=0x1F90)


def test_parse_port_truncated_to_16_bits():
    line = f"0: {proc_hex('10.0.0.1'):08X}:10050 00000000:0000\n"
    assert parse_connection_line(line, "TCP").sport == 0x0050


def test_read_connections_respects_limit(tmp_path):
    rows = [proc_line(i, "10.0.0.1", 1000 + i, "10.0.0.2", 2000 + i) for i in range(3)]
    path = write_table(tmp_path / "tcp", rows)
    conns = read_connections(path, "TCP", 2)
    assert [c.sport for c in conns] == [1000, 1001]


def test_read_connections_skips_header_only(tmp_path):
    path = write_table(tmp_path / "tcp", [])
    assert read_connections(path, "TCP", 10) == []


@pytest.mark.parametrize(
    "reader, protocol",
    [(get_tcp_connections, "TCP"), (get_udp_connections, "UDP"), (get_icmp_connections, "ICMP")],
)
def test_protocol_readers(tmp_path, reader, protocol):
    path = write_table(tmp_path / "table", [proc_line(0, "10.2.3.4", 53, "10.4.3.2", 40000)])
    conns = reader(10, path)
    assert len(conns) == 1
    assert conns[0].protocol == protocol
    assert conns[0].src_ip == "10.2.3.4"


def test_missing_table_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_tcp_connections(10, tmp_path / "absent")


def test_get_interfaces(tmp_path):
    for name in ("lo", "eth0", "wlan0"):
        (tmp_path / name).mkdir()
    assert sorted(get_interfaces(tmp_path)) == ["eth0", "lo", "wlan0"]


def test_get_interfaces_truncates_long_names(tmp_path):
    (tmp_path / ("x" * 80)).mkdir()
    names = get_interfaces(tmp_path)
    assert len(names) == 1
    assert len(names[0]) == 63


def test_get_interfaces_missing_root(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_interfaces(tmp_path / "none")


def make_iface(root, name, rx, tx):
    stats = root / name / "statistics"
    stats.mkdir(parents=True)
    (stats / "rx_bytes").write_text(f"{rx}\n")
    (stats / "tx_bytes").write_text(f"{tx}\n")


def test_get_interface_statistics(tmp_path):
    make_iface(tmp_path, "eth0", 123456, 7890)
    stat = get_interface_statistics("eth0", tmp_path)
    assert stat.rx_bytes == 123456
    assert stat.tx_bytes == 7890
    assert stat.total == 0


def test_get_interface_statistics_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_interface_statistics("eth9", tmp_path)


def test_get_interface_statistics_missing_tx(tmp_path):
    make_iface(tmp_path, "eth0", 1, 2)
    (tmp_path / "eth0" / "statistics" / "tx_bytes").unlink()
    with pytest.raises(FileNotFoundError):
        get_interface_statistics("eth0", tmp_path)


def test_get_interface_statistics_garbage(tmp_path):
    make_iface(tmp_path, "eth0", 1, 2)
    (tmp_path / "eth0" / "statistics" / "rx_bytes").write_text("garbage")
    with pytest.raises(ValueError):
        get_interface_statistics("eth0", tmp_path)


def test_calculate_bytes_difference():
    last = InterfaceStat(rx_bytes=1000, tx_bytes=500)
    current = InterfaceStat(rx_bytes=4000, tx_bytes=2500)
    result = calculate_interface_bytes(current, last)
    assert last.rx_bytes + result.rx_bytes == current.rx_bytes
    assert last.tx_bytes + result.tx_bytes == current.tx_bytes
    assert result.total == result.rx_bytes + result.tx_bytes


def test_calculate_bytes_no_change():
    stat = InterfaceStat(rx_bytes=42, tx_bytes=42)
    assert calculate_interface_bytes(stat, stat) == InterfaceStat()


def test_calculate_bytes_wraps_like_64_bit_counter():
    last = InterfaceStat(rx_bytes=500, tx_bytes=0)
    current = InterfaceStat(rx_bytes=100, tx_bytes=0)
    result = calculate_interface_bytes(current, last)
    assert result.rx_bytes > 0
    assert (last.rx_bytes + result.rx_bytes) % 2**64 == current.rx_bytes


def test_calculate_rate_consistent_with_bytes():
    last = InterfaceStat(rx_bytes=0, tx_bytes=100)
    current = InterfaceStat(rx_bytes=2048, tx_bytes=612)
    moved = calculate_interface_bytes(current, last)
    rate = calculate_interface_rate(current, last, 0.1)
    assert rate.rx_rate * 0.1 / 8 == pytest.approx(moved.rx_bytes)
    assert rate.tx_rate * 0.1 / 8 == pytest.approx(moved.tx_bytes)


def test_calculate_rate_zero_without_traffic():
    stat = InterfaceStat(rx_bytes=9, tx_bytes=9)
    rate = calculate_interface_rate(stat, stat, 0.1)
    assert (rate.rx_rate, rate.tx_rate) == (0.0, 0.0)