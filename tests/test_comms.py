import socket

import pytest

from quicksplash.comms import Connection, ConnectionClosed, MalformedHeader, send_packet
from quicksplash.models import Packet, PacketType
from quicksplash.protocol import pack_header, str_to_packet


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def test_round_trip(pair):
    left, right = pair
    packet = str_to_packet(PacketType.REPLY, "a witty reply")
    send_packet(left, packet)
    received = Connection(right).read()
    assert received == packet


def test_connection_send_round_trip(pair):
    left, right = pair
    packet = str_to_packet(PacketType.VOTE, "2")
    Connection(left).send(packet)
    assert Connection(right).read() == packet


def test_read_with_nothing_pending_returns_none(pair):
    _, right = pair
    assert Connection(right).read() is None


def test_partial_reads_assemble(pair):
    left, right = pair
    packet = str_to_packet(PacketType.JOIN, "bob")
    wire = pack_header(packet) + packet.data
    conn = Connection(right)
    left.sendall(wire[:3])
    assert conn.read() is None
    left.sendall(wire[3:10])
    assert conn.read() is None
    left.sendall(wire[10:])
    assert conn.read() == packet


def test_zero_length_packet(pair):
    left, right = pair
    send_packet(left, Packet(PacketType.START, b""))
    received = Connection(right).read()
    assert received.type is PacketType.START
    assert received.data == b""


def test_consecutive_packets(pair):
    left, right = pair
    first = str_to_packet(PacketType.REPLY, "one")
    second = str_to_packet(PacketType.REPLY, "two")
    send_packet(left, first)
    send_packet(left, second)
    conn = Connection(right)
    assert [conn.read(), conn.read()] == [first, second]


def test_peer_close_raises(pair):
    left, right = pair
    left.close()
    with pytest.raises(ConnectionClosed):
        Connection(right).read()


def test_unknown_type_raises_malformed(pair):
    left, right = pair
    header = bytearray(pack_header(Packet(PacketType.JOIN, b"")))
    header[0] = 77
    left.sendall(bytes(header))
    with pytest.raises(MalformedHeader):
        Connection(right).read()


def test_fileno_matches_socket(pair):
    _, right = pair
    assert Connection(right).fileno() == right.fileno()


def test_close_closes_socket(pair):
    left, _ = pair
    with Connection(left) as conn:
        pass
    assert conn.sock.fileno() == -1