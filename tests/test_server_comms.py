import socket
import time

import pytest

from quicksplash.comms import Connection, ConnectionClosed, send_packet
from quicksplash.models import LOBBY_SIZE, Packet, PacketType, PlayerState
from quicksplash.protocol import HEADER_SIZE, pack_header, str_to_packet, unpack_header
from quicksplash.server_comms import Roster


def _recv_exact(sock, n):
    buf = b""
    while len(buf) < n:
        chunk = sock.recv(n - len(buf))
        if not chunk:
            raise EOFError
        buf += chunk
    return buf


def _recv_packet(sock):
    packet_type, length = unpack_header(_recv_exact(sock, HEADER_SIZE))
    return Packet(packet_type, _recv_exact(sock, length))


@pytest.fixture
def wired():
    roster = Roster()
    clients = []
    for index, player in enumerate(roster.players[:2]):
        server_side, client_side = socket.socketpair()
        client_side.settimeout(2)
        player.connection = Connection(server_side)
        player.p_id = index + 1
        player.name = f"p{index}"
        player.state = PlayerState.READY
        clients.append(client_side)
    roster.player_count = 2
    yield roster, clients
    for client in clients:
        client.close()
    for player in roster.players:
        if player.connection is not None:
            player.connection.close()


def test_new_roster_has_lobby_size_empty_slots():
    roster = Roster()
    assert len(roster.players) == LOBBY_SIZE
    assert roster.player_count == 0
    assert all(p.state is PlayerState.DISCONNECTED for p in roster.players)


def test_reset_clears_slots_in_place(wired):
    roster, _ = wired
    first = roster.players[0]
    roster.reset()
    assert roster.players[0] is first
    assert roster.player_count == 0
    assert all(not p.connected and p.name == "" and p.active is None for p in roster.players)


def test_broadcast_reaches_joined_players(wired):
    roster, clients = wired
    packet = str_to_packet(PacketType.CARD, "prompt")
    roster.broadcast(packet)
    assert [_recv_packet(c) for c in clients] == [packet, packet]


def test_broadcast_skips_players_beyond_count(wired):
    roster, clients = wired
    roster.player_count = 1
    roster.broadcast(str_to_packet(PacketType.VOTE, "x"))
    assert _recv_packet(clients[0]).type is PacketType.VOTE
    clients[1].settimeout(0.2)
    with pytest.raises(TimeoutError):
        clients[1].recv(1)


def test_broadcast_raises_when_peer_gone(wired):
    roster, clients = wired
    clients[0].close()
    with pytest.raises(OSError):
        roster.broadcast(str_to_packet(PacketType.CARD, "x" * 4096))


def test_read_stores_complete_packet(wired):
    roster, clients = wired
    packet = str_to_packet(PacketType.REPLY, "an answer")
    send_packet(clients[0], packet)
    time.sleep(0.05)
    player = roster.players[0]
    got = roster.read(player)
    assert got == packet
    assert player.active == packet
    assert player.ready


def test_read_partial_returns_none(wired):
    roster, clients = wired
    packet = str_to_packet(PacketType.REPLY, "abc")
    clients[0].sendall(pack_header(packet) + packet.data[:1])
    time.sleep(0.05)
    player = roster.players[0]
    assert roster.read(player) is None
    assert player.active is None
    clients[0].sendall(packet.data[1:])
    time.sleep(0.05)
    assert roster.read(player) == packet


def test_read_raises_on_closed_peer(wired):
    roster, clients = wired
    clients[0].close()
    with pytest.raises(ConnectionClosed):
        roster.read(roster.players[0])


def test_listen_collects_every_reply(wired):
    roster, clients = wired
    for index, client in enumerate(clients):
        send_packet(client, str_to_packet(PacketType.REPLY, f"r{index}"))
    start = time.monotonic()
    roster.listen(5)
    assert time.monotonic() - start < 4
    assert [p.active.data for p in roster.players[:2]] == [b"r0\0", b"r1\0"]


def test_listen_disconnects_dropped_players(wired):
    roster, clients = wired
    clients[1].close()
    send_packet(clients[0], str_to_packet(PacketType.REPLY, "here"))
    roster.listen(5)
    assert roster.players[0].active is not None
    assert not roster.players[1].connected
    assert roster.players[1].active is None


def test_listen_times_out_without_replies(wired):
    roster, _ = wired
    start = time.monotonic()
    roster.listen(0.3)
    elapsed = time.monotonic() - start
    assert 0.25 <= elapsed < 3
    assert all(p.active is None for p in roster.players)


def test_listen_with_nobody_connected_returns_at_once():
    roster = Roster()
    start = time.monotonic()
    roster.listen(10)
    elapsed = time.monotonic() - start
    assert elapsed < 1
    assert roster.player_count == 0
    assert [p.active for p in roster.players] == [None] * LOBBY_SIZE
    assert not any(p.ready for p in roster.players)


def test_disconnect_closes_connection(wired):
    roster, clients = wired
    player = roster.players[0]
    roster.disconnect(player)
    assert not player.connected
    assert clients[0].recv(1) == b""