"""Pre-game lobby: accept players, register names and wait for the host to start."""

from __future__ import annotations

import logging
import select
import socket

from quicksplash.comms import Connection, ConnectionClosed
from quicksplash.models import NAME_SIZE, Player, PlayerState, PacketType
from quicksplash.network import accept_connection
from quicksplash.protocol import packet_to_str, str_to_packet
from quicksplash.server_comms import Roster

log = logging.getLogger(__name__)

HOST_GREETING = "YOU ARE HOST NOW CONGRATULATIONS"
GUEST_GREETING = "Orange"
HOST_ID = 1


def _admit(listener: socket.socket, roster: Roster) -> None:
    client = accept_connection(listener)
    if client is None:
        return
    for index, player in enumerate(roster.players):
        if player.state is PlayerState.DISCONNECTED:
            player.connection = Connection(client)
            player.p_id = index + 1
            player.state = PlayerState.PENDING
            player.active = None
            player.name = str(index)
            log.info("connection received for slot %d", index)
            return
    log.warning("lobby is full, turning a connection away")
    client.close()


def _drop(player: Player, roster: Roster) -> None:
    log.info("player %s disconnected from lobby", player.name)
    if player.state is PlayerState.READY:
        roster.player_count -= 1
    roster.disconnect(player)
    player.state = PlayerState.DISCONNECTED


def _handle(player: Player, roster: Roster) -> bool:
    """Process one readable player; True when the host has started the game."""
    try:
        packet = roster.read(player)
    except ConnectionClosed:
        _drop(player, roster)
        return False
    if packet is None:
        return False
    player.active = None

    if player.state is PlayerState.PENDING:
        if packet.type is PacketType.JOIN:
            player.name = (packet_to_str(packet) or "")[: NAME_SIZE - 1]
            roster.player_count += 1
            player.state = PlayerState.READY
            log.info("player %d joined as %s", player.p_id, player.name)
            greeting = HOST_GREETING if player.p_id == HOST_ID else GUEST_GREETING
            try:
                player.connection.send(str_to_packet(PacketType.JOIN, greeting))
            except OSError as exc:
                log.warning("could not greet player %s: %s", player.name, exc)
        return False

    if packet.type is PacketType.START and player.p_id == HOST_ID:
        log.info("received start packet from host, starting with %d player(s)", roster.player_count)
        roster.broadcast(str_to_packet(PacketType.START, str(roster.player_count)))
        return True
    return False


def start_lobby(listener: socket.socket, roster: Roster) -> int:
    """Run the lobby until the host starts the game; return the joined player count."""
    roster.reset()
    while True:
        watched: list[object] = [listener]
        watched.extend(
            player.connection
            for player in roster.players
            if player.state is not PlayerState.DISCONNECTED and player.connected
        )
        readable, _, _ = select.select(watched, [], [])
        ready_ids = {id(item) for item in readable}

        if id(listener) in ready_ids:
            _admit(listener, roster)

        for player in roster.players:
            if (
                player.state is PlayerState.DISCONNECTED
                or not player.connected
                or id(player.connection) not in ready_ids
            ):
                continue
            if _handle(player, roster):
                return roster.player_count