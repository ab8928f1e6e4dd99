"""Server-side view of the lobby: player slots, broadcasting and collecting replies."""

from __future__ import annotations

import logging
import select
import time

from quicksplash.comms import ConnectionClosed, MalformedHeader
from quicksplash.models import LOBBY_SIZE, Packet, Player, PlayerState

log = logging.getLogger(__name__)


class Roster:
    """The fixed set of lobby slots and the count of joined players."""

    def __init__(self) -> None:
        self.players: list[Player] = [Player() for _ in range(LOBBY_SIZE)]
        self.player_count = 0

    def reset(self) -> None:
        """Empty every slot in place, keeping the Player objects themselves."""
        for player in self.players:
            if player.connection is not None:
                player.connection.close()
            player.connection = None
            player.state = PlayerState.DISCONNECTED
            player.active = None
            player.name = ""
        self.player_count = 0

    def broadcast(self, packet: Packet) -> None:
        """Send ``packet`` to every connected player among the joined ones.

        Raises OSError as soon as one send fails.
        """
        for player in self.players[: self.player_count]:
            if player.connected:
                player.connection.send(packet)

    def read(self, player: Player) -> Packet | None:
        """Advance ``player``'s incoming packet; store and return it once complete.

        Raises ConnectionClosed when the player has gone away.
        """
        try:
            packet = player.connection.read()
        except MalformedHeader as exc:
            log.warning("did not receive a proper header from player %s: %s", player.name, exc)
            return None
        except ConnectionClosed:
            raise
        except OSError as exc:
            log.warning("read from player %s failed: %s", player.name, exc)
            return None
        if packet is None:
            return None
        log.info(
            "received packet from player %s of type %d containing %d bytes: %r",
            player.name,
            packet.type,
            packet.length,
            packet.data,
        )
        player.active = packet
        return packet

    def listen(self, max_time: float) -> None:
        """Collect one packet from every connected player or give up after ``max_time`` seconds.

        Players whose connection drops meanwhile are disconnected.
        """
        start = time.monotonic()
        pending = [player for player in self.players if player.connected]
        while pending:
            remaining = max_time - (time.monotonic() - start)
            if remaining <= 0:
                return
            readable, _, _ = select.select(
                [player.connection for player in pending], [], [], remaining
            )
            ready_ids = {id(conn) for conn in readable}
            for player in [p for p in pending if id(p.connection) in ready_ids]:
                try:
                    packet = self.read(player)
                except ConnectionClosed:
                    log.info("player %s disconnected while awaited", player.name)
                    self.disconnect(player)
                    pending.remove(player)
                    continue
                if packet is not None:
                    pending.remove(player)

    def disconnect(self, player: Player) -> None:
        """Close ``player``'s connection and drop any half-handled packet."""
        if player.connection is not None:
            player.connection.close()
        player.connection = None
        player.active = None