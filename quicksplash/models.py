"""Core game data: packet types, player records, responses and prompt cards."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

MAX_PROMPT_SIZE = 1000
MAX_RESPONSE_SIZE = 256
PROMPT_COUNT = 135
LOBBY_SIZE = 5
NAME_SIZE = 32
MAX_PAYLOAD = 0xFFFF


class PacketType(enum.IntEnum):
    """Kind of a packet as carried in its header."""

    START = 0
    TEST = 1
    JOIN = 2
    LEAVE = 3
    CARD = 4
    REPLY = 5
    VOTE = 6
    STATS = 7
    QUIT = -1
    PLAYER_DISCONNECT = -1
    GAME_END = -2


class PlayerState(enum.IntEnum):
    """Where a lobby slot stands."""

    DISCONNECTED = 0
    PENDING = 1
    READY = 2


@dataclass
class Packet:
    """A typed payload; ``data`` is sent verbatim after the header."""

    type: PacketType
    data: bytes = b""

    def __post_init__(self) -> None:
        self.type = PacketType(self.type)
        self.data = bytes(self.data)

    @property
    def length(self) -> int:
        return len(self.data)


@dataclass
class Player:
    """A lobby slot: identity, connection, last received packet and score."""

    p_id: int = 0
    name: str = ""
    state: PlayerState = PlayerState.DISCONNECTED
    connection: Any = None
    active: Packet | None = None
    round_votes: int = 0
    round_wins: int = 0

    @property
    def ready(self) -> bool:
        """True when a complete packet is waiting to be handled."""
        return self.active is not None

    @property
    def connected(self) -> bool:
        return self.connection is not None


@dataclass
class Response:
    """One player's answer to a card."""

    player: Player | None = None
    response: str | None = None


def _empty_slots() -> list[Response | None]:
    return [None] * LOBBY_SIZE


@dataclass
class Card:
    """A prompt and the responses gathered for it, one slot per lobby seat."""

    prompt_text: str | None = None
    responses: list[Response | None] = field(default_factory=_empty_slots)