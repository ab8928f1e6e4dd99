"""Wire encoding of packet headers, text payloads and cards."""

from __future__ import annotations

import logging
import re
import struct

from quicksplash.models import (
    LOBBY_SIZE,
    MAX_PAYLOAD,
    NAME_SIZE,
    Card,
    Packet,
    PacketType,
    Player,
    Response,
)

log = logging.getLogger(__name__)

RECORD_SEP = "\x1e"
UNIT_SEP = "\x1f"
HEADER_SIZE = 8

# Type as a little-endian 32-bit int, length as a network-order 16-bit
# unsigned int, then two bytes of padding.
_TYPE_FORMAT = struct.Struct("<i")
_LENGTH_FORMAT = struct.Struct(">H")
_PADDING = b"\0\0"

_EMPTY_FILLER = "empty packet payload!"
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def pack_header(packet: Packet) -> bytes:
    """Encode the fixed-size header announcing ``packet``."""
    if packet.length > MAX_PAYLOAD:
        raise ValueError(f"payload of {packet.length} bytes exceeds {MAX_PAYLOAD}")
    return (
        _TYPE_FORMAT.pack(int(packet.type))
        + _LENGTH_FORMAT.pack(packet.length)
        + _PADDING
    )


def unpack_header(data: bytes) -> tuple[PacketType, int]:
    """Decode a header into its packet type and payload length."""
    if len(data) != HEADER_SIZE:
        raise ValueError(f"header must be {HEADER_SIZE} bytes, got {len(data)}")
    (raw_type,) = _TYPE_FORMAT.unpack_from(data, 0)
    (length,) = _LENGTH_FORMAT.unpack_from(data, _TYPE_FORMAT.size)
    try:
        packet_type = PacketType(raw_type)
    except ValueError as exc:
        raise ValueError(f"unknown packet type {raw_type}") from exc
    return packet_type, length


def _c_string(data: bytes) -> str:
    return data.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def packet_to_str(packet: Packet) -> str | None:
    """Payload as text up to the first NUL, or None for an empty payload."""
    if not packet.data:
        return None
    return _c_string(packet.data)


def str_to_packet(packet_type: PacketType, text: str | None) -> Packet:
    """Build a NUL-terminated text packet; empty text gets a filler payload."""
    body = text if text else _EMPTY_FILLER
    return Packet(packet_type, body.encode("utf-8") + b"\0")


def card_to_packet(card: Card, player_count: int) -> Packet:
    """Encode the prompt and the first ``player_count`` complete responses."""
    if card.prompt_text is None:
        raise ValueError("card has no prompt text")
    parts = [card.prompt_text]
    for entry in (card.responses or [])[: max(player_count, 0)]:
        if entry is None or entry.player is None or entry.response is None:
            continue
        parts.append(
            f"{RECORD_SEP}{entry.player.p_id}{UNIT_SEP}"
            f"{entry.player.name}{UNIT_SEP}{entry.response}"
        )
    text = "".join(parts)
    log.debug("encoding card packet: %r", text)
    return Packet(PacketType.CARD, text.encode("utf-8") + b"\0")


def packet_to_card(packet: Packet) -> Card:
    """Decode a card packet; malformed response records are skipped."""
    if not packet.data:
        return Card(prompt_text=None, responses=[])

    text = _c_string(packet.data)
    card = Card()
    tokens = [token for token in text.split(RECORD_SEP) if token]
    if not tokens:
        return card

    leading = text[: len(text) - len(text.lstrip(RECORD_SEP))]
    card.prompt_text = leading + tokens[0]

    slot = 0
    for token in tokens[1:]:
        if slot >= LOBBY_SIZE:
            break
        fields = token.split(UNIT_SEP, 2)
        if len(fields) < 3:
            continue
        pid_text, name, reply = fields
        player = Player(p_id=_atoi(pid_text), name=name[: NAME_SIZE - 1])
        card.responses[slot] = Response(player=player, response=reply)
        slot += 1
    return card