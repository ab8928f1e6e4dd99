"""Framed packet transport over stream sockets."""

from __future__ import annotations

import errno
import logging
import socket

from quicksplash.models import Packet, PacketType
from quicksplash.protocol import HEADER_SIZE, pack_header, unpack_header

log = logging.getLogger(__name__)

_DONTWAIT = getattr(socket, "MSG_DONTWAIT", 0)


class ConnectionClosed(Exception):
    """The peer has gone away."""


class MalformedHeader(Exception):
    """A header arrived that cannot be decoded."""


def send_packet(sock: socket.socket, packet: Packet) -> None:
    """Write the header and then the payload; OSError on failure."""
    try:
        sock.sendall(pack_header(packet))
    except OSError:
        log.error("failed to send packet header")
        raise
    if packet.data:
        try:
            sock.sendall(packet.data)
        except BrokenPipeError:
            log.error("broken pipe while sending payload (likely a disconnect)")
            raise
        except OSError:
            log.error("failed to send payload")
            raise


class Connection:
    """A socket that assembles packets from non-blocking reads."""

    def __init__(self, sock: socket.socket) -> None:
        self.sock = sock
        self._buffer = bytearray()
        self._header: tuple[PacketType, int] | None = None

    def fileno(self) -> int:
        return self.sock.fileno()

    def _fill(self, target: int) -> bool:
        room = target - len(self._buffer)
        if room <= 0:
            return True
        try:
            chunk = self.sock.recv(room, _DONTWAIT)
        except BlockingIOError:
            return False
        except ConnectionResetError as exc:
            raise ConnectionClosed("connection reset by peer") from exc
        except OSError as exc:
            if exc.errno == errno.ENOTCONN:
                raise ConnectionClosed("socket is not connected") from exc
            raise
        if not chunk:
            raise ConnectionClosed("peer closed the connection")
        self._buffer += chunk
        return len(self._buffer) == target

    def read(self) -> Packet | None:
        """Advance the current packet; return it once complete, else None."""
        if self._header is None:
            if not self._fill(HEADER_SIZE):
                return None
            raw = bytes(self._buffer)
            self._buffer.clear()
            try:
                self._header = unpack_header(raw)
            except ValueError as exc:
                raise MalformedHeader(str(exc)) from exc
            log.debug("awaiting packet %s of %d bytes", *self._header)

        packet_type, length = self._header
        if not self._fill(length):
            return None
        data = bytes(self._buffer)
        self._buffer.clear()
        self._header = None
        return Packet(packet_type, data)

    def send(self, packet: Packet) -> None:
        send_packet(self.sock, packet)

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()