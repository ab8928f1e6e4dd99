"""Listening, accepting and connecting TCP sockets."""

from __future__ import annotations

import logging
import socket

log = logging.getLogger(__name__)


def create_server_socket(port: int, backlog: int) -> socket.socket:
    """Bind a reusable IPv4 listener on every interface."""
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(("", port))
        listener.listen(backlog)
    except OSError:
        listener.close()
        log.error("could not set up a listening socket on port %d", port)
        raise
    return listener


def accept_connection(listener: socket.socket) -> socket.socket | None:
    """Accept one client; None if the accept fails."""
    log.info("awaiting connection")
    try:
        client, (host, port) = listener.accept()
    except OSError as exc:
        log.error("failed to accept connection: %s", exc)
        return None
    log.info("new connection accepted from %s:%d", host, port)
    return client


def connect_to_server(port: int, hostname: str) -> socket.socket:
    """Resolve ``hostname`` over IPv4 and connect to it."""
    try:
        address = socket.gethostbyname(hostname)
    except OSError:
        log.error("unknown host %s", hostname)
        raise
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect((address, port))
    except OSError:
        sock.close()
        raise
    return sock