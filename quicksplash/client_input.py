"""Reading a line from the player while watching the server for interruptions."""

from __future__ import annotations

import os
import select
import sys
from typing import Any

INTERRUPTED = "INT"


def read_line(max_chars: int, sock: Any = None) -> str | None:
    """Read one line from standard input, keeping at most ``max_chars`` characters.

    Returns INTERRUPTED if ``sock`` becomes readable first, and None at end of
    input. The rest of an overlong line is discarded.
    """
    if max_chars < 0:
        raise ValueError("max_chars must not be negative")
    fd = sys.stdin.fileno()
    watched: list[Any] = [fd] if sock is None else [fd, sock]
    sys.stdout.flush()

    while True:
        readable, _, _ = select.select(watched, [], [])
        if sock is not None and sock in readable:
            return INTERRUPTED
        if fd in readable:
            break

    raw = bytearray()
    ended = False
    while True:
        byte = os.read(fd, 1)
        if not byte:
            break
        if byte == b"\n":
            ended = True
            break
        raw += byte
    if not raw and not ended:
        return None
    return raw.decode("utf-8", errors="replace")[:max_chars]


def get_text_input(prompt: str, max_chars: int, sock: Any = None) -> str:
    """Ask for text with ``prompt``; EOFError at end of input."""
    max_chars = max(max_chars, 1)
    print(f"{prompt} (max {max_chars} chars): ", end="")
    text = read_line(max_chars, sock)
    if text is None:
        raise EOFError("end of input")
    return text