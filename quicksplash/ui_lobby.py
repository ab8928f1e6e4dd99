"""The join screen: ask for a user name, a port and a server address."""

from __future__ import annotations

import random
import re
import sys
from dataclasses import dataclass

from quicksplash.client_input import read_line
from quicksplash.display import RESET, clear_screen, terminal_width

DEFAULT_PORT = 30000
DEFAULT_ADDRESS = "127.0.0.1"
PENDING = "[pending]"

NAME_CHARS = 31
PORT_CHARS = 6
ADDRESS_CHARS = 29

_VALUE_COLUMN = 17
_FIELD_ROWS = (7, 8, 9)
_MAX_LEFT_PAD = 127

_BORDER = "\033[1;34m"
_TITLE = "\033[1;96m"
_INFO = "\033[0;37m"
_MUTED = "\033[2;37m"
_ACTIVE = "\033[1;33m"
_VALUE = "\033[1;97m"
_SEPARATOR = "\033[0;36m"
_ACCENT = "\033[1;33m"
_SOFT = "\033[2;37m"
_GOOD = "\033[1;32m"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class ServerChoice:
    """Who to join as and where to connect."""

    name: str
    port: int
    address: str


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def default_guest_name(rng: random.Random | None = None) -> str:
    """A name of the form Guest followed by five digits."""
    chooser = rng if rng is not None else random
    return f"Guest{chooser.randrange(90000) + 10000}"


def _width() -> int:
    return terminal_width() or 80


def _panel_width(width: int) -> int:
    if width >= 72:
        return 68
    if width >= 40:
        return width - 4
    return width


def _left_pad(width: int, panel_width: int) -> int:
    return max((width - panel_width) // 2, 0)


def _border(pad: str, left: str, right: str, inner: int) -> None:
    print(f"{pad}{_BORDER}{left}{'═' * inner}{right}{RESET}")


def _line(pad: str, text_color: str, inner: int, text: str) -> None:
    shown = text[:inner]
    filler = " " * max(inner - len(shown), 0)
    print(f"{pad}{_BORDER}║{text_color}{shown}{RESET}{filler}{_BORDER}║{RESET}")


def _fill(pad: str, fill_color: str, inner: int, fill_char: str) -> None:
    print(f"{pad}{_BORDER}║{fill_color}{fill_char * inner}{RESET}{_BORDER}║{RESET}")


def _shown(value: str) -> str:
    return value if value else PENDING


def _render(name: str, port: str, address: str, active_field: int) -> None:
    width = _width()
    panel = _panel_width(width)
    pad = " " * _left_pad(width, panel)
    inner = panel - 2

    clear_screen()
    if panel >= 30:
        _border(pad, "╔", "╗", inner)
        _line(pad, _TITLE, inner, "  QUICK SPLASH // JOIN LOBBY WITH IP")
        _fill(pad, _SEPARATOR, inner, "◦")
        _line(pad, _INFO, inner, "  Fill in fields. Press Enter to keep defaults.")
        _line(pad, _MUTED, inner, "")
        labels = ("Username  ", "Port      ", "Server    ")
        for field, (label, value) in enumerate(zip(labels, (name, port, address))):
            marker = ">" if field == active_field else "-"
            color = _ACTIVE if field == active_field else _VALUE
            _line(pad, color, inner, f" {marker} {label}: {_shown(value)}")
        _border(pad, "╚", "╝", inner)
        print()
    else:
        print(f"{_TITLE}Quick Splash Lobby Check-In")
        print(f"Username: {_shown(name)}")
        print(f"Port: {_shown(port)}")
        print(f"Server: {_shown(address)}\n")


def _read(max_chars: int) -> str:
    text = read_line(max_chars, None)
    return text if text is not None else ""


def _read_field(left_pad: int, row: int, clear_chars: int, max_chars: int) -> str:
    col = max(left_pad + _VALUE_COLUMN, 1)
    clear_chars = max(clear_chars, max_chars)
    sys.stdout.write(f"\033[{row};{col}H{' ' * clear_chars}\033[{row};{col}H{_ACCENT}")
    sys.stdout.flush()
    text = _read(max_chars)
    sys.stdout.write(RESET)
    return text


def _ask(
    field: int,
    values: tuple[str, str, str],
    max_chars: int,
    hint: str,
    hint_color: str,
) -> str:
    _render(*values, active_field=field)
    width = _width()
    panel = _panel_width(width)
    left = min(_left_pad(width, panel), _MAX_LEFT_PAD)
    if panel >= 30:
        return _read_field(left, _FIELD_ROWS[field], panel - _VALUE_COLUMN, max_chars)
    print(f"{' ' * left}{_ACCENT}→ {RESET}{hint_color}{hint}{RESET} ", end="", flush=True)
    return _read(max_chars)


def server_select() -> ServerChoice:
    """Walk the player through the join screen and return their choices."""
    name = _ask(
        0, ("", "", ""), NAME_CHARS,
        f"(default Guest##### | max {NAME_CHARS} chars)", _SOFT,
    )
    if not name:
        name = default_guest_name()

    port = _ask(
        1, (name, "", ""), PORT_CHARS,
        f"(default {DEFAULT_PORT} | max {PORT_CHARS} chars)", _GOOD,
    )
    if not port:
        port = str(DEFAULT_PORT)

    address = _ask(
        2, (name, port, ""), ADDRESS_CHARS,
        f"(default {DEFAULT_ADDRESS} | max {ADDRESS_CHARS} chars)", _GOOD,
    )
    if not address:
        address = DEFAULT_ADDRESS

    _render(name, port, address, active_field=3)
    width = _width()
    pad = " " * min(_left_pad(width, _panel_width(width)), _MAX_LEFT_PAD)
    print(f"\n{pad}{_ACCENT}Thanks for input! You'll be joining promptly...{RESET}")
    print(f"{pad}{_SOFT}Connecting to {address}:{port} as {name}{RESET}")
    return ServerChoice(name=name, port=_leading_int(port), address=address)