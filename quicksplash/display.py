"""Terminal helpers: width, title, clearing and boxed, word-wrapped lines."""

from __future__ import annotations

import shutil
import sys

RESET = "\033[0m"
TITLE = "WELCOME TO QUICK SPLASH !!!"
CLEAR_SEQUENCE = "\033[2J\033[H\n"


def terminal_width() -> int:
    """Current column count of the terminal, or 0 when it cannot be told."""
    return shutil.get_terminal_size((0, 0)).columns


def display_title() -> None:
    """Write the game's title line to standard output."""
    line = f"{TITLE}\n"
    sys.stdout.write(line)
    sys.stdout.flush()


def init_display() -> None:
    """Greet the player with the title."""
    display_title()


def clear_screen() -> None:
    sys.stdout.write(CLEAR_SEQUENCE)


def justify_lines(text: str | None, width: int) -> list[str]:
    """Break ``text`` into lines of at most ``width`` characters.

    Lines break at the last space that fits; a word longer than a line is
    split with a trailing dash.
    """
    if text is None or width <= 0:
        return []
    lines: list[str] = []
    pos = 0
    end = len(text)
    while pos < end:
        rest = text[pos:].lstrip(" ")
        pos = end - len(rest)
        if not rest:
            break
        if len(rest) <= width:
            lines.append(rest)
            break
        space = text.rfind(" ", pos, pos + width)
        if space != -1:
            lines.append(text[pos:space])
            pos = space + 1
        elif width == 1:
            lines.append(text[pos])
            pos += 1
        else:
            lines.append(text[pos : pos + width - 1] + "-")
            pos += width - 1
    return lines


def center_text(text: str, width: int) -> str:
    """Pad ``text`` with spaces on both sides to fill ``width`` columns."""
    left = max((width - len(text)) // 2, 0)
    right = max(width - len(text) - left, 0)
    return " " * left + text + " " * right


def print_line_plain(start_pad: str | None, width: int, text: str | None) -> None:
    """Print ``text`` wrapped inside plain box borders."""
    pad = start_pad or ""
    width = max(width, 1)
    for line in justify_lines(text, width):
        print(f"{pad}│{line:<{width}.{width}}│")


def print_line_color(start_pad: str | None, width: int, color: str | None, text: str | None) -> None:
    """Print ``text`` wrapped inside box borders drawn in ``color``."""
    pad = start_pad or ""
    width = max(width, 1)
    color = color or ""
    for line in justify_lines(text, width):
        print(f"{pad}{color}│ {line:<{width}.{width}} │{RESET}")