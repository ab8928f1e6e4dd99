"""Showing a prompt card and collecting the player's answer."""

from __future__ import annotations

from typing import Any

from quicksplash.client_input import INTERRUPTED, read_line
from quicksplash.display import clear_screen, print_line_plain, terminal_width
from quicksplash.models import Card

MISSING_PROMPT = "[missing prompt]"


def _layout() -> tuple[str, int]:
    width = terminal_width() or 80
    panel = 70 if width >= 74 else width - 2
    panel = min(max(panel, 34), width)
    left = max((width - panel) // 2, 0)
    return " " * left, panel - 2


def show_card_prompt(card: Card) -> None:
    """Draw the prompt card centred on the screen."""
    pad, inner = _layout()
    clear_screen()
    print(f"{pad}╭{'═' * inner}╮")
    print_line_plain(pad, inner, "CARD PROMPT")
    print_line_plain(pad, inner, "Write the funniest response you can.")
    print(f"{pad}├{'─' * inner}┤")
    prompt = card.prompt_text if card.prompt_text is not None else MISSING_PROMPT
    print_line_plain(pad, inner, prompt)
    print(f"{pad}╰{'═' * inner}╯\n")


def collect_card_response(card: Card, max_chars: int, sock: Any = None) -> str | None:
    """Show the card and return a non-empty answer, or None if interrupted."""
    max_chars = max(max_chars, 1)
    show_card_prompt(card)
    hint = f"Response ({max_chars} chars max)"
    while True:
        print(f"\033[1;33m{hint}\033[0m")
        print("\033[0;36m> \033[0m", end="", flush=True)
        text = read_line(max_chars, sock)
        if text is None:
            raise EOFError("end of input")
        if text == INTERRUPTED:
            return None
        if not text:
            print("\033[0;31mPlease enter at least one character.\033[0m\n")
            continue
        return text