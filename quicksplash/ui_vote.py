"""Voting and results boards."""

from __future__ import annotations

import sys

from quicksplash.display import RESET, clear_screen, print_line_color, terminal_width
from quicksplash.models import LOBBY_SIZE, Card

FINAL_RESULTS_PROMPT = "FINAL GAME RESULTS"
SEPARATOR = "-" * 40
_FRAME = "\033[38;5;45m"


def _layout() -> tuple[str, int]:
    width = terminal_width() or 80
    panel = 86 if width >= 90 else width - 2
    panel = min(max(panel, 44), width)
    left = max((width - panel) // 2, 0)
    return " " * left, panel - 2


def _show_results_board(card: Card, response_count: int, heading: str, footer: str) -> None:
    pad, inner = _layout()
    content = inner - 2
    clear_screen()

    print(f"{pad}{_FRAME}╭{'─' * inner}╮{RESET}")
    print_line_color(pad, content, "\033[1;38;5;45m", heading)
    print_line_color(pad, content, "\033[38;5;252m", "Prompt:")
    prompt = card.prompt_text if card.prompt_text is not None else "[missing prompt]"
    print_line_color(pad, content, "\033[1;38;5;230m", prompt)
    print(f"{pad}{_FRAME}├{'─' * inner}┤{RESET}")
    print_line_color(pad, content, "\033[1;38;5;39m", "Responses:")
    print_line_color(pad, content, "\033[38;5;244m", footer)

    shown = 0
    if not card.responses or response_count <= 0:
        print_line_color(pad, content, "\033[38;5;203m", "No responses were included in this packet yet.")
    else:
        for number, entry in enumerate(card.responses[:response_count], start=1):
            if entry is None:
                continue
            text = entry.response if entry.response else "[empty response]"
            submitter = entry.player.name if entry.player is not None and entry.player.name else "Unknown"
            if shown:
                print_line_color(pad, content, "\033[38;5;240m", SEPARATOR)
            print_line_color(pad, content, "\033[1;38;5;51m", f"[{number}] {submitter}")
            print_line_color(pad, content, "\033[38;5;255m", text)
            shown += 1

    if shown == 0:
        print_line_color(pad, content, "\033[38;5;203m", "No active responses available to display.")

    print(f"{pad}{_FRAME}╰{'─' * inner}╯{RESET}\n")
    sys.stdout.flush()


def show_vote_card(card: Card, response_count: int) -> None:
    """Show the responses to vote on and ask for a choice."""
    _show_results_board(
        card,
        response_count,
        "VOTING BOARD",
        "Type the response number and press Enter to cast your vote.",
    )
    pad, _ = _layout()
    if response_count > 0:
        print(f"{pad}\033[1;38;5;118mEnter choice [1-{response_count}]: {RESET}", end="")
    else:
        print(f"{pad}\033[1;38;5;203mEnter choice: {RESET}", end="")
    sys.stdout.flush()


def show_results_card(card: Card) -> None:
    """Show round results, or the final standings for the final results card."""
    if card.prompt_text == FINAL_RESULTS_PROMPT:
        heading, footer = FINAL_RESULTS_PROMPT, "Final standings for the match."
    else:
        heading, footer = "ROUND RESULTS", "Vote results for the previous round."
    _show_results_board(card, LOBBY_SIZE, heading, footer)