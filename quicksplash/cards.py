"""Loading prompt cards and drawing one at random."""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Sequence

from quicksplash.models import MAX_PROMPT_SIZE, PROMPT_COUNT, Card

log = logging.getLogger(__name__)

DEFAULT_PROMPTS_PATH = os.path.join("assets", "prompts.txt")


def generate_cards(path: str | os.PathLike[str] = DEFAULT_PROMPTS_PATH) -> list[Card]:
    """Read up to PROMPT_COUNT prompts, one per line; overlong lines are split."""
    cards: list[Card] = []
    with open(path, encoding="utf-8") as prompt_file:
        while len(cards) < PROMPT_COUNT:
            line = prompt_file.readline(MAX_PROMPT_SIZE - 1)
            if not line:
                break
            cards.append(Card(prompt_text=line.removesuffix("\n")))
    return cards


def draw_random(cards: Sequence[Card], rng: random.Random | None = None) -> Card:
    """Pick a card; the last of a full deck is never chosen."""
    if not cards:
        raise ValueError("no cards to draw from")
    chooser = rng if rng is not None else random
    card = cards[chooser.randrange(min(len(cards), PROMPT_COUNT - 1))]
    log.info("server has drawn card with prompt %s", card.prompt_text)
    return card