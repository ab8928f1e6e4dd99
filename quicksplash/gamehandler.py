"""The round loop of a game."""

from __future__ import annotations

import logging

from quicksplash.gamestates import Game

log = logging.getLogger(__name__)


def game_loop(game: Game, round_count: int) -> bool:
    """Play up to ``round_count`` rounds; False if the host left before the end."""
    rounds = round_count
    while rounds > 0:
        game.play_round()
        log.info("round set up")
        game.await_responses()
        log.info("prompts sent and responses recorded")
        game.initiate_vote()
        log.info("voting options sent and votes recorded")
        game.determine_round_winner()
        log.info("a winner has been determined")
        game.send_round_results()
        log.info("round results sent")
        if not game.wait_for_host_next_round():
            game.end_round()
            log.info("round cleanup completed after host disconnect")
            return False
        log.info("host requested the next round")
        game.end_round()
        rounds -= 1
        log.info("%d rounds left", rounds)
    return True