"""Game server entry point: open a lobby, play the rounds and report the winner."""

from __future__ import annotations

import argparse
import logging
import random
import sys

from quicksplash.cards import DEFAULT_PROMPTS_PATH
from quicksplash.gamehandler import game_loop
from quicksplash.gamestates import Game
from quicksplash.lobby import start_lobby
from quicksplash.network import create_server_socket
from quicksplash.server_comms import Roster

log = logging.getLogger(__name__)

DEFAULT_ROUNDS = 2
LISTEN_BACKLOG = 5
_PORT_BASE = 30000
_PORT_SPAN = 65000 - 30001


def _random_port(rng: random.Random) -> int:
    """A port in the range the server picks from when none is given."""
    return rng.randrange(_PORT_SPAN) + _PORT_BASE


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="quicksplash-server",
        description="Host a game of Quick Splash.",
    )
    parser.add_argument("--port", type=int, default=None, help="port to listen on (random if omitted)")
    parser.add_argument("--prompts", default=DEFAULT_PROMPTS_PATH, help="file with one prompt per line")
    parser.add_argument("--rounds", type=int, default=DEFAULT_ROUNDS, help="number of rounds to play")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run one game from lobby to final results; return the exit status."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="[ SERVER ] %(name)s: %(message)s")

    port = args.port if args.port is not None else _random_port(random.Random())
    try:
        listener = create_server_socket(port, LISTEN_BACKLOG)
    except OSError as exc:
        print(f"Could not start the server on port {port}: {exc}", file=sys.stderr)
        return 1

    roster = Roster()
    with listener:
        print(f"\033[2J\nServer running on port {port}, awaiting players.", flush=True)
        try:
            start_lobby(listener, roster)
            game = Game(roster, args.prompts)
            game.setup()
            log.info("cards initialized")
            if game_loop(game, args.rounds):
                log.info("game loop finished every round")
            game.determine_game_winner()
            game.send_game_results()
            game.wrap_up()
            log.info("game finished, cleaning up")
        except OSError as exc:
            print(f"Server error: {exc}", file=sys.stderr)
            return 1
        finally:
            roster.reset()
    return 0