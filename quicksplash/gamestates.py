"""Server game phases: drawing prompts, collecting replies and votes, scoring."""

from __future__ import annotations

import logging
import os
import random
import re
import select
from collections.abc import Callable

from quicksplash.cards import DEFAULT_PROMPTS_PATH, draw_random, generate_cards
from quicksplash.comms import ConnectionClosed
from quicksplash.lobby import HOST_ID
from quicksplash.models import (
    LOBBY_SIZE,
    Card,
    Packet,
    PacketType,
    Player,
    PlayerState,
    Response,
)
from quicksplash.protocol import card_to_packet, packet_to_str, str_to_packet
from quicksplash.server_comms import Roster

log = logging.getLogger(__name__)

RESPONSE_TIMEOUT = 60
HOST_POLL_INTERVAL = 1.0
FINAL_RESULTS_PROMPT = "FINAL GAME RESULTS"
GAME_END_MESSAGE = "GMAE OVER"
NO_RESPONSE = "[no response]"

_VOTE = re.compile(r"\s*[+-]?\d+")


def _counted(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


class Game:
    """Drives one game over the players held by a roster."""

    def __init__(
        self,
        roster: Roster,
        prompts_path: str | os.PathLike[str] = DEFAULT_PROMPTS_PATH,
    ) -> None:
        self.roster = roster
        self.prompts_path = prompts_path
        self.cards: list[Card] = []
        self.drawn_card: Card | None = None
        self.rng = random.Random()
        self.response_timeout: float = RESPONSE_TIMEOUT
        self.host_poll_interval: float = HOST_POLL_INTERVAL

    @property
    def joined(self) -> list[Player]:
        """The slots counted as joined players."""
        return self.roster.players[: self.roster.player_count]

    def _broadcast(self, packet: Packet, what: str) -> bool:
        try:
            self.roster.broadcast(packet)
        except OSError as exc:
            log.error("failed to send %s to clients: %s", what, exc)
            return False
        log.info("sent %s to clients", what)
        return True

    def _current_card(self) -> Card:
        if self.drawn_card is None:
            raise RuntimeError("no card has been drawn for this round")
        return self.drawn_card

    def setup(self) -> None:
        """Clear scores and load the deck."""
        for player in self.joined:
            player.round_wins = 0
        self.cards = generate_cards(self.prompts_path)

    def play_round(self) -> Card:
        """Clear round votes and draw this round's card."""
        for player in self.joined:
            player.round_votes = 0
        self.drawn_card = draw_random(self.cards, self.rng)
        return self.drawn_card

    def await_responses(self) -> None:
        """Send the prompt and record each connected player's reply."""
        card = self._current_card()
        count = self.roster.player_count
        log.info("there are currently %d players in the lobby", count)
        slots: list[Response | None] = [
            Response(player=player) if player.connected else None for player in self.joined
        ]
        card.responses = slots + [None] * (LOBBY_SIZE - len(slots))

        self._broadcast(Packet(PacketType.CARD, card_to_packet(card, count).data), "prompt")
        self.roster.listen(self.response_timeout)

        for entry in card.responses:
            if entry is None or entry.player is None:
                continue
            player = entry.player
            if not player.connected:
                entry.response = None
                log.info("player %d named %s disconnected or never replied", player.p_id, player.name)
                continue
            if player.active is None:
                continue
            text = packet_to_str(player.active)
            if text is None:
                log.warning("no response received for player %d", player.p_id)
            else:
                entry.response = text
                log.info("stored response %s for player %d", text, player.p_id)
            player.active = None

    def initiate_vote(self) -> None:
        """Send the responses out and tally the votes that come back."""
        card = self._current_card()
        count = self.roster.player_count
        self._broadcast(Packet(PacketType.VOTE, card_to_packet(card, count).data), "responses to vote on")
        self.roster.listen(self.response_timeout)

        for player in self.joined:
            if not player.connected or player.active is None:
                log.info("no vote from %d", player.p_id)
                continue
            vote_text = packet_to_str(player.active)
            player.active = None
            if vote_text is None or not _VOTE.fullmatch(vote_text):
                log.warning("invalid vote payload from player %d", player.p_id)
                continue
            voted = int(vote_text)
            log.info("player %d voted for %d", player.p_id, voted)
            for entry in card.responses[:count]:
                if entry is None or entry.player is None:
                    continue
                if entry.player.p_id == voted:
                    entry.player.round_votes += 1
                    log.info("player %d now has %d votes", voted, entry.player.round_votes)
                    break

    def _leaders(self, score: Callable[[Player], int]) -> list[Player]:
        players = self.joined
        if not players:
            return []
        best = max(score(player) for player in players)
        return [player for player in players if score(player) == best]

    def determine_round_winner(self) -> list[Player]:
        """Award a round win to every player with the most votes; return them."""
        winners = self._leaders(lambda player: player.round_votes)
        if len(winners) > 1:
            log.info("a tie between two or more players")
        for player in winners:
            player.round_wins += 1
            log.info("player %s wins the round with %d votes", player.name, player.round_votes)
        return winners

    def send_round_results(self) -> None:
        """Send every response with the votes it received."""
        card = self._current_card()
        count = self.roster.player_count
        results = Card(prompt_text=card.prompt_text)
        for index, entry in enumerate(card.responses[:count]):
            if entry is None or entry.player is None:
                continue
            text = entry.response if entry.response else NO_RESPONSE
            results.responses[index] = Response(
                player=entry.player,
                response=f"{text} - {_counted(entry.player.round_votes, 'vote')}",
            )
        self._broadcast(Packet(PacketType.STATS, card_to_packet(results, count).data), "round results")

    def wait_for_host_next_round(self) -> bool:
        """Block until the host asks for the next round; False if the host is gone."""
        host = next(
            (
                player
                for player in self.joined
                if player.p_id == HOST_ID
                and player.connected
                and player.state is not PlayerState.DISCONNECTED
            ),
            None,
        )
        if host is None:
            log.warning("no host is available to start the next round")
            return False

        log.info("waiting for host %d to start the next round", host.p_id)
        while True:
            if not host.connected or host.state is PlayerState.DISCONNECTED:
                log.warning("host disconnected before starting the next round")
                return False
            readable, _, _ = select.select([host.connection], [], [], self.host_poll_interval)
            if not readable:
                continue
            try:
                packet = self.roster.read(host)
            except ConnectionClosed:
                log.warning("host disconnected while waiting for the next round")
                self.roster.disconnect(host)
                return False
            if packet is None:
                continue
            host.active = None
            if packet.type is PacketType.START:
                log.info("host started the next round")
                return True

    def end_round(self) -> None:
        """Drop the round's responses and announce players who left."""
        if self.drawn_card is not None:
            self.drawn_card.responses = [None] * LOBBY_SIZE
        self.drawn_card = None

        for player in self.roster.players:
            if player.state is PlayerState.READY and not player.connected:
                log.info("player %d named %s disconnected", player.p_id, player.name)
                self._broadcast(
                    str_to_packet(PacketType.PLAYER_DISCONNECT, f"{player.p_id} {player.name}"),
                    "departure notice",
                )
                player.state = PlayerState.DISCONNECTED
                self.roster.player_count -= 1

    def determine_game_winner(self) -> list[Player]:
        """Return the players with the most round wins."""
        winners = self._leaders(lambda player: player.round_wins)
        if len(winners) > 1:
            log.info("a tie between two or more players")
        for player in winners:
            log.info("%s wins the game with %d points", player.name, player.round_wins)
        return winners

    def send_game_results(self) -> None:
        """Send the final standings of every player still present."""
        results = Card(prompt_text=FINAL_RESULTS_PROMPT)
        for index, player in enumerate(self.joined):
            if not player.connected or player.state is PlayerState.DISCONNECTED:
                continue
            results.responses[index] = Response(
                player=player, response=_counted(player.round_wins, "point")
            )
        packet = card_to_packet(results, self.roster.player_count)
        self._broadcast(Packet(PacketType.STATS, packet.data), "final game results")

    def wrap_up(self) -> None:
        """Tell clients the game is over and release the deck."""
        self._broadcast(str_to_packet(PacketType.GAME_END, GAME_END_MESSAGE), "game over")
        for player in self.joined:
            player.round_wins = 0
        self.cards = []