"""Game client entry point: join a server and play rounds from the terminal."""

from __future__ import annotations

import argparse
import contextlib
import re
import select
import sys
from typing import Any

from quicksplash.client_input import INTERRUPTED, read_line
from quicksplash.comms import Connection, ConnectionClosed, MalformedHeader
from quicksplash.display import clear_screen, init_display
from quicksplash.lobby import HOST_GREETING
from quicksplash.models import LOBBY_SIZE, MAX_RESPONSE_SIZE, NAME_SIZE, Packet, PacketType
from quicksplash.network import connect_to_server
from quicksplash.protocol import packet_to_card, packet_to_str, str_to_packet
from quicksplash.ui_lobby import (
    DEFAULT_ADDRESS,
    DEFAULT_PORT,
    ServerChoice,
    default_guest_name,
    server_select,
)
from quicksplash.ui_prompt import collect_card_response
from quicksplash.ui_vote import FINAL_RESULTS_PROMPT, show_results_card, show_vote_card

CLIENT_TAG = "\033[1;36m[ CLIENT ]\033[0m"
SERVER_TAG = "\033[1;35m[ SERVER ]\033[0m"
VOTE_CHARS = 7

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(text: str | None) -> int:
    match = _LEADING_INT.match(text or "")
    return int(match.group(1)) if match else 0


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="quicksplash",
        description="Join a game of Quick Splash. Without options the join screen asks for them.",
    )
    parser.add_argument("--name", default=None, help="user name to join as")
    parser.add_argument("--port", type=int, default=None, help="server port")
    parser.add_argument("--address", default=None, help="server address")
    return parser.parse_args(argv)


def _choose_server(args: argparse.Namespace) -> ServerChoice:
    if args.name is None and args.port is None and args.address is None:
        return server_select()
    return ServerChoice(
        name=(args.name or default_guest_name())[: NAME_SIZE - 1],
        port=args.port if args.port is not None else DEFAULT_PORT,
        address=args.address or DEFAULT_ADDRESS,
    )


def _await_packet(conn: Connection) -> Packet:
    while True:
        select.select([conn], [], [])
        packet = conn.read()
        if packet is not None:
            return packet


def _wait_for_start(conn: Connection, host: bool) -> int | None:
    """Wait in the lobby; return the player count the server announced, if any."""
    stdin_fd = sys.stdin.fileno()
    watched: list[Any] = [stdin_fd, conn]
    while True:
        readable, _, _ = select.select(watched, [], [])
        if stdin_fd in watched and stdin_fd in readable:
            if read_line(0, None) is None:
                watched.remove(stdin_fd)
                continue
            if not host:
                continue
            print(f"{CLIENT_TAG} You have sent the start packet to the server.")
            conn.send(str_to_packet(PacketType.START, "orange"))
            print(f"{SERVER_TAG} Received start packet. Starting game.")
            return None
        if conn in readable:
            packet = conn.read()
            if packet is not None and packet.type is PacketType.START:
                return _leading_int(packet_to_str(packet))


def _answer_card(conn: Connection, packet: Packet) -> None:
    card = packet_to_card(packet)
    reply = collect_card_response(card, MAX_RESPONSE_SIZE - 1, conn.sock)
    if reply is None:
        print("client timeout")
        return
    conn.send(str_to_packet(PacketType.REPLY, reply))


def _show_stats(conn: Connection, packet: Packet, host: bool) -> None:
    card = packet_to_card(packet)
    show_results_card(card)
    if card.prompt_text == FINAL_RESULTS_PROMPT or not host:
        return
    print("\033[1;38;5;118mPress Enter to start the next round...\033[0m", flush=True)
    read_line(0, None)
    conn.send(str_to_packet(PacketType.START, "next round"))


def _cast_vote(conn: Connection, packet: Packet) -> None:
    card = packet_to_card(packet)
    show_vote_card(card, LOBBY_SIZE)
    while True:
        text = read_line(VOTE_CHARS, conn.sock)
        if text is None:
            raise EOFError("end of input")
        if text == INTERRUPTED:
            print("client timeout")
            return
        index = _leading_int(text) - 1
        if 0 <= index < min(LOBBY_SIZE, len(card.responses)):
            entry = card.responses[index]
            if entry is not None and entry.player is not None:
                break
        print("Invalid choice. Please enter a valid response number: ", end="", flush=True)
    conn.send(str_to_packet(PacketType.VOTE, str(entry.player.p_id)))


def _play(conn: Connection, name: str) -> int:
    try:
        conn.send(str_to_packet(PacketType.JOIN, name))
    except OSError:
        print(f"{CLIENT_TAG} Failed to send join packet.")
        return 1
    print(f"{CLIENT_TAG} Joined as \033[1;33m{name}\033[0m.")

    try:
        greeting = _await_packet(conn)
        host = packet_to_str(greeting) == HOST_GREETING
        if host:
            print(
                f"{SERVER_TAG} You are now the \033[1;33mHost\033[0m.\n"
                "\t\033[1;37mPress any key to start the game.\033[0m",
                flush=True,
            )
        else:
            print(
                f"{SERVER_TAG} You are now a \033[1;33mGuest\033[0m.\n"
                "\t\033[1;37mPlease wait for the Host to start the game.\033[0m",
                flush=True,
            )
        _wait_for_start(conn, host)

        while True:
            packet = _await_packet(conn)
            if packet.type is PacketType.CARD:
                _answer_card(conn, packet)
            elif packet.type is PacketType.STATS:
                _show_stats(conn, packet, host)
            elif packet.type is PacketType.VOTE:
                _cast_vote(conn, packet)
            elif packet.type is PacketType.GAME_END:
                print(f"{SERVER_TAG} Received game over packet.")
                return 0
    except ConnectionClosed:
        print(f"{CLIENT_TAG} Connection dropped.")
        return 1
    except MalformedHeader:
        print(f"{CLIENT_TAG} Malformed header.")
        return 1
    except EOFError:
        print("End of file reached.")
        return 1
    except OSError as exc:
        print(f"{CLIENT_TAG} Communication with the server failed: {exc}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Join a server and play until the game ends; return the exit status."""
    args = _parse_args(argv)
    conn: Connection | None = None
    try:
        init_display()
        clear_screen()
        choice = _choose_server(args)
        try:
            sock = connect_to_server(choice.port, choice.address)
        except OSError as exc:
            print(f"Could not connect to {choice.address}:{choice.port}: {exc}", file=sys.stderr)
            return 1
        conn = Connection(sock)
        return _play(conn, choice.name)
    except KeyboardInterrupt:
        print(f"\n\n{CLIENT_TAG} Interrupted, exiting. Removing you from server.")
        if conn is not None:
            with contextlib.suppress(OSError):
                conn.send(str_to_packet(PacketType.QUIT, "i ragequit"))
        return 0
    finally:
        if conn is not None:
            conn.close()