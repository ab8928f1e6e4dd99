# quicksplash

A small multiplayer party game played in the terminal. A server deals a
prompt card to every player, each player types the funniest reply they can
think of, everyone votes on the best answer, and the player with the most
votes takes the round. After the last round the final standings are shown.

## Installing

```
pip install .
```

The package has no runtime dependencies beyond the standard library and runs
on POSIX systems with Python 3.10 or newer.

## Running a server

The server needs a prompt deck: a text file with one prompt per line. By
default it reads `assets/prompts.txt` relative to the current directory; at
most 135 prompts are loaded.

```
quicksplash-server [--port PORT] [--prompts FILE] [--rounds N]
```

- `--port` – port to listen on. Without it the server picks a random port
  from 30000 upwards (below 65000) and prints it once it is listening.
- `--prompts` – the prompt file (default `assets/prompts.txt`).
- `--rounds` – number of rounds to play (default 2).

The server logs its progress to the terminal and exits once the game is over.

## Joining as a player

```
quicksplash-client [--name NAME] [--port PORT] [--address HOST]
```

With no options the client shows a join screen asking for three things;
press Enter on any field to keep its default:

- **Username** – up to 31 characters, defaults to a random `Guest#####` name.
- **Port** – defaults to `30000`.
- **Server** – host name or address, defaults to `127.0.0.1`.

Giving any of the options skips the join screen; the missing ones take the
same defaults.

## How a game plays

- Up to five players can sit in the lobby. The player in the first seat
  becomes the **host**; everyone else is a guest.
- The host presses Enter to start the game once everyone has joined.
- Each round a prompt card is drawn. Players have 60 seconds to type a
  reply (at most 255 characters, and at least one).
- All replies are then shown on a numbered voting board. Type the number of
  your favourite reply and press Enter; again there are 60 seconds to vote.
- The reply with the most votes wins the round; on a tie every tied player
  gets the point. The round results show each reply with its vote count.
- The host presses Enter to move on to the next round. If the host has left
  by then, the game ends early.
- After the last round the server sends the final standings and a game-over
  message, and the clients exit.

Pressing Ctrl+C in the client tells the server you are leaving before the
client exits.

## Wire format

Every message is a packet: an 8-byte header carrying the packet type and a
16-bit payload length in network byte order, followed by the payload bytes.
Text payloads are NUL-terminated strings. Cards are sent as the prompt text
followed by one record per reply, each record introduced by the ASCII record
separator (0x1E) and holding the player id, player name and reply text
separated by the ASCII unit separator (0x1F).

The library parts can be used on their own:

- `quicksplash.models` – `PacketType`, `PlayerState`, `Packet`, `Player`,
  `Response` and `Card`.
- `quicksplash.protocol` – `pack_header`, `unpack_header`, `str_to_packet`,
  `packet_to_str`, `card_to_packet` and `packet_to_card`.
- `quicksplash.comms` – `Connection`, which assembles whole packets from
  non-blocking reads and sends them, and `send_packet`; a dropped peer raises
  `ConnectionClosed`, an undecodable header `MalformedHeader`.
- `quicksplash.network` – `create_server_socket`, `accept_connection` and
  `connect_to_server`.
- `quicksplash.cards` – `generate_cards` and `draw_random`.
- `quicksplash.server_comms.Roster`, `quicksplash.lobby.start_lobby`,
  `quicksplash.gamestates.Game` and `quicksplash.gamehandler.game_loop` –
  the server's lobby and round phases.

## What it does not do

- No prompt deck is included; the server needs a prompt file to be supplied.
- The client does not display the notices the server sends when a player
  leaves mid-game.
- There is no way to play more than one game per server run, and no scores
  are kept between runs.

## Running the tests

```
pip install ".[test]"
pytest
```