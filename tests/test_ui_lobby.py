import os
import random
import re
import sys

import pytest

from quicksplash.ui_lobby import (
    ADDRESS_CHARS,
    DEFAULT_ADDRESS,
    DEFAULT_PORT,
    NAME_CHARS,
    ServerChoice,
    default_guest_name,
    server_select,
)


@pytest.fixture(autouse=True)
def _wide_terminal(monkeypatch):
    monkeypatch.setenv("COLUMNS", "100")


@pytest.fixture
def feed(monkeypatch):
    opened = []

    def _feed(text):
        read_fd, write_fd = os.pipe()
        os.write(write_fd, text.encode("utf-8"))
        os.close(write_fd)
        stream = os.fdopen(read_fd, "rb")
        opened.append(stream)
        monkeypatch.setattr(sys, "stdin", stream)

    yield _feed
    for stream in opened:
        stream.close()


def test_all_fields_filled_in(capsys, feed):
    feed("alice\n4000\nexample.org\n")
    choice = server_select()
    assert choice == ServerChoice(name="alice", port=4000, address="example.org")
    out = capsys.readouterr().out
    assert "Connecting to example.org:4000 as alice" in out


def test_empty_fields_take_defaults(feed):
    feed("\n\n\n")
    choice = server_select()
    assert choice.port == DEFAULT_PORT
    assert choice.address == DEFAULT_ADDRESS
    assert re.fullmatch(r"Guest\d{5}", choice.name)


def test_end_of_input_takes_defaults(feed):
    feed("")
    choice = server_select()
    assert choice.port == DEFAULT_PORT
    assert choice.address == DEFAULT_ADDRESS
    assert choice.name.startswith("Guest")


def test_overlong_fields_are_truncated(feed):
    long_name = "n" * (NAME_CHARS + 9)
    long_address = "a" * (ADDRESS_CHARS + 5)
    feed(f"{long_name}\n\n{long_address}\n")
    choice = server_select()
    assert choice.name == long_name[:NAME_CHARS]
    assert choice.address == long_address[:ADDRESS_CHARS]


def test_port_digits_are_read_from_the_front(feed):
    feed("bob\n80x\nhost\n")
    choice = server_select()
    assert choice.port == 80


def test_non_numeric_port_becomes_zero(feed):
    feed("bob\nabc\nhost\n")
    choice = server_select()
    assert choice.port == 0


def test_wide_terminal_draws_the_box(capsys, feed):
    feed("alice\n4000\nexample.org\n")
    server_select()
    out = capsys.readouterr().out
    assert "QUICK SPLASH // JOIN LOBBY WITH IP" in out
    assert "Quick Splash Lobby Check-In" not in out


def test_narrow_terminal_uses_plain_listing(capsys, monkeypatch, feed):
    monkeypatch.setenv("COLUMNS", "20")
    feed("alice\n4000\nexample.org\n")
    choice = server_select()
    out = capsys.readouterr().out
    assert "Quick Splash Lobby Check-In" in out
    assert "Username: alice" in out
    assert choice.address == "example.org"


def test_guest_name_shape():
    name = default_guest_name(random.Random(11))
    assert re.fullmatch(r"Guest\d{5}", name)
    assert 10000 <= int(name[len("Guest"):]) <= 99999


def test_guest_name_follows_the_generator():
    first = [default_guest_name(random.Random(5)) for _ in range(3)]
    assert first[0] == first[1] == first[2]
    rng = random.Random(7)
    names = [default_guest_name(rng) for _ in range(50)]
    assert all(re.fullmatch(r"Guest\d{5}", name) for name in names)
    assert len(set(names)) > 1