import os
import re
import socket
import sys

import pytest

from quicksplash.models import Card
from quicksplash.ui_prompt import collect_card_response, show_card_prompt

ANSI = re.compile(r"\033\[[0-9;]*[A-Za-z]")
BOX = ("│", "╭", "├", "╰")
PHRASE = "test phrase orange lemon village orangutan"


class _RawStdin:
    """Unbuffered byte view of a pipe, so no input is read ahead."""

    def __init__(self, raw):
        self._raw = raw

    def fileno(self):
        return self._raw.fileno()

    def readline(self, size=-1):
        return self._raw.readline(size)

    def read(self, size=-1):
        return self._raw.read(size)

    def isatty(self):
        return False


class _PipeStdin:
    """Text stand-in for standard input backed by a pipe."""

    encoding = "utf-8"

    def __init__(self, raw):
        self.buffer = _RawStdin(raw)

    def fileno(self):
        return self.buffer.fileno()

    def readline(self, size=-1):
        return self.buffer.readline(size).decode("utf-8", "replace")

    def read(self, size=-1):
        return self.buffer.read(size).decode("utf-8", "replace")

    def isatty(self):
        return False


@pytest.fixture
def writer(monkeypatch):
    r, w = os.pipe()
    reader = os.fdopen(r, "rb", buffering=0)
    pipe_writer = os.fdopen(w, "wb", buffering=0)
    monkeypatch.setattr(sys, "stdin", _PipeStdin(reader))
    yield pipe_writer
    reader.close()
    if not pipe_writer.closed:
        pipe_writer.close()


@pytest.fixture(autouse=True)
def columns(monkeypatch):
    monkeypatch.setenv("COLUMNS", "80")


def _box_lines(out):
    return [ANSI.sub("", line) for line in out.splitlines() if any(ch in line for ch in BOX)]


def test_show_card_prompt_contents(capsys):
    show_card_prompt(Card(prompt_text=PHRASE))
    out = capsys.readouterr().out
    assert "CARD PROMPT" in out
    assert PHRASE in out


def test_show_card_prompt_box_is_rectangular(capsys, monkeypatch):
    monkeypatch.setenv("COLUMNS", "40")
    show_card_prompt(Card(prompt_text=PHRASE * 3))
    lines = _box_lines(capsys.readouterr().out)
    assert len(lines) > 5
    assert len({len(line) for line in lines}) == 1


def test_missing_prompt_placeholder(capsys):
    show_card_prompt(Card(prompt_text=None))
    assert "[missing prompt]" in capsys.readouterr().out


def test_collect_reprompts_on_empty(writer, capsys):
    writer.write(b"\nfunny\n")
    answer = collect_card_response(Card(prompt_text=PHRASE), 20)
    out = capsys.readouterr().out
    assert answer == "funny"
    assert "Please enter at least one character." in out
    assert "Response (20 chars max)" in out


def test_collect_truncates(writer):
    writer.write(b"abcdef\n")
    assert collect_card_response(Card(prompt_text=PHRASE), 3) == "abc"


def test_collect_interrupted_by_server(writer):
    a, b = socket.socketpair()
    try:
        a.sendall(b"x")
        assert collect_card_response(Card(prompt_text=PHRASE), 10, b) is None
    finally:
        a.close()
        b.close()


def test_collect_typed_interrupt_word(writer):
    writer.write(b"INT\n")
    assert collect_card_response(Card(prompt_text=PHRASE), 10) is None


def test_collect_eof_raises(writer):
    writer.close()
    with pytest.raises(EOFError):
        collect_card_response(Card(prompt_text=PHRASE), 10)