import io

import pytest

from tagstream import messages as m
from tagstream.parser import EventRecorder, TokenKind


class ScriptedSource:
    """
    A token source that plays back a fixed list of (kind, text) pairs,
    all on line 1, then END_OF_INPUT once.
    """

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.index = -1
        self.offsets = []
        offset = 0
        for _, text in self.tokens:
            self.offsets.append(offset)
            offset += len(text)
        self.total = offset
        self.calls = 0

    def nextTokenKind(self):
        self.calls += 1
        self.index += 1
        if self.index < len(self.tokens):
            return self.tokens[self.index][0]
        if self.index == len(self.tokens):
            return TokenKind.END_OF_INPUT
        raise AssertionError("read past the end")

    def currentMatchedText(self):
        if self.index < len(self.tokens):
            return self.tokens[self.index][1]
        return ""

    def currentPosition(self):
        if self.index < len(self.tokens):
            return self.offsets[self.index]
        return self.total

    def currentLength(self):
        return len(self.currentMatchedText())

    def currentLine(self):
        return 1

    def currentColumn(self):
        return self.currentPosition() + 1

    def loc(self):
        return f"1:{self.currentColumn()}"

    def text(self):
        return "".join(text for _, text in self.tokens)


@pytest.fixture
def scripted():
    return ScriptedSource


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def messages():
    # Route console messages into a buffer, and restore the global state afterwards.
    with m.withMessageState(io.StringIO(), printMode="plain") as fh:
        yield fh
