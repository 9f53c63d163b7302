from __future__ import annotations

import contextlib
import dataclasses
import json
import os
import sys
from collections import Counter

from . import t

if t.TYPE_CHECKING:
    from typing import TextIO

    from typing_extensions import TypeAlias

    # A formatted message: either one string, or (unicode, ascii-safe) variants.
    MessageT: TypeAlias = "str | tuple[str, str]"


MESSAGE_LEVELS = {
    "everything": 0,
    "message": 1,
    "warning": 2,
    "fatal": 3,
    "nothing": 4,
}

DEATH_TIMING = [
    "early",  # exit at the first disallowed message
    "late",  # finish every input, then exit
]

PRINT_MODES = [
    "plain",
    "console",
    "markup",
    "json",
]

COLORS = {
    "red": 31,
    "green": 32,
    "light cyan": 96,
    "white": 97,
}

STYLES = {
    "bold": 1,
    "invert": 7,
}

# type -> (heading, color) for the plain and console modes
HEADINGS = {
    "fatal": ("FATAL ERROR", "red"),
    "warning": ("WARNING", "light cyan"),
}

# type -> element name for the markup mode
MARKUP_TAGS = {
    "fatal": "fatal",
    "warning": "warning",
    "message": "message",
    "success": "final-success",
    "failure": "final-failure",
}


@dataclasses.dataclass()
class MessagesState:
    # Lowest category that makes the run fail
    dieOn: str = "fatal"
    # Whether a failing message exits right away, or once all the input is processed
    dieWhen: str = "late"
    # Lowest category that gets printed
    printOn: str = "everything"
    # Suppress everything, including the final success/failure line
    silent: bool = False
    printMode: str = "console"
    asciiOnly: bool = False
    fh: TextIO = dataclasses.field(default_factory=lambda: sys.stdout)
    seen: set[MessageT] = dataclasses.field(default_factory=set)
    counts: Counter[str] = dataclasses.field(default_factory=Counter)

    def record(self, category: str, message: MessageT) -> bool:
        # Returns False for a repeat of an earlier message.
        self.counts[category] += 1
        if message in self.seen:
            return False
        self.seen.add(message)
        return True

    def replace(self, **kwargs: t.Any) -> MessagesState:
        return dataclasses.replace(self, seen=set(), counts=Counter(), **kwargs)

    def shouldDie(self, category: str, timing: str = "early") -> bool:
        if self.dieWhen == "late" and timing == "early":
            return False
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.dieOn]

    def shouldPrint(self, category: str) -> bool:
        if self.silent:
            return False
        if category in ("success", "failure"):
            return True
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.printOn]

    @staticmethod
    def categoryName(categoryNum: int) -> str:
        # Maps a count of -q flags onto the lowest level still printed.
        assert categoryNum >= 0
        names = list(MESSAGE_LEVELS.keys())
        return names[min(categoryNum, len(names) - 1)]


state = MessagesState()


def p(msg: MessageT) -> None:
    if isinstance(msg, tuple):
        fancy, plain = msg
    else:
        fancy = msg
        plain = msg.encode("ascii", "replace").decode("ascii")
    try:
        print(plain if state.asciiOnly else fancy, file=state.fh)
    except UnicodeEncodeError:
        # The console can't show it; fall back to the ascii-safe variant.
        print(plain, file=state.fh)


def _report(category: str, msg: str, loc: str | None) -> None:
    formattedMsg = formatMessage(category, msg, loc=loc)
    if state.record(category, formattedMsg) and state.shouldPrint(category):
        p(formattedMsg)
    if state.shouldDie(category):
        errorAndExit()


def die(msg: str, loc: str | None = None) -> None:
    _report("fatal", msg, loc)


def warn(msg: str, loc: str | None = None) -> None:
    _report("warning", msg, loc)


def say(msg: str) -> None:
    if state.shouldPrint("message"):
        p(formatMessage("message", msg))


def success(msg: str) -> None:
    if state.shouldPrint("success"):
        p(formatMessage("success", msg))


def failure(msg: str) -> None:
    if state.shouldPrint("failure"):
        p(formatMessage("failure", msg))


def retroactivelyCheckErrorLevel(timing: str = "late") -> bool:
    for category, count in state.counts.items():
        if count and state.shouldDie(category, timing):
            errorAndExit()
    return True


def printColor(text: str, color: str = "white", *styles: str) -> str:
    if state.printMode != "console":
        return text
    styleNums = ";".join(str(STYLES[style.lower()]) for style in styles)
    return f"\033[{styleNums};{COLORS[color.lower()]}m{text}\033[0m"


def formatMessage(type: str, text: str, loc: str | None = None) -> MessageT:
    if state.printMode == "markup":
        tag = MARKUP_TAGS[type]
        locAttr = "" if loc is None else f' loc="{loc}"'
        text = text.replace("&", "&amp;").replace("<", "&lt;")
        return f"<{tag}{locAttr}>{text}</{tag}>"
    if state.printMode == "json":
        # One object per line, so a consumer can read it as it streams.
        return json.dumps({"loc": loc, "messageType": type, "text": text})

    if type == "message":
        return text
    if type == "success":
        return (
            printColor(" ✔ ", "green", "invert") + " " + text,
            printColor("YAY", "green", "invert") + " " + text,
        )
    if type == "failure":
        return (
            printColor(" ✘ ", "red", "invert") + " " + text,
            printColor("ERR", "red", "invert") + " " + text,
        )
    heading, color = HEADINGS[type]
    if loc is not None:
        heading = f"LINE {loc}"
    return printColor(heading + ":", color, "bold") + " " + text


def errorAndExit() -> t.NoReturn:
    failure("Did not finish, due to errors exceeding the allowed error level.")
    sys.exit(2)


@contextlib.contextmanager
def withMessageState(fh: TextIO, **kwargs: t.Any) -> t.Generator[TextIO, None, None]:
    # Swaps in a fresh state writing to `fh` for the duration of the block.
    global state
    oldState = state
    state = oldState.replace(fh=fh, **kwargs)
    try:
        yield fh
    finally:
        state = oldState


@contextlib.contextmanager
def messagesSilent() -> t.Generator[TextIO, None, None]:
    with open(os.devnull, "w", encoding="utf-8") as fh, withMessageState(fh) as silentFh:
        yield silentFh
