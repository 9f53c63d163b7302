from __future__ import annotations

from dataclasses import dataclass

from .. import messages as m
from .. import t

if t.TYPE_CHECKING:
    from .nodes import TagView, TextView


class TokenHandler(t.Protocol):
    """
    Receives the events of a parse pass.

    The views passed to onText()/onTag() are immutable,
    so they're safe to hold onto after the callback returns.

    A handler may also define onWarning(message, line, column)
    to hear about the scanner's non-fatal problems;
    without one, those go to onError() as well.
    """

    def caresAboutTag(self, name: str) -> bool: ...

    def onText(self, text: TextView) -> None: ...

    def onTag(self, tag: TagView) -> None: ...

    def onError(self, message: str, line: int, column: int) -> None: ...


def reportToConsole(message: str, line: int, column: int, context: str | None = None, fatal: bool = True) -> None:
    loc = f"{line}:{column}"
    if context is not None:
        loc += f" of {context}"
    if fatal:
        m.die(message, loc=loc)
    else:
        m.warn(message, loc=loc)


class BaseHandler:
    # Cares about every tag, ignores all the events,
    # and sends errors and warnings to the console.

    def __init__(self, context: str | None = None) -> None:
        self.context = context

    def caresAboutTag(self, name: str) -> bool:
        return True

    def onText(self, text: TextView) -> None:
        pass

    def onTag(self, tag: TagView) -> None:
        pass

    def onError(self, message: str, line: int, column: int) -> None:
        reportToConsole(message, line, column, self.context)

    def onWarning(self, message: str, line: int, column: int) -> None:
        reportToConsole(message, line, column, self.context, fatal=False)


class TagFilter(BaseHandler):
    # Only cares about the named tags (any case). No names means every tag.

    def __init__(self, names: t.Iterable[str] | None = None, context: str | None = None) -> None:
        super().__init__(context=context)
        self.names = None if names is None else frozenset(name.lower() for name in names)

    def caresAboutTag(self, name: str) -> bool:
        return self.names is None or name.lower() in self.names


@dataclass(frozen=True)
class ReportedError:
    message: str
    line: int
    column: int


class EventRecorder(TagFilter):
    # Keeps everything it's handed, in order. Scanner warnings go in their own list.

    def __init__(self, names: t.Iterable[str] | None = None, context: str | None = None) -> None:
        super().__init__(names, context=context)
        self.events: list[t.EventT] = []
        self.errors: list[ReportedError] = []
        self.warnings: list[ReportedError] = []

    def onText(self, text: TextView) -> None:
        self.events.append(text)

    def onTag(self, tag: TagView) -> None:
        self.events.append(tag)

    def onError(self, message: str, line: int, column: int) -> None:
        self.errors.append(ReportedError(message, line, column))

    def onWarning(self, message: str, line: int, column: int) -> None:
        self.warnings.append(ReportedError(message, line, column))
