from __future__ import annotations

import io

from .. import t
from .handler import EventRecorder
from .nodes import TagView, TextView
from .parser import Parser
from .stream import DEFAULT_PARSE_CONFIG, ParseConfig

if t.TYPE_CHECKING:
    from .handler import TokenHandler


def tokenize(
    text: str,
    handler: TokenHandler,
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
) -> None:
    # One full pass over the text, feeding the handler.
    # Raises a TokenizerError (after telling the handler) on the first bad tag.
    Parser(text, handler, config=config).start()


def eventsFromText(
    text: str,
    caresAbout: t.Iterable[str] | None = None,
    config: ParseConfig = DEFAULT_PARSE_CONFIG,
) -> list[t.EventT]:
    """
    Runs the text thru the parser and returns every event, in order.
    `caresAbout` limits which tags get parsed as tags (case-insensitively);
    the rest come back as text. None means all of them.
    """
    recorder = EventRecorder(caresAbout, context=config.context)
    tokenize(text, recorder, config=config)
    return recorder.events


def textFromEvents(events: t.Iterable[t.EventT]) -> str:
    out = io.StringIO()
    for event in events:
        event.writeTo(out)
    return out.getvalue()


def debugEvent(event: t.EventT) -> str:
    if isinstance(event, TextView):
        return f"TEXT {event.text!r}"
    attrs = []
    for attr in event.attributes:
        if attr.value is None:
            attrs.append(attr.name)
        else:
            attrs.append(f"{attr.name}={attr.value!r}")
    s = f"TAG {event.kind.value} {event.name}"
    if attrs:
        s += " [" + " ".join(attrs) + "]"
    return s


def jsonFromEvent(event: t.EventT) -> dict[str, t.Any]:
    ret: dict[str, t.Any] = {
        "offset": event.offset,
        "length": event.length,
        "text": event.text,
    }
    if isinstance(event, TagView):
        ret["type"] = "tag"
        ret["kind"] = event.kind.value
        ret["name"] = event.name
        ret["attributes"] = [[attr.name, attr.value] for attr in event.attributes]
    else:
        ret["type"] = "text"
    return ret
