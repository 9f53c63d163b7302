from .errors import (
    GrammarError,
    PushbackError,
    ScannerError,
    TokenizerError,
)
from .handler import (
    BaseHandler,
    EventRecorder,
    ReportedError,
    TagFilter,
    TokenHandler,
    reportToConsole,
)
from .lexer import Lexer, TokenSource
from .main import (
    debugEvent,
    eventsFromText,
    jsonFromEvent,
    textFromEvents,
    tokenize,
)
from .nodes import (
    Attribute,
    TagKind,
    TagView,
    TextView,
)
from .parser import Parser
from .stream import (
    DEFAULT_PARSE_CONFIG,
    ParseConfig,
    TokenStream,
)
from .tokens import Pushback, TokenKind
