from __future__ import annotations

import argparse
import json
import os
import sys

from alive_progress import alive_it

from . import config
from . import messages as m
from .parser import (
    EventRecorder,
    ParseConfig,
    TagFilter,
    TokenizerError,
    debugEvent,
    jsonFromEvent,
    reportToConsole,
    tokenize,
)


def main() -> None:
    try:
        with open(config.scriptPath("semver.txt"), encoding="utf-8") as fh:
            semver = fh.read().strip()
            semverText = f"tagstream v{semver}: "
    except FileNotFoundError:
        semver = "???"
        semverText = ""

    argparser = argparse.ArgumentParser(description=f"{semverText}Splits markup into text and tag events.")
    argparser.add_argument("--version", action="version", version=semver)
    argparser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="count",
        default=0,
        help="Silences one level of message, least-important first.",
    )
    argparser.add_argument(
        "-s",
        "--silent",
        dest="silent",
        action="store_true",
        help="Shorthand for 'as many -q as you need to shut it up'",
    )
    argparser.add_argument(
        "-f",
        "--force",
        dest="errorLevel",
        action="store_const",
        const="nothing",
        help="Don't exit with an error status, whatever gets reported.",
    )
    argparser.add_argument(
        "-a",
        "--ascii-only",
        dest="asciiOnly",
        action="store_true",
        help="Force all messages to be ASCII-only.",
    )
    argparser.add_argument(
        "--print",
        dest="printMode",
        choices=m.PRINT_MODES,
        default=None,
        help="How messages are formatted. Options are 'plain' (just text), 'console' (text with console color codes), 'markup' (XML), and 'json' (JSON stream). Defaults to 'console'.",
    )
    argparser.add_argument(
        "--die-on",
        dest="errorLevel",
        choices=list(m.MESSAGE_LEVELS.keys()),
        help="Determines what sorts of messages cause a failing exit. Default is 'fatal'; the -f flag is a shorthand for 'nothing'",
    )
    argparser.add_argument(
        "--die-when",
        dest="errorTiming",
        choices=m.DEATH_TIMING,
        default="late",
        help="When a disallowed error should stop processing. 'early' stops at the first one; 'late' works thru every input first so you can see all the errors.",
    )

    subparsers = argparser.add_subparsers(title="Subcommands", dest="subparserName")

    eventsParser = subparsers.add_parser("events", help="Print the text and tag events found in a file.")
    eventsParser.add_argument(
        "infile",
        help='Path to the source file, or "-" for stdin.',
    )
    eventsParser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=None,
        metavar="NAME",
        help="Only parse these tags (repeatable, any case); every other tag is reported as text. Defaults to all tags.",
    )
    eventsParser.add_argument(
        "--json",
        dest="json",
        action="store_true",
        help="Print the events as a JSON array instead of one per line.",
    )
    eventsParser.add_argument(
        "--context",
        dest="context",
        default=None,
        help="Name to use for the input in error messages. Defaults to the file path.",
    )
    addParseOptions(eventsParser)

    checkParser = subparsers.add_parser("check", help="Tokenize files and report any markup the tag grammar rejects.")
    checkParser.add_argument(
        "infiles",
        nargs="+",
        help="Paths to the source files.",
    )
    checkParser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=None,
        metavar="NAME",
        help="Only parse these tags (repeatable, any case). Defaults to all tags.",
    )
    addParseOptions(checkParser)

    options = argparser.parse_args()

    if options.silent:
        m.state.printOn = "nothing"
        m.state.silent = True
    else:
        m.state.printOn = m.MessagesState.categoryName(options.quiet)
    if options.errorLevel is not None:
        m.state.dieOn = options.errorLevel
    m.state.dieWhen = options.errorTiming
    m.state.asciiOnly = options.asciiOnly
    if options.printMode is None:
        if "NO_COLOR" in os.environ or os.environ.get("TERM") == "dumb":
            m.state.printMode = "plain"
        else:
            m.state.printMode = "console"
    else:
        m.state.printMode = options.printMode

    if options.subparserName == "events":
        handleEvents(options)
    elif options.subparserName == "check":
        handleCheck(options)
    else:
        argparser.print_help()


def addParseOptions(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--start-line",
        dest="startLine",
        type=int,
        default=1,
        metavar="N",
        help="Line number of the first line of input, for error locations. Defaults to 1.",
    )
    subparser.add_argument(
        "--declarations-as-tags",
        dest="declarationsAsTags",
        action="store_true",
        help="Scan <!...> and <?...> constructs as ordinary tags instead of passing them thru as text.",
    )


def parseConfigFromOptions(options: argparse.Namespace, context: str) -> ParseConfig:
    return ParseConfig(
        startLine=options.startLine,
        context=context,
        declarationsAsText=not options.declarationsAsTags,
    )


class ConsoleRecorder(EventRecorder):
    # Records errors and warnings like EventRecorder, and also prints them.

    def onError(self, message: str, line: int, column: int) -> None:
        super().onError(message, line, column)
        reportToConsole(message, line, column, self.context)

    def onWarning(self, message: str, line: int, column: int) -> None:
        super().onWarning(message, line, column)
        reportToConsole(message, line, column, self.context, fatal=False)


def handleEvents(options: argparse.Namespace) -> None:
    context = options.context
    if context is None:
        context = "stdin" if options.infile == "-" else options.infile
    text = config.readText(options.infile)
    recorder = ConsoleRecorder(options.tags, context=context)
    try:
        tokenize(text, recorder, config=parseConfigFromOptions(options, context))
    except TokenizerError:
        m.failure(f"Stopped reading {context} at the first bad tag; events after it are missing.")

    if options.json:
        sys.stdout.write(json.dumps([jsonFromEvent(event) for event in recorder.events], indent=2) + "\n")
    else:
        for event in recorder.events:
            sys.stdout.write(debugEvent(event) + "\n")
    m.retroactivelyCheckErrorLevel()


def handleCheck(options: argparse.Namespace) -> None:
    fails = []
    pathProgress = alive_it(options.infiles, dual_line=True, length=20)
    for path in pathProgress:
        pathProgress.text(path)
        handler = TagFilter(options.tags, context=path)
        try:
            tokenize(config.readText(path), handler, config=parseConfigFromOptions(options, path))
        except TokenizerError:
            fails.append(path)
    total = len(options.infiles)
    if not fails:
        m.success(f"All {total} file(s) tokenized cleanly.")
    else:
        m.failure(f"{total - len(fails)}/{total} file(s) tokenized cleanly. Failed files:")
        for fail in fails:
            m.p("* " + fail)
    # Every failed file already logged a fatal message,
    # so this exits unless --force/--die-on says otherwise.
    m.retroactivelyCheckErrorLevel()
