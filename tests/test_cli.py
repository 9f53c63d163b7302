import io
import json
import sys

import pytest

from tagstream import cli
from tagstream import messages as m


class FakeProgress:
    # Stands in for alive_it(), which wants a real terminal.

    def __init__(self, items, **kwargs):
        self.items = list(items)
        self.texts = []

    def __iter__(self):
        return iter(self.items)

    def text(self, value):
        self.texts.append(value)


@pytest.fixture
def runCli(monkeypatch, messages):
    def run(*args):
        monkeypatch.setattr(sys, "argv", ["tagstream", "--print", "plain", *args])
        cli.main()

    return run


@pytest.fixture
def writeFile(tmp_path):
    def write(name, text):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return write


def test_events_listing(runCli, writeFile, capsys):
    path = writeFile("doc.html", "<p class=x>hi</p>")
    runCli("events", path)
    assert capsys.readouterr().out == "TAG open p [class='x']\nTEXT 'hi'\nTAG close p\n"


def test_events_only_named_tags(runCli, writeFile, capsys):
    path = writeFile("doc.html", "<p><b>hi</b></p>")
    runCli("events", path, "--tag", "B")
    assert capsys.readouterr().out.splitlines() == [
        "TEXT '<p>'",
        "TAG open b",
        "TEXT 'hi'",
        "TAG close b",
        "TEXT '</p>'",
    ]


def test_events_as_json(runCli, writeFile, capsys):
    path = writeFile("doc.html", "a<br/>")
    runCli("events", path, "--json")
    assert json.loads(capsys.readouterr().out) == [
        {"type": "text", "offset": 0, "length": 1, "text": "a"},
        {
            "type": "tag",
            "kind": "empty",
            "name": "br",
            "offset": 1,
            "length": 5,
            "text": "<br/>",
            "attributes": [],
        },
    ]


def test_events_from_stdin(runCli, monkeypatch, capsys, messages):
    monkeypatch.setattr(sys, "stdin", io.StringIO("<i>"))
    runCli("events", "-")
    assert capsys.readouterr().out == "TAG open i\n"


def test_events_bad_markup_fails(runCli, writeFile, capsys, messages):
    path = writeFile("bad.html", "<p>ok</p><p")
    with pytest.raises(SystemExit) as excinfo:
        runCli("events", path, "--context", "bad.html")
    assert excinfo.value.code == 2
    assert "TAG close p" in capsys.readouterr().out
    console = messages.getvalue()
    assert "LINE 1:12 of bad.html: Expected attribute or end of tag" in console
    assert "Stopped reading bad.html" in console


def test_events_bad_markup_forced(runCli, writeFile, messages):
    path = writeFile("bad.html", "<p")
    runCli("-f", "events", path)
    assert "Expected attribute or end of tag" in messages.getvalue()


def test_check(runCli, writeFile, monkeypatch, messages):
    progress = []

    def fakeAliveIt(items, **kwargs):
        progress.append(FakeProgress(items, **kwargs))
        return progress[-1]

    monkeypatch.setattr(cli, "alive_it", fakeAliveIt)
    good = writeFile("good.html", "<p>fine</p>")
    other = writeFile("other.html", "<a href=x>")
    runCli("check", good, other)
    assert progress[0].texts == [good, other]
    assert "All 2 file(s) tokenized cleanly." in messages.getvalue()


def test_check_reports_failures(runCli, writeFile, monkeypatch, messages):
    monkeypatch.setattr(cli, "alive_it", lambda items, **kwargs: FakeProgress(items))
    good = writeFile("good.html", "<p>fine</p>")
    bad = writeFile("bad.html", "<p =>")
    with pytest.raises(SystemExit) as excinfo:
        runCli("check", good, bad)
    assert excinfo.value.code == 2
    console = messages.getvalue()
    assert f"LINE 1:4 of {bad}: Expected attribute or end of tag" in console
    assert "1/2 file(s) tokenized cleanly." in console
    assert f"* {bad}" in console


def test_check_only_named_tags(runCli, writeFile, monkeypatch, messages):
    monkeypatch.setattr(cli, "alive_it", lambda items, **kwargs: FakeProgress(items))
    # The bad tag is never parsed, so the file passes.
    path = writeFile("doc.html", "<x =><p>ok</p>")
    runCli("check", path, "--tag", "p")
    assert "All 1 file(s) tokenized cleanly." in messages.getvalue()


def test_check_scanner_warning_is_not_a_failure(runCli, writeFile, monkeypatch, messages):
    monkeypatch.setattr(cli, "alive_it", lambda items, **kwargs: FakeProgress(items))
    path = writeFile("comment.html", "<p>x</p><!-- never closed")
    runCli("check", path)
    console = messages.getvalue()
    assert f"LINE 1:9 of {path}: Unterminated comment" in console
    assert "All 1 file(s) tokenized cleanly." in console
    assert "Did not finish" not in console
    assert m.state.counts == {"warning": 1}


def test_check_die_on_warning(runCli, writeFile, monkeypatch, messages):
    monkeypatch.setattr(cli, "alive_it", lambda items, **kwargs: FakeProgress(items))
    path = writeFile("comment.html", "<p>x</p><!-- never closed")
    with pytest.raises(SystemExit) as excinfo:
        runCli("--die-on", "warning", "check", path)
    assert excinfo.value.code == 2


def test_events_start_line(runCli, writeFile, messages):
    path = writeFile("bad.html", "ok\n<p =>")
    with pytest.raises(SystemExit):
        runCli("events", path, "--start-line", "20", "--context", "bad.html")
    assert "LINE 21:4 of bad.html: Expected attribute or end of tag" in messages.getvalue()


def test_events_declarations_as_tags(runCli, writeFile, capsys):
    path = writeFile("doc.html", "<!DOCTYPE html>")
    runCli("events", path)
    assert capsys.readouterr().out == "TEXT '<!DOCTYPE html>'\n"
    runCli("events", path, "--declarations-as-tags")
    assert capsys.readouterr().out == "TAG open !DOCTYPE [html]\n"
