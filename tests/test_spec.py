import io
import sys
from pathlib import Path

import pytest

from discogen.templating.spec import Spec, StreamOrPath, TemplatingError

STREAM = StreamOrPath()


def test_parse_empty():
    actual = Spec.parse("")
    assert actual == Spec(src=STREAM, dst=STREAM)
    assert str(actual) == ":"


def test_parse_colon():
    actual = Spec.parse(":")
    assert actual == Spec(src=STREAM, dst=STREAM)
    assert str(actual) == ":"


def test_parse_stream_path():
    actual = Spec.parse(":foo")
    assert actual == Spec(src=STREAM, dst=StreamOrPath(Path("foo")))
    assert str(actual) == ":foo"


def test_parse_path_stream():
    actual = Spec.parse("foo:")
    assert actual == Spec(src=StreamOrPath(Path("foo")), dst=STREAM)
    assert str(actual) == "foo"


def test_parse_path_without_separator():
    actual = Spec.parse("foo")
    assert actual == Spec(src=StreamOrPath(Path("foo")), dst=STREAM)


def test_parse_path_path():
    actual = Spec.parse("foo:bar")
    assert actual == Spec(src=StreamOrPath(Path("foo")), dst=StreamOrPath(Path("bar")))
    assert str(actual) == "foo:bar"


def test_parse_absolute_path_absolute_path():
    actual = Spec.parse("/foo/sub:/bar/sub")
    assert actual == Spec(
        src=StreamOrPath(Path("/foo/sub")), dst=StreamOrPath(Path("/bar/sub"))
    )
    assert str(actual) == "/foo/sub:/bar/sub"


def test_stream_or_path_parse():
    assert StreamOrPath.parse("").is_stream()
    assert StreamOrPath.parse("x/y.tpl") == StreamOrPath(Path("x/y.tpl"))
    assert not StreamOrPath.parse("x").is_stream()


def test_names():
    assert STREAM.name() == "stream"
    assert STREAM.short_name() == "stream"
    assert str(STREAM) == ""
    p = StreamOrPath(Path("dir/file.yml"))
    assert p.name() == str(Path("dir/file.yml"))
    assert p.short_name() == "file"


def test_open_as_output_truncates_and_appends(tmp_path):
    target = StreamOrPath(tmp_path / "sub" / "out.txt")
    with target.open_as_output(False) as out:
        out.write(b"first")
    with target.open_as_output(True) as out:
        out.write(b"second")
    assert (tmp_path / "sub" / "out.txt").read_bytes() == b"firstsecond"
    with target.open_as_output(False) as out:
        out.write(b"third")
    assert (tmp_path / "sub" / "out.txt").read_bytes() == b"third"


def test_open_as_input_reads_file(tmp_path):
    path = tmp_path / "in.txt"
    path.write_bytes(b"content")
    with StreamOrPath(path).open_as_input() as handle:
        assert handle.read() == b"content"


def test_open_as_input_missing_file(tmp_path):
    with pytest.raises(TemplatingError, match="for reading"):
        with StreamOrPath(tmp_path / "missing").open_as_input():
            pass


class _TtyStdin(io.TextIOWrapper):
    def isatty(self):
        return True


def test_open_as_input_refuses_terminal(monkeypatch):
    monkeypatch.setattr(sys, "stdin", _TtyStdin(io.BytesIO(b"")))
    with pytest.raises(TemplatingError, match="terminal"):
        with STREAM.open_as_input():
            pass


def test_open_as_input_reads_stdin(monkeypatch):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"piped")))
    with STREAM.open_as_input() as handle:
        assert handle.read() == b"piped"