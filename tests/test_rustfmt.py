import stat
from pathlib import Path

import pytest

from discogen.rustfmt import RustFmtWriter, rustfmt_path


def _script(tmp_path, name, body):
    path = tmp_path / name
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_empty_rustfmt_variable_disables_formatting(monkeypatch):
    monkeypatch.setenv("RUSTFMT", "")
    assert rustfmt_path() is None


def test_rustfmt_variable_names_the_program(monkeypatch, tmp_path):
    target = tmp_path / "fmt"
    monkeypatch.setenv("RUSTFMT", str(target))
    assert rustfmt_path() == target


def test_unformatted_writer_writes_bytes(monkeypatch, tmp_path):
    monkeypatch.setenv("RUSTFMT", "")
    out = tmp_path / "out.rs"
    writer = RustFmtWriter(open(out, "wb"))
    assert writer.formatted is False
    assert writer.write(b"fn main() {}") == len(b"fn main() {}")
    writer.flush()
    writer.close()
    assert out.read_bytes() == b"fn main() {}"


def test_context_manager_closes_file(monkeypatch, tmp_path):
    monkeypatch.setenv("RUSTFMT", "")
    out = tmp_path / "out.rs"
    handle = open(out, "wb")
    with RustFmtWriter(handle) as writer:
        writer.write(b"a")
        writer.write(b"b")
    assert handle.closed
    assert out.read_bytes() == b"ab"


def test_formatted_writer_pipes_through_program(monkeypatch, tmp_path):
    monkeypatch.setenv("RUSTFMT", str(_script(tmp_path, "fmt", "cat\n")))
    out = tmp_path / "out.rs"
    with RustFmtWriter(open(out, "wb")) as writer:
        assert writer.formatted is True
        writer.write(b"struct A;")
    assert out.read_bytes() == b"struct A;"


def test_formatted_writer_reports_failure(monkeypatch, tmp_path):
    monkeypatch.setenv("RUSTFMT", str(_script(tmp_path, "fmt", "cat >/dev/null\nexit 3\n")))
    out = tmp_path / "out.rs"
    writer = RustFmtWriter(open(out, "wb"))
    writer.write(b"struct A;")
    with pytest.raises(RuntimeError, match="rustfmt exited with error"):
        writer.close()


def test_missing_program_raises(monkeypatch, tmp_path):
    monkeypatch.setenv("RUSTFMT", str(Path(tmp_path) / "does-not-exist"))
    with pytest.raises(OSError):
        RustFmtWriter(open(tmp_path / "out.rs", "wb"))