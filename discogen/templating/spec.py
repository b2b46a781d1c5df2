"""Template specs: where a template is read from and where its output goes."""

from __future__ import annotations

import contextlib
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterator, Optional


class TemplatingError(Exception):
    """Raised when templates, data or their inputs and outputs cannot be handled."""


@dataclass(frozen=True)
class StreamOrPath:
    """Either a standard stream (``path`` is None) or a file path."""

    path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.path is not None and not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @classmethod
    def parse(cls, text: str) -> "StreamOrPath":
        """An empty string means the stream, anything else is a path."""
        return cls() if not text else cls(Path(text))

    def is_stream(self) -> bool:
        return self.path is None

    def name(self) -> str:
        return "stream" if self.path is None else str(self.path)

    def short_name(self) -> str:
        if self.path is None:
            return "stream"
        return self.path.stem or "<invalid-file-stem>"

    @contextlib.contextmanager
    def open_as_output(self, append: bool) -> Iterator[BinaryIO]:
        """Open for binary writing; files are appended to or truncated."""
        if self.path is None:
            sys.stdout.flush()
            out = sys.stdout.buffer
            try:
                yield out
            finally:
                out.flush()
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise TemplatingError(
                f"Could not create directory leading towards '{self.path}'"
            ) from err
        try:
            handle = open(self.path, "ab" if append else "wb")
        except OSError as err:
            raise TemplatingError(f"Could not open '{self.path}' for writing") from err
        with handle:
            yield handle

    @contextlib.contextmanager
    def open_as_input(self) -> Iterator[BinaryIO]:
        """Open for binary reading; standard input must not be a terminal."""
        if self.path is None:
            if sys.stdin.isatty():
                raise TemplatingError(
                    "Cannot read from standard input while a terminal is connected"
                )
            yield sys.stdin.buffer
            return
        try:
            handle = open(self.path, "rb")
        except OSError as err:
            raise TemplatingError(f"Could not open '{self.path}' for reading") from err
        with handle:
            yield handle

    def __str__(self) -> str:
        return "" if self.path is None else str(self.path)


@dataclass(frozen=True)
class Spec:
    """Maps a template source to a destination, written as ``<src>:<dst>``."""

    src: StreamOrPath = field(default_factory=StreamOrPath)
    dst: StreamOrPath = field(default_factory=StreamOrPath)

    SEP = ":"

    @classmethod
    def parse(cls, text: str) -> "Spec":
        src, sep, dst = text.partition(cls.SEP)
        if not sep:
            return cls(StreamOrPath.parse(src), StreamOrPath())
        return cls(StreamOrPath.parse(src), StreamOrPath.parse(dst))

    def __str__(self) -> str:
        if self.dst.is_stream():
            return self.SEP if self.src.is_stream() else str(self.src)
        return f"{self.src}{self.SEP}{self.dst}"