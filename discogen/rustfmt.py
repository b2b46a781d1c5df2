"""A writer that pipes generated code through rustfmt when it is available."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import BinaryIO, Optional


def rustfmt_path() -> Optional[Path]:
    """Locate rustfmt; an empty ``RUSTFMT`` variable disables formatting."""
    which = os.environ.get("RUSTFMT")
    if which is not None:
        return Path(which) if which else None
    found = shutil.which("rustfmt")
    return Path(found) if found else None


class RustFmtWriter:
    """Write bytes to a file, formatted by rustfmt if it can be found.

    The writer takes ownership of ``output_file`` and closes it on ``close``.
    """

    def __init__(self, output_file: BinaryIO) -> None:
        self._file = output_file
        self._process: Optional[subprocess.Popen] = None
        path = rustfmt_path()
        if path is not None:
            self._process = subprocess.Popen(
                [str(path), "--edition=2018"],
                stdin=subprocess.PIPE,
                stdout=output_file,
            )

    @property
    def formatted(self) -> bool:
        return self._process is not None

    def write(self, data: bytes) -> int:
        if self._process is not None:
            assert self._process.stdin is not None
            self._process.stdin.write(data)
            return len(data)
        return self._file.write(data)

    def flush(self) -> None:
        if self._process is None:
            self._file.flush()

    def close(self) -> None:
        """Finish writing; raise RuntimeError if rustfmt failed."""
        try:
            if self._process is not None:
                assert self._process.stdin is not None
                self._process.stdin.close()
                if self._process.wait() != 0:
                    raise RuntimeError("rustfmt exited with error")
            else:
                self._file.flush()
                os.fsync(self._file.fileno())
        finally:
            self._file.close()

    def __enter__(self) -> "RustFmtWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except (OSError, RuntimeError):
            pass