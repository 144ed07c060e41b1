"""Line-stream helpers for reading (optionally gzipped) text inputs."""

import gzip
from pathlib import Path
from typing import IO, Iterable, Iterator

from peptide_tmm.errors import MalformedRecordError


def open_text(path: str | Path) -> IO[str]:
    """Open a text file for reading, decompressing ``.gz``/``.tgz`` files."""
    path = Path(path)
    if path.suffix in (".gz", ".tgz"):
        return gzip.open(path, "rt", encoding="utf-8")
    return open(path, encoding="utf-8")


class LineReader:
    """Iterate over a text stream with newline stripping and one-line pushback.

    Keeps track of the current line number so parse errors can point at the
    offending line.
    """

    def __init__(self, lines: Iterable[str], source: str = "<stream>"):
        self._lines = iter(lines)
        self._pushed: list[str] = []
        self.source = source
        self.line_number = 0

    def __iter__(self) -> Iterator[str]:
        return self

    def __next__(self) -> str:
        if self._pushed:
            line = self._pushed.pop()
        else:
            line = next(self._lines).rstrip("\r\n")
        self.line_number += 1
        return line

    def push_back(self, line: str) -> None:
        """Return a line to the stream; the next read yields it again."""
        self._pushed.append(line)
        self.line_number -= 1

    def require(self, context: str) -> str:
        """Read the next line, raising if the stream ends inside ``context``."""
        try:
            return next(self)
        except StopIteration:
            raise MalformedRecordError(
                f"unexpected end of stream inside {context}",
                source=self.source,
                line_number=self.line_number,
            ) from None

    def first_non_empty(self) -> str | None:
        """Skip blank lines and return the first non-empty one (or None)."""
        for line in self:
            if line.strip():
                return line
        return None

    def error(self, message: str) -> MalformedRecordError:
        return MalformedRecordError(message, source=self.source, line_number=self.line_number)
