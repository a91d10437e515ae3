from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator

from ..errors import FormatError, UnrecognizedOperation
from ..utils.logging import get_logger

logger = get_logger(__name__)


class Operation(str, Enum):
    """Trace operations. Loads and stores hit the cache the same way."""

    LOAD = "l"
    STORE = "s"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: str) -> Operation:
        try:
            return cls(token.strip().lower())
        except ValueError:
            raise UnrecognizedOperation(f"Expected 'l' or 's', got {token!r}", text=token) from None


@dataclass(frozen=True)
class TraceRecord:
    """One '<op> <address>' line of a trace, kept raw until it is replayed."""
    op: str
    address: str
    line_number: int = 0
    text: str = ""


def parse_record(line: str, line_number: int = 0) -> TraceRecord | None:
    """Parses one trace line. Returns None for a blank line.

    The line is case-folded; fields after the address (e.g. an access size)
    are ignored.
    """
    text = line.strip()
    if not text:
        return None
    fields = text.lower().split()
    if len(fields) < 2:
        raise FormatError("Expected '<op> <address>'").with_context(line_number, text)
    return TraceRecord(op=fields[0], address=fields[1], line_number=line_number, text=text)


def read_trace(path: str | Path) -> Iterator[TraceRecord]:
    """Yields the records of a UTF-8 trace file in order, skipping blank lines."""
    with open(path, "r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            record = parse_record(line, line_number)
            if record is None:
                logger.debug(f"{path}:{line_number}: skipping blank line")
                continue
            yield record
