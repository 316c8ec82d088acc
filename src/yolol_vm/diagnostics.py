"""
Per-Line Error Log
==================

Diagnostics produced while a program runs are kept per line. Each time a
line is executed its previous entries are discarded, so the log always
describes the most recent execution of every line. A script that fails the
same way on every pass shows the same error on every pass, never a growing
list.

The log is read by hosts (UIs, the yololvm CLI) keyed by line number:

    >>> log = ErrorLog()
    >>> log.reset(3)
    >>> log.push(3, ErrorRecord(Severity.ERROR, "Attempted division by zero."))
    >>> [str(r) for r in log.get(3)]
    ['error: Attempted division by zero.']
"""

from dataclasses import dataclass
from enum import Enum
import logging
from typing import Iterator, Optional


logger = logging.getLogger(__name__)


class Severity(Enum):
    """Severity of an error record."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class ErrorRecord:
    """
    A single diagnostic entry.

    Attributes:
        severity: How serious the problem is
        message: Human-readable description
        position: Column inside the line, when the producer knows it
    """
    severity: Severity
    message: str
    position: Optional[int] = None

    def __str__(self) -> str:
        if self.position is not None:
            return f"{self.position}: {self.severity.value}: {self.message}"
        return f"{self.severity.value}: {self.message}"


class ErrorLog:
    """
    Error records keyed by 1-based line number.

    Attributes:
        max_per_line: Records kept per line; later records are dropped
    """

    def __init__(self, max_per_line: int = 16):
        self.max_per_line = max_per_line
        self._lines: dict[int, list[ErrorRecord]] = {}

    def reset(self, line: int) -> None:
        """Discard the records of a line before it runs again."""
        self._lines[line] = []

    def push(self, line: int, record: ErrorRecord) -> bool:
        """
        Append a record to a line.

        Returns:
            True if the record was stored, False if the line is full
        """
        records = self._lines.setdefault(line, [])
        if len(records) >= self.max_per_line:
            logger.warning(f"Line {line}: error limit reached, dropping '{record.message}'")
            return False
        records.append(record)
        return True

    def get(self, line: int) -> list[ErrorRecord]:
        """Records of a line (a copy; empty if the line never ran)."""
        return list(self._lines.get(line, ()))

    def items(self) -> Iterator[tuple[int, list[ErrorRecord]]]:
        """(line, records) pairs for lines that currently have records."""
        for line in sorted(self._lines):
            if self._lines[line]:
                yield line, list(self._lines[line])

    def has_errors(self) -> bool:
        """Return True if any line currently has an ERROR record."""
        return any(
            record.severity is Severity.ERROR
            for records in self._lines.values()
            for record in records
        )

    def error_count(self) -> int:
        """Total number of records across all lines."""
        return sum(len(records) for records in self._lines.values())

    def clear(self) -> None:
        """Forget every line's records."""
        self._lines.clear()

    def report(self) -> str:
        """
        Format all records for display.

        Example output:
            line 2: error: Attempted division by zero.
            line 5: error: attempt to goto a invalid line, it was not a number.

            2 errors
        """
        lines = []
        for line, records in self.items():
            for record in records:
                lines.append(f"line {line}: {record}")

        count = self.error_count()
        word = "error" if count == 1 else "errors"
        if lines:
            lines.append("")
        lines.append(f"{count} {word}")
        return "\n".join(lines)
