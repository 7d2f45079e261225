"""
grammar_conventions/diagnostics.py
══════════════════════════════════

Diagnostic model and the sink checks report through.

Checks only ever call ``sink.add(line, message, check)``; they never read
results back.  ``DiagnosticCollector`` is the sink the walker owns: it
stamps every entry with the file currently being processed and the
severity configured for the reporting check.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol


class Severity(Enum):
    """Severity levels a check can be configured with."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown severity {value!r}, expected one of "
                f"{', '.join(s.value for s in cls)}"
            ) from None


@dataclass(frozen=True)
class Diagnostic:
    """
    One convention violation.

    Attributes
    ----------
    file     : grammar file the violation was found in
    line     : 1-based source line (0 for whole-file failures)
    message  : human-readable description
    check    : name of the check that reported it
    severity : configured severity of that check
    """
    file: str
    line: int
    message: str
    check: str = ""
    severity: Severity = Severity.ERROR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "severity": self.severity.value,
            "check": self.check,
            "message": self.message,
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_dict())

    def to_text(self) -> str:
        """``file:line: severity: message [check]``"""
        suffix = f" [{self.check}]" if self.check else ""
        return f"{self.file}:{self.line}: {self.severity.value}: {self.message}{suffix}"

    def __str__(self) -> str:
        return self.to_text()


class DiagnosticSink(Protocol):
    """Anything that accepts ``(line, message)`` violations."""

    def add(
        self,
        line: int,
        message: str,
        check: str = "",
        severity: Severity = Severity.ERROR,
    ) -> None:
        ...


class DiagnosticCollector:
    """
    Sink that keeps diagnostics in emission order.

    The walker calls ``begin_file`` before each file; ``reset`` drops
    whatever was collected so far.  Severity comes from the reporting
    check instance, so two instances of one check may differ.
    """

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []
        self.current_file: str = ""

    def begin_file(self, file_name: Optional[str]) -> None:
        self.current_file = file_name or "<string>"

    def add(
        self,
        line: int,
        message: str,
        check: str = "",
        severity: Severity = Severity.ERROR,
    ) -> None:
        self._diagnostics.append(
            Diagnostic(
                file=self.current_file,
                line=line,
                message=message,
                check=check,
                severity=severity,
            )
        )

    def reset(self) -> None:
        self._diagnostics.clear()

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __iter__(self):
        return iter(list(self._diagnostics))


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> List[Diagnostic]:
    """Stable sort by file, then line; emission order breaks ties."""
    return sorted(diagnostics, key=lambda d: (d.file, d.line))


__all__ = [
    "Severity",
    "Diagnostic",
    "DiagnosticSink",
    "DiagnosticCollector",
    "sort_diagnostics",
]
