"""
Execution Core Records

Stable record shapes for a single captured call.

One variant per capture strategy:
- ErrorRecord        result | error
- DiagnosticsRecord  result + output / messages / warnings
- ComposedRecord     result | error, plus output / messages / warnings

Absence rules:
- result is present iff error is None (a call returning None still has a result)
- output is present iff it is a non-empty string
- messages / warnings are present iff the tuple is non-empty
"""

from __future__ import annotations

import traceback as _traceback
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple, Union


STRATEGY_ERROR = "error"
STRATEGY_DIAGNOSTICS = "diagnostics"
STRATEGY_COMPOSED = "composed"

ALLOWED_STRATEGIES = (STRATEGY_ERROR, STRATEGY_DIAGNOSTICS, STRATEGY_COMPOSED)

# Column order used by the fixed-width rendering and by summaries.
KIND_RESULT = "result"
KIND_OUTPUT = "output"
KIND_MESSAGES = "messages"
KIND_WARNINGS = "warnings"
KIND_ERROR = "error"

ALL_KINDS = (KIND_RESULT, KIND_OUTPUT, KIND_MESSAGES, KIND_WARNINGS, KIND_ERROR)


@dataclass(frozen=True)
class CapturedError:
    """Picklable description of an exception raised by a mapped function."""

    exception_type: str
    message: str
    traceback: str = ""

    @classmethod
    def from_exception(cls, exc: BaseException) -> "CapturedError":
        tb = "".join(_traceback.format_exception(type(exc), exc, exc.__traceback__))
        return cls(exception_type=type(exc).__name__, message=str(exc), traceback=tb)

    def __str__(self) -> str:
        if not self.message:
            return self.exception_type
        return f"{self.exception_type}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exception_type": self.exception_type,
            "message": self.message,
            "traceback": self.traceback,
        }


@dataclass(frozen=True)
class ErrorRecord:
    strategy: ClassVar[str] = STRATEGY_ERROR
    slots: ClassVar[Tuple[str, ...]] = (KIND_RESULT, KIND_ERROR)

    result: Any = None
    error: Optional[CapturedError] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result,
            "error": None if self.error is None else self.error.to_dict(),
        }


@dataclass(frozen=True)
class DiagnosticsRecord:
    strategy: ClassVar[str] = STRATEGY_DIAGNOSTICS
    slots: ClassVar[Tuple[str, ...]] = (KIND_RESULT, KIND_OUTPUT, KIND_MESSAGES, KIND_WARNINGS)

    result: Any = None
    output: Optional[str] = None
    messages: Tuple[str, ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result,
            "output": self.output,
            "messages": list(self.messages),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ComposedRecord:
    strategy: ClassVar[str] = STRATEGY_COMPOSED
    slots: ClassVar[Tuple[str, ...]] = ALL_KINDS

    result: Any = None
    error: Optional[CapturedError] = None
    output: Optional[str] = None
    messages: Tuple[str, ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "result": self.result,
            "error": None if self.error is None else self.error.to_dict(),
            "output": self.output,
            "messages": list(self.messages),
            "warnings": list(self.warnings),
        }


CallRecord = Union[ErrorRecord, DiagnosticsRecord, ComposedRecord]

RECORD_TYPES = {
    STRATEGY_ERROR: ErrorRecord,
    STRATEGY_DIAGNOSTICS: DiagnosticsRecord,
    STRATEGY_COMPOSED: ComposedRecord,
}


__all__ = [
    "STRATEGY_ERROR",
    "STRATEGY_DIAGNOSTICS",
    "STRATEGY_COMPOSED",
    "ALLOWED_STRATEGIES",
    "KIND_RESULT",
    "KIND_OUTPUT",
    "KIND_MESSAGES",
    "KIND_WARNINGS",
    "KIND_ERROR",
    "ALL_KINDS",
    "CapturedError",
    "ErrorRecord",
    "DiagnosticsRecord",
    "ComposedRecord",
    "CallRecord",
    "RECORD_TYPES",
]
