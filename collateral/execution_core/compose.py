"""
Execution Core Compose

Composed capture runs diagnostics capture around error capture:

    capture_diagnostics(capture_error, (fn, args, kwargs))

which yields a two-level record:

    DiagnosticsRecord(result=ErrorRecord(result, error), output, messages, warnings)

flatten_record lifts the inner result/error to the outer level. The
diagnostics slots are already where they belong and are carried over as-is.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from collateral.execution_core.capture import capture_diagnostics, capture_error
from collateral.execution_core.errors import StrategyMismatchError
from collateral.execution_core.records import ComposedRecord, DiagnosticsRecord, ErrorRecord


def flatten_record(nested: DiagnosticsRecord) -> ComposedRecord:
    if not isinstance(nested, DiagnosticsRecord):
        raise StrategyMismatchError(
            f"flatten_record expects DiagnosticsRecord, got {type(nested).__name__}"
        )
    inner = nested.result
    if not isinstance(inner, ErrorRecord):
        raise StrategyMismatchError(
            f"flatten_record expects an ErrorRecord result, got {type(inner).__name__}"
        )

    if inner.error is not None:
        result, error = None, inner.error
    else:
        result, error = inner.result, None

    return ComposedRecord(
        result=result,
        error=error,
        output=nested.output,
        messages=nested.messages,
        warnings=nested.warnings,
    )


def flatten_records(nested: Iterable[DiagnosticsRecord]) -> List[ComposedRecord]:
    """Element-wise flatten_record; order and length preserved."""
    return [flatten_record(x) for x in nested]


def capture_nested(
    fn: Any,
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> DiagnosticsRecord:
    """Diagnostics capture around error capture, not yet flattened."""
    return capture_diagnostics(capture_error, (fn, tuple(args), kwargs))


def capture_composed(
    fn: Any,
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> ComposedRecord:
    # Two steps: capture, then flatten.
    return flatten_record(capture_nested(fn, args, kwargs))


__all__ = [
    "flatten_record",
    "flatten_records",
    "capture_nested",
    "capture_composed",
]
