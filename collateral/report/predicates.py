"""
Report Predicates

has_<kind>(target) for kind in result / output / messages / warnings / error.

- target is a single record -> bool
- target is a CallBatch     -> list[bool], same length and order

Asking for a slot the strategy never captures raises SlotNotCapturedError,
for example has_warnings on an error-strategy record.
"""

from __future__ import annotations

from typing import List, Union

from collateral.execution_core.batch import CallBatch, tag_batch
from collateral.execution_core.errors import SlotNotCapturedError
from collateral.execution_core.records import (
    ALL_KINDS,
    KIND_ERROR,
    KIND_MESSAGES,
    KIND_OUTPUT,
    KIND_RESULT,
    KIND_WARNINGS,
    RECORD_TYPES,
    CallRecord,
    ComposedRecord,
    DiagnosticsRecord,
    ErrorRecord,
)


def _not_captured(record_type: type, kind: str) -> SlotNotCapturedError:
    return SlotNotCapturedError(
        f"{record_type.__name__} does not capture {kind!r}; "
        f"captured slots are {list(record_type.slots)}"
    )


def _require_kind(kind: str) -> str:
    if kind not in ALL_KINDS:
        raise ValueError(f"kind must be one of {list(ALL_KINDS)}, got {kind!r}")
    return kind


def slot_present(record: CallRecord, kind: str) -> bool:
    _require_kind(kind)

    if isinstance(record, ErrorRecord):
        if kind == KIND_RESULT:
            return record.error is None
        if kind == KIND_ERROR:
            return record.error is not None
        raise _not_captured(ErrorRecord, kind)

    if isinstance(record, DiagnosticsRecord):
        if kind == KIND_RESULT:
            return True
        if kind == KIND_OUTPUT:
            return bool(record.output)
        if kind == KIND_MESSAGES:
            return len(record.messages) > 0
        if kind == KIND_WARNINGS:
            return len(record.warnings) > 0
        raise _not_captured(DiagnosticsRecord, kind)

    if isinstance(record, ComposedRecord):
        if kind == KIND_RESULT:
            return record.error is None
        if kind == KIND_ERROR:
            return record.error is not None
        if kind == KIND_OUTPUT:
            return bool(record.output)
        if kind == KIND_MESSAGES:
            return len(record.messages) > 0
        return len(record.warnings) > 0

    raise TypeError(f"expected a call record, got {type(record).__name__}")


def batch_presence(batch: CallBatch, kind: str) -> List[bool]:
    _require_kind(kind)
    record_type = RECORD_TYPES[batch.strategy]
    # Checked up front so empty batches fail the same way.
    if kind not in record_type.slots:
        raise _not_captured(record_type, kind)
    return [slot_present(r, kind) for r in batch]


def _has(target: Union[CallRecord, CallBatch], kind: str) -> Union[bool, List[bool]]:
    if isinstance(target, CallBatch):
        return batch_presence(target, kind)
    return slot_present(target, kind)


def has_result(target):
    return _has(target, KIND_RESULT)


def has_error(target):
    return _has(target, KIND_ERROR)


def has_output(target):
    return _has(target, KIND_OUTPUT)


def has_messages(target):
    return _has(target, KIND_MESSAGES)


def has_warnings(target):
    return _has(target, KIND_WARNINGS)


def filter_batch(batch: CallBatch, kind: str, present: bool = True) -> CallBatch:
    """New batch with only the records where kind is (or, with present=False, is not) present."""
    mask = batch_presence(batch, kind)
    kept = [r for r, m in zip(batch, mask) if m == present]
    return tag_batch(kept, batch.strategy)


__all__ = [
    "slot_present",
    "batch_presence",
    "has_result",
    "has_error",
    "has_output",
    "has_messages",
    "has_warnings",
    "filter_batch",
]
