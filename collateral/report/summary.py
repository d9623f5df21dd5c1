"""
Report Summary

Counts of side-effect kinds across a CallBatch, and the natural-language
summary rendering:

    3 elements in total.
    3 elements returned a result.
    0 elements printed output.
    0 elements emitted messages.
    1 element emitted warnings.
    0 elements threw an error.

Only the kinds captured by the batch's strategy are counted, in column order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from collateral.execution_core.batch import CallBatch
from collateral.execution_core.records import (
    KIND_ERROR,
    KIND_MESSAGES,
    KIND_OUTPUT,
    KIND_RESULT,
    KIND_WARNINGS,
)
from collateral.report.predicates import batch_presence


VERB_PHRASES = {
    KIND_RESULT: "returned a result",
    KIND_OUTPUT: "printed output",
    KIND_MESSAGES: "emitted messages",
    KIND_WARNINGS: "emitted warnings",
    KIND_ERROR: "threw an error",
}


def elements(n: int) -> str:
    return f"{n} element" if n == 1 else f"{n} elements"


@dataclass(frozen=True)
class Tally:
    strategy: str
    total: int
    counts: Dict[str, int] = field(default_factory=dict)

    def __getitem__(self, kind: str) -> int:
        return self.counts[kind]

    def to_dict(self) -> Dict[str, Any]:
        return {"strategy": self.strategy, "total": self.total, "counts": dict(self.counts)}


def tally_kind(batch: CallBatch, kind: str) -> int:
    return sum(batch_presence(batch, kind))


def tally(batch: CallBatch) -> Tally:
    if not isinstance(batch, CallBatch):
        raise TypeError(f"tally expects a CallBatch, got {type(batch).__name__}")
    counts = {kind: tally_kind(batch, kind) for kind in batch.slots}
    return Tally(strategy=batch.strategy, total=len(batch), counts=counts)


def tally_results(batch: CallBatch) -> int:
    return tally_kind(batch, KIND_RESULT)


def tally_errors(batch: CallBatch) -> int:
    return tally_kind(batch, KIND_ERROR)


def tally_output(batch: CallBatch) -> int:
    return tally_kind(batch, KIND_OUTPUT)


def tally_messages(batch: CallBatch) -> int:
    return tally_kind(batch, KIND_MESSAGES)


def tally_warnings(batch: CallBatch) -> int:
    return tally_kind(batch, KIND_WARNINGS)


def summary_lines(batch: CallBatch) -> List[str]:
    t = tally(batch)
    lines = [f"{elements(t.total)} in total."]
    for kind in batch.slots:
        lines.append(f"{elements(t.counts[kind])} {VERB_PHRASES[kind]}.")
    return lines


def summary(batch: CallBatch) -> str:
    """Total element count, then one line per captured kind."""
    return "\n".join(summary_lines(batch))


__all__ = [
    "Tally",
    "VERB_PHRASES",
    "elements",
    "tally",
    "tally_kind",
    "tally_results",
    "tally_errors",
    "tally_output",
    "tally_messages",
    "tally_warnings",
    "summary_lines",
    "summary",
]
