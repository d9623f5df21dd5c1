"""
Report Display

Compact fixed-width codes, one letter per captured slot in column order
(result, output, messages, warnings, error), underscore when absent:

    error strategy        "R _"  /  "_ E"
    diagnostics strategy  "R O M W"
    composed strategy     "R O M W E"
"""

from __future__ import annotations

from typing import List

from collateral.report.predicates import slot_present
from collateral.report.summary import elements


CODES = {
    "result": "R",
    "output": "O",
    "messages": "M",
    "warnings": "W",
    "error": "E",
}


def format_record(record) -> str:
    return " ".join(CODES[kind] if slot_present(record, kind) else "_" for kind in record.slots)


def format_batch(batch) -> str:
    """Indexed fixed-width code per record under a strategy header."""
    lines: List[str] = [f"<{batch.strategy} batch: {elements(len(batch))}>"]
    width = len(str(max(len(batch) - 1, 0)))
    for i, rec in enumerate(batch):
        lines.append(f"[{i:>{width}}] {format_record(rec)}")
    return "\n".join(lines)


__all__ = [
    "CODES",
    "format_record",
    "format_batch",
]
