# Iteration engine adapters: sequential in-process, or a process pool
"""
Execution Core Executor

The iteration engine consumed by the dispatcher:

    apply(fn, *collections) -> list

- one call fn(*aligned_elements) per position
- result length equals the common input length; order is preserved
- mismatched lengths raise ShapeError before any call is made
- fn's exceptions and diagnostic emissions are not touched here

ParallelExecutor runs calls on worker processes so that each capture gets its
own stdout/stderr/warnings state. fn and the elements must be picklable.
"""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Protocol, Sequence

from collateral.execution_core.errors import ShapeError


MODE_SEQUENTIAL = "sequential"
MODE_PARALLEL = "parallel"


class Executor(Protocol):
    mode: str

    def apply(self, fn: Callable[..., Any], *collections: Sequence[Any]) -> List[Any]:
        ...


def default_max_workers() -> Optional[int]:
    # Unset means the pool's own default (os.cpu_count()).
    raw = os.environ.get("COLLATERAL_MAX_WORKERS", "").strip()
    if not raw:
        return None
    try:
        n = int(raw)
    except ValueError:
        raise ValueError(f"COLLATERAL_MAX_WORKERS must be a positive int, got {raw!r}") from None
    if n <= 0:
        raise ValueError(f"COLLATERAL_MAX_WORKERS must be a positive int, got {raw!r}")
    return n


def align(collections: Sequence[Sequence[Any]]) -> List[List[Any]]:
    """Materialize collections and check they share one length."""
    cols = [list(c) for c in collections]
    lengths = sorted({len(c) for c in cols})
    if len(lengths) > 1:
        raise ShapeError(
            "input collections must have equal lengths, got "
            + ", ".join(str(len(c)) for c in cols)
        )
    return cols


@dataclass
class SequentialExecutor:
    """In-process loop over the aligned elements."""

    mode: str = MODE_SEQUENTIAL

    def apply(self, fn: Callable[..., Any], *collections: Sequence[Any]) -> List[Any]:
        cols = align(collections)
        if not cols:
            return []
        return [fn(*args) for args in zip(*cols)]


@dataclass
class ParallelExecutor:
    """
    Process-pool dispatch.

    Results come back in input order regardless of completion order. If a
    call raises, the first failing position (in input order) re-raises here.
    """

    max_workers: Optional[int] = None
    chunksize: int = 1
    mode: str = MODE_PARALLEL

    def __post_init__(self) -> None:
        if self.max_workers is None:
            self.max_workers = default_max_workers()
        if self.max_workers is not None and self.max_workers <= 0:
            raise ValueError("max_workers must be a positive int (or None)")
        if self.chunksize <= 0:
            raise ValueError("chunksize must be a positive int")

    def apply(self, fn: Callable[..., Any], *collections: Sequence[Any]) -> List[Any]:
        cols = align(collections)
        if not cols or not cols[0]:
            return []
        with ProcessPoolExecutor(max_workers=self.max_workers) as pool:
            return list(pool.map(fn, *cols, chunksize=self.chunksize))


__all__ = [
    "MODE_SEQUENTIAL",
    "MODE_PARALLEL",
    "Executor",
    "SequentialExecutor",
    "ParallelExecutor",
    "align",
    "default_max_workers",
]
