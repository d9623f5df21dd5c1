"""
Collateral mappers

Map a function over one or more collections while capturing side effects.

Strategy per suffix:
- *_safely      error capture        -> ErrorRecord        ("R E")
- *_quietly     diagnostics capture  -> DiagnosticsRecord  ("R O M W")
- *_peacefully  both, flattened      -> ComposedRecord     ("R O M W E")

Arity per prefix:
- map_*   f(x, **kwargs)
- map2_*  f(x, y, **kwargs); xs and ys must have equal lengths
- pmap_*  collections is a sequence of sequences (positional arguments) or a
          mapping of name -> sequence (keyword arguments)

future_* variants dispatch on a process pool (max_workers, defaulting to
COLLATERAL_MAX_WORKERS). f and the elements must be picklable.

The collections and f are positional-only, so any other keyword argument
(including ones named xs, ys, collections or f) is passed to f on every
call. Every mapper returns a CallBatch of the same length and order as the
input.
"""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from collateral.audit.run_ledger import RunLedger
from collateral.execution_core.batch import CallBatch
from collateral.execution_core.dispatcher import dispatch
from collateral.execution_core.executor import Executor, ParallelExecutor
from collateral.execution_core.records import (
    STRATEGY_COMPOSED,
    STRATEGY_DIAGNOSTICS,
    STRATEGY_ERROR,
)


def _pmap_collections(
    collections: Any,
) -> Tuple[List[Sequence[Any]], Optional[Tuple[str, ...]]]:
    if isinstance(collections, Mapping):
        names = tuple(collections.keys())
        for n in names:
            if not isinstance(n, str):
                raise TypeError("pmap collection names must be strings")
        return [collections[n] for n in names], names
    return list(collections), None


def _parallel(executor: Optional[Executor], max_workers: Optional[int]) -> Executor:
    if executor is not None:
        return executor
    return ParallelExecutor(max_workers=max_workers)


# sequential mappers


def map_safely(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(
        STRATEGY_ERROR, f, [xs], kwargs=kwargs, quiet=quiet, executor=executor, ledger=ledger
    )


def map_quietly(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(STRATEGY_DIAGNOSTICS, f, [xs], kwargs=kwargs, executor=executor, ledger=ledger)


def map_peacefully(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(STRATEGY_COMPOSED, f, [xs], kwargs=kwargs, executor=executor, ledger=ledger)


def map2_safely(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(
        STRATEGY_ERROR, f, [xs, ys], kwargs=kwargs, quiet=quiet, executor=executor, ledger=ledger
    )


def map2_quietly(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(
        STRATEGY_DIAGNOSTICS, f, [xs, ys], kwargs=kwargs, executor=executor, ledger=ledger
    )


def map2_peacefully(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return dispatch(STRATEGY_COMPOSED, f, [xs, ys], kwargs=kwargs, executor=executor, ledger=ledger)


def pmap_safely(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    cols, names = _pmap_collections(collections)
    return dispatch(
        STRATEGY_ERROR,
        f,
        cols,
        kwargs=kwargs,
        arg_names=names,
        quiet=quiet,
        executor=executor,
        ledger=ledger,
    )


def pmap_quietly(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    cols, names = _pmap_collections(collections)
    return dispatch(
        STRATEGY_DIAGNOSTICS,
        f,
        cols,
        kwargs=kwargs,
        arg_names=names,
        executor=executor,
        ledger=ledger,
    )


def pmap_peacefully(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    cols, names = _pmap_collections(collections)
    return dispatch(
        STRATEGY_COMPOSED,
        f,
        cols,
        kwargs=kwargs,
        arg_names=names,
        executor=executor,
        ledger=ledger,
    )


# parallel (process pool) mappers


def future_map_safely(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map_safely(
        xs, f, quiet=quiet, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


def future_map_quietly(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map_quietly(xs, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs)


def future_map_peacefully(
    xs: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map_peacefully(xs, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs)


def future_map2_safely(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map2_safely(
        xs, ys, f, quiet=quiet, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


def future_map2_quietly(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map2_quietly(
        xs, ys, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


def future_map2_peacefully(
    xs: Sequence[Any],
    ys: Sequence[Any],
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return map2_peacefully(
        xs, ys, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


def future_pmap_safely(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    quiet: bool = True,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return pmap_safely(
        collections,
        f,
        quiet=quiet,
        executor=_parallel(executor, max_workers),
        ledger=ledger,
        **kwargs,
    )


def future_pmap_quietly(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return pmap_quietly(
        collections, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


def future_pmap_peacefully(
    collections: Any,
    f: Callable[..., Any],
    /,
    *,
    max_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
    **kwargs: Any,
) -> CallBatch:
    return pmap_peacefully(
        collections, f, executor=_parallel(executor, max_workers), ledger=ledger, **kwargs
    )


__all__ = [
    "map_safely",
    "map_quietly",
    "map_peacefully",
    "map2_safely",
    "map2_quietly",
    "map2_peacefully",
    "pmap_safely",
    "pmap_quietly",
    "pmap_peacefully",
    "future_map_safely",
    "future_map_quietly",
    "future_map_peacefully",
    "future_map2_safely",
    "future_map2_quietly",
    "future_map2_peacefully",
    "future_pmap_safely",
    "future_pmap_quietly",
    "future_pmap_peacefully",
]
