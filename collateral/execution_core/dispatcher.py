# Run boundary: capture -> flatten -> tag, with optional run ledger receipts
"""
Execution Core Dispatcher

Owns the mapping run boundary:
- wraps the user function in the strategy's capturer
- hands the wrapped call to the executor (sequential or parallel)
- flattens composed records element-wise
- tags the batch with its strategy
- writes run ledger events when a ledger is configured

Per-call errors never escape under the error/composed strategies. Under the
diagnostics strategy the user function's exception propagates.
"""

from __future__ import annotations

import pickle
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from collateral.audit.run_ledger import RunLedger, ledger_from_env
from collateral.execution_core.batch import CallBatch, require_strategy, tag_batch
from collateral.execution_core.capture import capture_diagnostics, capture_error
from collateral.execution_core.compose import capture_nested, flatten_records
from collateral.execution_core.errors import ShapeError
from collateral.execution_core.executor import MODE_PARALLEL, Executor, SequentialExecutor, align
from collateral.execution_core.records import (
    CapturedError,
    DiagnosticsRecord,
    ErrorRecord,
    STRATEGY_COMPOSED,
    STRATEGY_DIAGNOSTICS,
    STRATEGY_ERROR,
)


@dataclass(frozen=True)
class CapturedCall:
    """
    Picklable per-element callable handed to the executor.

    arg_names set means the aligned elements are passed as keyword arguments.
    For the composed strategy this returns the nested (unflattened) record.
    check_pickle is set under parallel dispatch: a result that cannot be sent
    back from the worker becomes a captured PicklingError for that element.
    """

    strategy: str
    fn: Callable[..., Any]
    kwargs: Dict[str, Any] = field(default_factory=dict)
    arg_names: Optional[Tuple[str, ...]] = None
    quiet: bool = True
    check_pickle: bool = False

    def __call__(self, *elements: Any) -> Any:
        if self.arg_names is not None:
            args: Tuple[Any, ...] = ()
            kwargs = dict(zip(self.arg_names, elements))
            kwargs.update(self.kwargs)
        else:
            args = elements
            kwargs = self.kwargs

        if self.strategy == STRATEGY_DIAGNOSTICS:
            return capture_diagnostics(self.fn, args, kwargs)

        if self.strategy == STRATEGY_ERROR:
            record: Any = capture_error(self.fn, args, kwargs, quiet=self.quiet)
        else:
            record = capture_nested(self.fn, args, kwargs)
        if self.check_pickle:
            record = _ensure_picklable(record)
        return record


def _ensure_picklable(record: Any) -> Any:
    try:
        pickle.dumps(record)
    except Exception as e:
        err = CapturedError(
            exception_type="PicklingError",
            message=f"result cannot be returned from the worker: {type(e).__name__}: {e}",
        )
        if isinstance(record, DiagnosticsRecord):
            return DiagnosticsRecord(
                result=ErrorRecord(result=None, error=err),
                output=record.output,
                messages=record.messages,
                warnings=record.warnings,
            )
        return ErrorRecord(result=None, error=err)
    return record


def _fn_name(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or repr(fn)


def _record_calls(ledger: RunLedger, batch: CallBatch) -> None:
    from collateral.report.display import format_record

    for i, rec in enumerate(batch):
        data: Dict[str, Any] = {"index": i, "code": format_record(rec)}
        err = getattr(rec, "error", None)
        if err is not None:
            data["error"] = str(err)
        ledger.event("call.captured", data)


def dispatch(
    strategy: str,
    fn: Callable[..., Any],
    collections: Sequence[Sequence[Any]],
    *,
    kwargs: Optional[Dict[str, Any]] = None,
    arg_names: Optional[Sequence[str]] = None,
    quiet: bool = True,
    executor: Optional[Executor] = None,
    ledger: Optional[RunLedger] = None,
) -> CallBatch:
    require_strategy(strategy)
    if not callable(fn):
        raise TypeError("fn must be callable")

    ex = executor or SequentialExecutor()
    mode = getattr(ex, "mode", type(ex).__name__)
    led = ledger if ledger is not None else ledger_from_env()
    call = CapturedCall(
        strategy=strategy,
        fn=fn,
        kwargs=dict(kwargs or {}),
        arg_names=tuple(arg_names) if arg_names is not None else None,
        quiet=quiet,
        check_pickle=(mode == MODE_PARALLEL),
    )

    start: Dict[str, Any] = {
        "strategy": strategy,
        "function": _fn_name(fn),
        "mode": mode,
        "collections": len(collections),
    }

    try:
        cols = align(collections)
    except ShapeError as e:
        if led is not None:
            led.start(start)
            led.end({"ok": False, "error": f"{type(e).__name__}: {e}"})
        raise

    if led is not None:
        start["length"] = len(cols[0]) if cols else 0
        led.start(start)

    try:
        raw = ex.apply(call, *cols)
        records = flatten_records(raw) if strategy == STRATEGY_COMPOSED else raw
        batch = tag_batch(records, strategy)
    except Exception as e:
        if led is not None:
            led.end({"ok": False, "error": f"{type(e).__name__}: {e}"})
        raise

    if led is not None:
        from collateral.report.summary import tally

        _record_calls(led, batch)
        led.end({"ok": True, "tally": tally(batch).to_dict()})

    return batch


__all__ = [
    "CapturedCall",
    "dispatch",
]
