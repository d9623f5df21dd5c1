"""
Execution Core Batch

CallBatch: ordered, immutable sequence of call records tagged with the
strategy that produced them. Tagging is metadata only; records are never
altered.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Sequence, Tuple, Union, overload

from collateral.execution_core.errors import StrategyMismatchError, UnknownStrategyError
from collateral.execution_core.records import ALLOWED_STRATEGIES, RECORD_TYPES, CallRecord


def require_strategy(strategy: str) -> str:
    if strategy not in ALLOWED_STRATEGIES:
        raise UnknownStrategyError(
            f"strategy must be one of {list(ALLOWED_STRATEGIES)}, got {strategy!r}"
        )
    return strategy


class CallBatch(Sequence):
    """
    One record per input element, in input order.

    Slicing returns a CallBatch with the same strategy.
    """

    __slots__ = ("_records", "_strategy")

    def __init__(self, records: Iterable[CallRecord], strategy: str) -> None:
        self._strategy = require_strategy(strategy)
        self._records: Tuple[CallRecord, ...] = tuple(records)

        expected = RECORD_TYPES[strategy]
        for i, rec in enumerate(self._records):
            if not isinstance(rec, expected):
                raise StrategyMismatchError(
                    f"record {i} is {type(rec).__name__}; strategy {strategy!r} "
                    f"requires {expected.__name__}"
                )

    @property
    def strategy(self) -> str:
        return self._strategy

    @property
    def records(self) -> Tuple[CallRecord, ...]:
        return self._records

    @property
    def slots(self) -> Tuple[str, ...]:
        return RECORD_TYPES[self._strategy].slots

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[CallRecord]:
        return iter(self._records)

    @overload
    def __getitem__(self, index: int) -> CallRecord:
        ...

    @overload
    def __getitem__(self, index: slice) -> "CallBatch":
        ...

    def __getitem__(self, index: Union[int, slice]) -> Any:
        if isinstance(index, slice):
            return CallBatch(self._records[index], self._strategy)
        return self._records[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CallBatch):
            return NotImplemented
        return self._strategy == other._strategy and self._records == other._records

    def __hash__(self) -> int:
        return hash((self._strategy, self._records))

    def __repr__(self) -> str:
        return f"CallBatch(strategy={self._strategy!r}, records={list(self._records)!r})"

    def __str__(self) -> str:
        from collateral.report.registry import render

        return render(self, "text")

    def to_dicts(self) -> list:
        return [r.to_dict() for r in self._records]


def tag_batch(records: Iterable[CallRecord], strategy: str) -> CallBatch:
    """
    Attach a strategy tag to records.

    Re-tagging a CallBatch with its own strategy returns it unchanged.
    Records that do not match the strategy's variant raise StrategyMismatchError.
    """
    if isinstance(records, CallBatch) and records.strategy == strategy:
        return records
    return CallBatch(records, strategy)


__all__ = [
    "CallBatch",
    "tag_batch",
    "require_strategy",
]
