"""Process-pool dispatch keeps order, length and per-call isolation."""

import math

import pytest

from collateral import (
    ShapeError,
    future_map2_safely,
    future_map_peacefully,
    future_map_quietly,
    future_map_safely,
    future_pmap_peacefully,
    future_pmap_quietly,
    future_pmap_safely,
    map_peacefully,
    map_quietly,
    map_safely,
)
from collateral.execution_core.executor import ParallelExecutor, default_max_workers

from sample_functions import add, chatty, divide, fail_on_odd, ln, lock_on_one, noisy


def test_parallel_matches_sequential_safely():
    xs = list(range(12))
    assert future_map_safely(xs, fail_on_odd, max_workers=2) == map_safely(xs, fail_on_odd)


def test_parallel_matches_sequential_quietly():
    xs = [3, 1, 4, 1, 5]
    assert future_map_quietly(xs, noisy, max_workers=2) == map_quietly(xs, noisy)


def test_parallel_matches_sequential_peacefully():
    xs = [4, -2, 9, "a"]
    par = future_map_peacefully(xs, ln, max_workers=2)
    seq = map_peacefully(xs, ln)
    assert [r.warnings for r in par] == [r.warnings for r in seq]
    assert [str(r.error) if r.error else None for r in par] == [
        str(r.error) if r.error else None for r in seq
    ]
    assert par[0].result == pytest.approx(math.log(4))
    assert math.isnan(par[1].result)


def test_parallel_preserves_order_with_sentinels():
    xs = list(range(40))
    batch = future_map_quietly(xs, chatty, max_workers=4)
    assert [r.result for r in batch] == [x * 2 for x in xs]
    assert [r.output for r in batch] == [f"value {x}\n" for x in xs]


def test_parallel_map2_and_pmap():
    b2 = future_map2_safely([1, 2], [1, 0], divide, max_workers=2)
    assert b2[0].result == 1
    assert b2[1].error.exception_type == "ZeroDivisionError"

    bp = future_pmap_safely([[1, 2], [3, 4]], add, max_workers=2, offset=1)
    assert [r.result for r in bp] == [5, 7]

    named = future_pmap_peacefully({"numerator": [9], "denominator": [3]}, divide, max_workers=1)
    assert named[0].result == 3

    quiet = future_pmap_quietly([[5]], chatty, max_workers=1)
    assert quiet[0].output == "value 5\n"


def test_parallel_quietly_propagates_user_errors():
    with pytest.raises(ValueError, match="odd input"):
        future_map_quietly([0, 1, 2], fail_on_odd, max_workers=2)


def test_parallel_shape_error():
    with pytest.raises(ShapeError):
        future_map2_safely([1], [1, 2], add, max_workers=1)


def test_parallel_empty_input():
    assert len(future_map_safely([], add, max_workers=1)) == 0


def test_max_workers_from_env(monkeypatch):
    monkeypatch.setenv("COLLATERAL_MAX_WORKERS", "3")
    assert default_max_workers() == 3
    assert ParallelExecutor().max_workers == 3
    assert ParallelExecutor(max_workers=1).max_workers == 1


@pytest.mark.parametrize("raw", ["zero", "0", "-2"])
def test_max_workers_env_validation(monkeypatch, raw):
    monkeypatch.setenv("COLLATERAL_MAX_WORKERS", raw)
    with pytest.raises(ValueError):
        default_max_workers()


def test_executor_argument_validation():
    with pytest.raises(ValueError):
        ParallelExecutor(max_workers=0)
    with pytest.raises(ValueError):
        ParallelExecutor(chunksize=0)


def test_unpicklable_result_is_captured_for_that_element_only():
    batch = future_map_safely([0, 1, 2], lock_on_one, max_workers=2)
    assert len(batch) == 3
    assert batch[0].result == 0
    assert batch[2].result == 2
    assert batch[1].result is None
    assert batch[1].error.exception_type == "PicklingError"
    assert "cannot be returned from the worker" in batch[1].error.message


def test_unpicklable_result_keeps_diagnostics_when_composed():
    batch = future_map_peacefully([0, 1], lock_on_one, max_workers=2)
    assert batch[0].result == 0
    assert batch[0].error is None
    assert batch[1].error.exception_type == "PicklingError"
    assert batch[1].output == "making a lock\n"


def test_unpicklable_result_is_fine_without_a_pool():
    batch = map_safely([1], lock_on_one)
    assert batch[0].error is None
    assert batch[0].result is not None
