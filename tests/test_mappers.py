"""End-to-end mapping with each capture strategy (sequential dispatch)."""

import math

import pytest

import collateral
from collateral import (
    CallBatch,
    ComposedRecord,
    DiagnosticsRecord,
    ErrorRecord,
    ShapeError,
    has_error,
    has_result,
    has_warnings,
    map2_peacefully,
    map2_quietly,
    map2_safely,
    map_peacefully,
    map_quietly,
    map_safely,
    pmap_peacefully,
    pmap_quietly,
    pmap_safely,
    summary,
    tally,
)
from collateral.execution_core.executor import SequentialExecutor

from sample_functions import (
    add,
    chatty,
    divide,
    fail_on_odd,
    identity,
    ln,
    noisy,
    scale,
    strict_log,
)


def test_map_safely_log_scenario():
    batch = map_safely(["a", 10, 100], strict_log)
    assert isinstance(batch, CallBatch)
    assert batch.strategy == "error"
    assert len(batch) == 3
    assert all(isinstance(r, ErrorRecord) for r in batch)

    assert batch[0].result is None
    assert batch[0].error.exception_type == "TypeError"
    assert batch[1].result == pytest.approx(math.log(10))
    assert batch[2].result == pytest.approx(math.log(100))
    assert has_error(batch) == [True, False, False]


def test_map_peacefully_log_scenario():
    batch = map_peacefully([4, -2, 9], ln)
    assert batch.strategy == "composed"
    assert all(isinstance(r, ComposedRecord) for r in batch)

    first, second, third = batch
    assert first.result == pytest.approx(1.386, abs=1e-3)
    assert first.error is None and first.warnings == ()
    assert math.isnan(second.result)
    assert second.error is None
    assert second.warnings == ("NaNs produced",)
    assert third.result == pytest.approx(2.197, abs=1e-3)
    assert third.warnings == ()

    t = tally(batch)
    assert t.total == 3
    assert t.counts == {"result": 3, "output": 0, "messages": 0, "warnings": 1, "error": 0}
    assert summary(batch) == (
        "3 elements in total.\n"
        "3 elements returned a result.\n"
        "0 elements printed output.\n"
        "0 elements emitted messages.\n"
        "1 element emitted warnings.\n"
        "0 elements threw an error."
    )


def test_map_safely_exactly_one_of_result_error():
    xs = list(range(20))
    batch = map_safely(xs, fail_on_odd)
    for x, rec in zip(xs, batch):
        assert has_result(rec) != has_error(rec)
        if x % 2:
            assert rec.error.message == f"odd input: {x}"
        else:
            assert rec.result == x


def test_map_peacefully_exactly_one_of_result_error():
    batch = map_peacefully(list(range(10)), fail_on_odd)
    assert has_result(batch) == [x % 2 == 0 for x in range(10)]
    assert has_error(batch) == [x % 2 == 1 for x in range(10)]


def test_map_quietly_captures_diagnostics():
    batch = map_quietly([1, 2], noisy)
    assert batch.strategy == "diagnostics"
    assert all(isinstance(r, DiagnosticsRecord) for r in batch)
    assert [r.output for r in batch] == ["to stdout\n", "to stdout\n"]
    assert batch[1].messages == ("to stderr", "logged 2")
    assert has_warnings(batch) == [True, True]


def test_map_quietly_propagates_user_errors():
    with pytest.raises(ValueError, match="odd input: 1"):
        map_quietly([0, 1, 2], fail_on_odd)


def test_map_safely_quiet_false(capsys):
    map_safely([1, 2, 3], fail_on_odd, quiet=False)
    err = capsys.readouterr().err
    assert "Error: odd input: 1" in err
    assert "Error: odd input: 3" in err


def test_extra_kwargs_are_passed_to_f():
    batch = map2_safely([1, 2], [10, 20], add, offset=100)
    assert [r.result for r in batch] == [111, 122]


def test_map2_variants():
    safe = map2_safely([1, 2], [1, 0], divide)
    assert has_error(safe) == [False, True]
    assert safe[1].error.exception_type == "ZeroDivisionError"

    quiet = map2_quietly([1, 2], [3, 4], add)
    assert [r.result for r in quiet] == [4, 6]

    peaceful = map2_peacefully([6, 1], [3, 0], divide)
    assert peaceful[0].result == 2
    assert peaceful[1].error is not None


def test_map2_shape_error():
    with pytest.raises(ShapeError):
        map2_safely([1, 2, 3], [1, 2], add)


def test_pmap_positional():
    batch = pmap_safely([[1, 2, 3], [4, 5, 6]], add)
    assert [r.result for r in batch] == [5, 7, 9]


def test_pmap_named_collections():
    batch = pmap_peacefully({"denominator": [2, 0], "numerator": [10, 10]}, divide)
    assert batch[0].result == 5
    assert batch[1].error.exception_type == "ZeroDivisionError"


def test_pmap_quietly():
    batch = pmap_quietly([[1, 2]], chatty)
    assert [r.output for r in batch] == ["value 1\n", "value 2\n"]


def test_pmap_shape_error():
    with pytest.raises(ShapeError):
        pmap_safely({"x": [1, 2], "y": [1]}, add)


def test_empty_input():
    batch = map_peacefully([], identity)
    assert len(batch) == 0
    assert tally(batch).counts["error"] == 0


def test_generators_are_accepted():
    batch = map_safely((x * 2 for x in range(3)), identity)
    assert [r.result for r in batch] == [0, 2, 4]


def test_explicit_executor():
    batch = map_safely([1, 2], identity, executor=SequentialExecutor())
    assert [r.result for r in batch] == [1, 2]


def test_non_callable_f():
    with pytest.raises(TypeError):
        map_safely([1], "log")


def test_public_api_exports():
    for name in [
        "map_safely",
        "future_pmap_peacefully",
        "has_messages",
        "tally_output",
        "format_record",
        "filter_batch",
    ]:
        assert hasattr(collateral, name)


def test_keyword_named_like_a_parameter_reaches_f():
    batch = map_safely([1, 2], scale, f=10, xs=1)
    assert [r.result for r in batch] == [11, 21]


def test_keyword_passthrough_on_map2_and_pmap():
    assert map2_safely([1], [2], add, offset=5)[0].result == 8
    batch = pmap_quietly([[3]], scale, f=2, xs=1)
    assert batch[0].result == 7
