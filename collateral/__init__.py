"""collateral: map functions over collections while capturing side effects."""

from .mappers import (
    map_safely,
    map_quietly,
    map_peacefully,
    map2_safely,
    map2_quietly,
    map2_peacefully,
    pmap_safely,
    pmap_quietly,
    pmap_peacefully,
    future_map_safely,
    future_map_quietly,
    future_map_peacefully,
    future_map2_safely,
    future_map2_quietly,
    future_map2_peacefully,
    future_pmap_safely,
    future_pmap_quietly,
    future_pmap_peacefully,
)
from .execution_core import (
    CallBatch,
    CapturedError,
    ComposedRecord,
    DiagnosticsRecord,
    ErrorRecord,
    CollateralError,
    ShapeError,
    SlotNotCapturedError,
    StrategyMismatchError,
    UnknownStrategyError,
    tag_batch,
)
from .report import (
    has_result,
    has_error,
    has_output,
    has_messages,
    has_warnings,
    filter_batch,
    Tally,
    tally,
    tally_results,
    tally_errors,
    tally_output,
    tally_messages,
    tally_warnings,
    summary,
    format_record,
    format_batch,
    render,
)

__version__ = "0.1.0"
