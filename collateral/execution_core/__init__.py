from .records import (
    STRATEGY_ERROR,
    STRATEGY_DIAGNOSTICS,
    STRATEGY_COMPOSED,
    CapturedError,
    ErrorRecord,
    DiagnosticsRecord,
    ComposedRecord,
)
from .capture import capture_error, capture_diagnostics
from .compose import capture_composed, capture_nested, flatten_record, flatten_records
from .batch import CallBatch, tag_batch
from .executor import Executor, SequentialExecutor, ParallelExecutor
from .dispatcher import dispatch
from .errors import (
    CollateralError,
    UnknownStrategyError,
    SlotNotCapturedError,
    ShapeError,
    StrategyMismatchError,
)
