from .predicates import (
    has_result,
    has_error,
    has_output,
    has_messages,
    has_warnings,
    filter_batch,
)
from .summary import (
    Tally,
    tally,
    tally_results,
    tally_errors,
    tally_output,
    tally_messages,
    tally_warnings,
    summary,
)
from .display import format_record, format_batch
from .registry import render
