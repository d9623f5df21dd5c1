# Outcome Capturer: one execution of the mapped function per call
"""
Execution Core Capture

Two capture modes over a single call of fn(*args, **kwargs):

- capture_error: catch any Exception; return ErrorRecord(result | error)
- capture_diagnostics: record stdout, stderr/logging messages and warnings;
  an exception raised by fn propagates unchanged

Each capture owns its own buffers. Nothing is shared across calls.
"""

from __future__ import annotations

import contextlib
import io
import logging
import sys
import warnings
from typing import Any, Callable, Dict, List, Optional, Sequence

from collateral.execution_core.records import CapturedError, DiagnosticsRecord, ErrorRecord


class _MessageSink(io.TextIOBase):
    """Line collector shared by the redirected stderr and the logging handler."""

    def __init__(self) -> None:
        super().__init__()
        self._pending = ""
        self.lines: List[str] = []

    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        self._pending += s
        *complete, self._pending = self._pending.split("\n")
        self.lines.extend(line for line in complete if line.strip())
        return len(s)

    def add_line(self, line: str) -> None:
        self.flush_pending()
        if line.strip():
            self.lines.append(line)

    def flush_pending(self) -> None:
        if self._pending.strip():
            self.lines.append(self._pending)
        self._pending = ""


class _MessageHandler(logging.Handler):
    def __init__(self, sink: _MessageSink) -> None:
        super().__init__(level=logging.NOTSET)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        self._sink.add_line(record.getMessage())


def capture_error(
    fn: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
    *,
    quiet: bool = True,
) -> ErrorRecord:
    """
    Run fn once and return ErrorRecord.

    Exactly one of result/error is meaningful: error is None on success.
    With quiet=False the error is echoed to stderr as it is captured.
    """
    try:
        value = fn(*args, **(kwargs or {}))
    except Exception as e:
        err = CapturedError.from_exception(e)
        if not quiet:
            print(f"Error: {err.message or err.exception_type}", file=sys.stderr)
        return ErrorRecord(result=None, error=err)
    return ErrorRecord(result=value, error=None)


def capture_diagnostics(
    fn: Callable[..., Any],
    args: Sequence[Any] = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> DiagnosticsRecord:
    """
    Run fn once with stdout, stderr, logging and warnings captured.

    - output: everything written to sys.stdout (None when nothing was written)
    - messages: non-blank stderr lines and logging records, in emission order
    - warnings: every warning message, ignoring the ambient filters

    Logging records are captured at whatever level the logging configuration
    lets through to the root logger. The root logger's own handlers are
    detached for the duration of the call, so captured records never reach
    the console.
    """
    out = io.StringIO()
    sink = _MessageSink()
    handler = _MessageHandler(sink)
    root = logging.getLogger()

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        saved_handlers = root.handlers[:]
        root.handlers = [handler]
        try:
            with contextlib.redirect_stdout(out), contextlib.redirect_stderr(sink):
                value = fn(*args, **(kwargs or {}))
        finally:
            root.handlers = saved_handlers
            sink.flush_pending()

    text = out.getvalue()
    return DiagnosticsRecord(
        result=value,
        output=text or None,
        messages=tuple(sink.lines),
        warnings=tuple(str(w.message) for w in caught),
    )


__all__ = [
    "capture_error",
    "capture_diagnostics",
]
