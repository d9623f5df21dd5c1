"""
Execution Core Errors

Minimal error taxonomy for side-effect capture.

User-function errors are never wrapped in these types: they are either
described by a CapturedError record slot or propagate unchanged.
"""

from __future__ import annotations


class CollateralError(Exception):
    """Base class for collateral failures."""


class UnknownStrategyError(CollateralError, ValueError):
    """Raised when a strategy tag is not one of error/diagnostics/composed."""


class SlotNotCapturedError(CollateralError, TypeError):
    """Raised when a slot is requested that the record's strategy never captures."""


class ShapeError(CollateralError, ValueError):
    """Raised when input collections have mismatched lengths."""


class StrategyMismatchError(CollateralError, TypeError):
    """Raised when a batch is tagged with a strategy its records do not carry."""
