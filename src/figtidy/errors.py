"""
errors.py
=========

Exception types raised by figtidy.

Each error also derives from the builtin exception a caller would naturally
expect (KeyError for a missing record field, ValueError for a bad option
value, ...), so code that only knows the builtins keeps working.

Errors raised by matplotlib, NumPy, h5py or the filesystem are not wrapped;
they propagate unchanged.
"""

from __future__ import annotations


class FigtidyError(Exception):
    """Base class for all figtidy errors."""


# ============================================================
# PRECONDITION FAILURES
# ============================================================

class NoActiveFigureError(FigtidyError, RuntimeError):
    """No figure argument was given and no pyplot figure is open."""


class NoAxesFoundError(FigtidyError, ValueError):
    """The figure has no axes to work on."""


class NotSingleColumnError(FigtidyError, ValueError):
    """The axes of a figure do not share one horizontal origin."""


class MissingFieldError(FigtidyError, KeyError):
    """A variable descriptor lacks a required field."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


# ============================================================
# VALIDATION FAILURES
# ============================================================

class InvalidParameterError(FigtidyError, ValueError):
    """An option value is of the wrong type or outside its allowed range."""


class UnrecognizedParameterError(FigtidyError, TypeError):
    """An option name is not known to the operation it was passed to."""
