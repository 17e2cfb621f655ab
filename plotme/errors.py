"""Exception types raised while resolving terms and building intervals.

Each class also derives from the builtin exception callers would expect, so
``except KeyError`` around a lookup keeps working.
"""

from __future__ import annotations


class PlotMeError(Exception):
    """Base class for all marginal-effect errors."""


class InvalidModelKind(PlotMeError, TypeError):
    """The supplied model is not an ordinary least-squares fit."""


class InvalidTermKind(PlotMeError, ValueError):
    """``term1`` is categorical; marginal effects need a continuous focal term."""


class TermNotFound(PlotMeError, KeyError):
    """A constitutive term is missing from the fitted model."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class InteractionNotFound(TermNotFound):
    """No ordering of the interaction term exists among the coefficients."""


class UnsupportedCiType(PlotMeError, ValueError):
    """``ci_type`` is not one of the recognised interval types."""


class NotImplementedStrategy(PlotMeError, NotImplementedError):
    """The requested interval strategy is part of the API but not available."""
