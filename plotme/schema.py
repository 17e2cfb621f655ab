"""Define standardized column names for effect tables."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EffectColumns:
    """Container for standardized column labels.

    These column names are used by every effect table the package produces,
    so the interval, plotting and export layers agree on one layout.

    Attributes:
        level: Evaluation point of ``term2``. Numeric for a continuous
            moderator, an ordered categorical of level labels otherwise.

        estimate: Marginal effect of ``term1`` at ``level``
            (``beta[term1] + beta[interaction] * level``).

        std_error: Delta-method standard error of ``estimate``.

        lower: Lower confidence bound, ``estimate - t * std_error``.

        upper: Upper confidence bound, ``estimate + t * std_error``.
    """

    level: str = "fitted2"
    estimate: str = "dy_dx"
    std_error: str = "se_dy_dx"
    lower: str = "lower"
    upper: str = "upper"

    @property
    def all(self) -> tuple[str, ...]:
        return (self.level, self.estimate, self.std_error, self.lower, self.upper)


COLUMNS = EffectColumns()
