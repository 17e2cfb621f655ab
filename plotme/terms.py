"""Resolve the constitutive terms of a two-way interaction.

Given a fitted model and the names of the focal term (``term1``) and the
moderator (``term2``), this module finds the coefficient key of their
interaction, whichever order the model formula used (``a:b`` or ``b:a``),
and describes the moderator as either continuous or categorical.

Modules downstream never inspect dtypes themselves: they dispatch on the
moderator variant produced here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd
from pandas.api.types import is_bool_dtype, is_object_dtype, is_string_dtype

from .errors import InteractionNotFound, InvalidTermKind, TermNotFound
from .model import FittedModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContinuousModerator:
    """Numeric ``term2``; effects are evaluated along a grid of its values."""

    name: str
    values: pd.Series

    def default_grid(self) -> np.ndarray:
        observed = self.values.to_numpy(dtype=float)
        return np.unique(observed[np.isfinite(observed)])


@dataclass(frozen=True)
class CategoricalModerator:
    """Factor ``term2``; ``levels[0]`` is the zero-coded reference level."""

    name: str
    levels: Tuple[object, ...]
    values: pd.Series

    @property
    def reference(self) -> object:
        return self.levels[0]

    def default_grid(self) -> Tuple[object, ...]:
        return self.levels


Moderator = Union[ContinuousModerator, CategoricalModerator]


@dataclass(frozen=True)
class InteractionSpec:
    """Resolved interaction between ``term1`` and a moderator.

    Attributes:
        term1: Coefficient name of the continuous focal term.
        moderator: The moderator variant.
        interaction_keys: Coefficient names of the interaction. One entry for
            a continuous moderator; one per non-reference level, in level
            order, for a categorical moderator.
    """

    term1: str
    moderator: Moderator
    interaction_keys: Tuple[str, ...]

    @property
    def categorical(self) -> bool:
        return isinstance(self.moderator, CategoricalModerator)

    @property
    def term2(self) -> str:
        return self.moderator.name


def is_categorical(values: pd.Series) -> bool:
    """Return whether a data column is treated as a factor by formula fits."""
    dtype = values.dtype
    return bool(
        isinstance(dtype, pd.CategoricalDtype)
        or is_bool_dtype(dtype)
        or is_object_dtype(dtype)
        or is_string_dtype(dtype)
    )


def factor_levels(values: pd.Series) -> Tuple[object, ...]:
    """Ordered factor levels of a categorical column, reference first.

    Categorical dtypes keep their declared category order; other columns use
    sorted unique observed values, matching treatment coding in patsy.
    """
    if isinstance(values.dtype, pd.CategoricalDtype):
        return tuple(values.cat.categories)
    observed = values.dropna().unique()
    try:
        return tuple(sorted(observed))
    except TypeError:
        return tuple(sorted(observed, key=str))


def find_interaction_key(
    names: Sequence[str] | pd.Index, a: str, b: str
) -> Optional[str]:
    """Return ``a:b`` or ``b:a``, whichever is a coefficient name, else ``None``."""
    for candidate in (f"{a}:{b}", f"{b}:{a}"):
        if candidate in names:
            return candidate
    return None


def _column(model: FittedModel, name: str) -> Optional[pd.Series]:
    if name in model.data.columns:
        return model.data[name]
    return None


def resolve(model: FittedModel, term1: str, term2: str) -> InteractionSpec:
    """Resolve ``term1``, ``term2`` and their interaction in ``model``.

    Args:
        model: Snapshot of the fitted model.
        term1: Name of the focal term; must be continuous.
        term2: Name of the moderator; continuous or categorical.

    Returns:
        InteractionSpec: Resolved keys and moderator description.

    Raises:
        InvalidTermKind: If ``term1`` is categorical.
        TermNotFound: If ``term1`` is not a coefficient or ``term2`` is not in
            the model data.
        InteractionNotFound: If the interaction (or, for a categorical
            moderator, any per-level dummy interaction) is not a coefficient.
    """
    term1_values = _column(model, term1)
    if term1_values is not None and is_categorical(term1_values):
        raise InvalidTermKind(f"term1 '{term1}' cannot be a factor variable.")

    names = model.params.index
    if term1 not in names:
        raise TermNotFound(f"{term1} not found.")

    term2_values = _column(model, term2)
    if term2_values is None:
        raise TermNotFound(f"{term2} not found in the model data.")

    if not is_categorical(term2_values):
        key = find_interaction_key(names, term1, term2)
        if key is None:
            raise InteractionNotFound(
                f"Interaction term not found: neither '{term1}:{term2}' "
                f"nor '{term2}:{term1}' is a model coefficient."
            )
        logger.debug("Resolved continuous interaction key %s", key)
        return InteractionSpec(
            term1=term1,
            moderator=ContinuousModerator(name=term2, values=term2_values),
            interaction_keys=(key,),
        )

    levels = factor_levels(term2_values)
    if len(levels) < 2:
        raise InteractionNotFound(
            f"Interaction term not found: '{term2}' has fewer than two levels."
        )

    keys = []
    for level in levels[1:]:
        dummy = model.dummy_name(term2, level)
        key = find_interaction_key(names, term1, dummy)
        if key is None:
            raise InteractionNotFound(
                f"Interaction term not found for level '{level}': neither "
                f"'{term1}:{dummy}' nor '{dummy}:{term1}' is a model coefficient."
            )
        keys.append(key)
    logger.debug("Resolved %d categorical interaction keys: %s", len(keys), keys)

    return InteractionSpec(
        term1=term1,
        moderator=CategoricalModerator(
            name=term2, levels=levels, values=term2_values
        ),
        interaction_keys=tuple(keys),
    )


def level_grid(
    spec: InteractionSpec, fitted2: Optional[Sequence[float]] = None
) -> Union[np.ndarray, Tuple[object, ...]]:
    """Return the evaluation points for ``spec``'s moderator.

    A continuous moderator uses ``fitted2`` when given, otherwise its sorted
    unique observed values. A categorical moderator always uses its full
    level set, reference first.
    """
    moderator = spec.moderator
    if isinstance(moderator, CategoricalModerator):
        if fitted2 is not None:
            logger.info(
                "Ignoring fitted2 for factor term2 '%s'; all levels are used.",
                moderator.name,
            )
        return moderator.default_grid()

    if fitted2 is None:
        return moderator.default_grid()
    grid = np.atleast_1d(np.asarray(fitted2, dtype=float))
    if grid.size == 0:
        raise ValueError("fitted2 must contain at least one value.")
    return grid
