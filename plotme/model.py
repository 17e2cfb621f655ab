"""Read-only snapshot of a fitted linear model.

The marginal-effect code never talks to a regression library directly. It
consumes a :class:`FittedModel`, which carries only what the computation
needs: coefficient estimates, their covariance matrix, reported standard
errors, the design data and the residual degrees of freedom.

Fitting is left to ``statsmodels``; :meth:`FittedModel.from_statsmodels`
copies the relevant pieces out of an OLS results object.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np
import pandas as pd
import statsmodels.api as sm

from .errors import InvalidModelKind

logger = logging.getLogger(__name__)

# patsy names a treatment-coded dummy as ``cyl[T.6 Cyl]``.
DEFAULT_LEVEL_FORMAT = "{term}[T.{level}]"
# R's model.matrix names the same dummy ``cyl6 Cyl``.
R_LEVEL_FORMAT = "{term}{level}"


def _rows_used_in_fit(model: Any, data: pd.DataFrame) -> pd.DataFrame:
    """Drop rows statsmodels excluded from the fit, e.g. for missing values."""
    row_labels = getattr(model.data, "row_labels", None)
    if row_labels is None or not pd.Index(row_labels).isin(data.index).all():
        return data
    dropped = len(data) - len(row_labels)
    if dropped:
        logger.debug("Excluding %d rows not used in the fit", dropped)
    return data.loc[row_labels]


@dataclass(frozen=True)
class FittedModel:
    """Coefficients, covariance and data of one fitted linear model.

    Attributes:
        params: Coefficient estimates indexed by term name.
        cov: Covariance matrix of ``params`` with term names on both axes.
        bse: Model-reported standard errors indexed by term name.
        data: Data the model was fitted on, one column per variable.
        df_resid: Residual degrees of freedom.
        level_format: Pattern naming a categorical dummy coefficient from
            ``term`` and ``level``.
    """

    params: pd.Series
    cov: pd.DataFrame
    bse: pd.Series
    data: pd.DataFrame
    df_resid: float
    level_format: str = DEFAULT_LEVEL_FORMAT

    def __post_init__(self) -> None:
        missing = [name for name in self.params.index if name not in self.cov.index]
        if missing:
            raise ValueError(f"Covariance matrix has no entries for terms: {missing}")

    @classmethod
    def from_arrays(
        cls,
        params: dict,
        cov: np.ndarray,
        data: pd.DataFrame,
        df_resid: float,
        bse: Optional[dict] = None,
        level_format: str = DEFAULT_LEVEL_FORMAT,
    ) -> "FittedModel":
        """Build a snapshot from plain mappings and an ordered covariance array.

        The covariance rows and columns follow the iteration order of
        ``params``. When ``bse`` is omitted it is taken from the diagonal.
        """
        names = list(params.keys())
        params_s = pd.Series(params, index=names, dtype=float)
        cov_df = pd.DataFrame(np.asarray(cov, dtype=float), index=names, columns=names)
        if bse is None:
            bse_s = pd.Series(np.sqrt(np.diag(cov_df.to_numpy())), index=names)
        else:
            bse_s = pd.Series(bse, dtype=float).reindex(names)
        return cls(
            params=params_s,
            cov=cov_df,
            bse=bse_s,
            data=data,
            df_resid=float(df_resid),
            level_format=level_format,
        )

    @classmethod
    def from_statsmodels(
        cls,
        results: Any,
        data: Optional[pd.DataFrame] = None,
        level_format: str = DEFAULT_LEVEL_FORMAT,
    ) -> "FittedModel":
        """Copy what is needed out of a statsmodels OLS results object.

        Args:
            results: Results returned by ``smf.ols(...).fit()`` or
                ``sm.OLS(...).fit()``.
            data: Design data. Defaults to the frame statsmodels keeps for
                formula-built models (``results.model.data.frame``). Rows the
                fit dropped are excluded.
            level_format: Dummy naming pattern; patsy's by default.

        Raises:
            InvalidModelKind: If ``results`` does not come from an OLS fit.
            ValueError: If no design data is available.
        """
        model = getattr(results, "model", None)
        if not isinstance(model, sm.OLS):
            raise InvalidModelKind(
                f"Only OLS model results can be used; got {type(results).__name__}."
            )

        if data is None:
            data = getattr(model.data, "frame", None)
        if data is None:
            raise ValueError(
                "Design data is unavailable; fit with a formula or pass data=."
            )
        data = _rows_used_in_fit(model, data)

        params = pd.Series(results.params)
        if not isinstance(results.params, pd.Series):
            params.index = list(model.exog_names)
        cov = results.cov_params()
        if not isinstance(cov, pd.DataFrame):
            cov = pd.DataFrame(cov, index=params.index, columns=params.index)
        bse = pd.Series(np.asarray(results.bse, dtype=float), index=params.index)

        logger.debug(
            "Captured OLS fit with %d coefficients and %.0f residual df",
            len(params),
            results.df_resid,
        )
        return cls(
            params=params.astype(float),
            cov=cov.astype(float),
            bse=bse,
            data=data,
            df_resid=float(results.df_resid),
            level_format=level_format,
        )

    def dummy_name(self, term: str, level: object) -> str:
        """Coefficient name of the treatment dummy for ``level`` of ``term``."""
        return self.level_format.format(term=term, level=level)


def as_fitted_model(obj: Any) -> FittedModel:
    """Return ``obj`` as a :class:`FittedModel`.

    Accepts an existing snapshot or a statsmodels OLS results object.

    Raises:
        InvalidModelKind: For anything else, including GLM and WLS results.
    """
    if isinstance(obj, FittedModel):
        return obj
    if hasattr(obj, "model") and hasattr(obj, "params"):
        return FittedModel.from_statsmodels(obj)
    raise InvalidModelKind(
        f"Only linear (OLS) model fits can be used; got {type(obj).__name__}."
    )
