"""End-to-end checks of the marginal-effects entry points."""

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import pandas.testing as pdt
import pytest
import statsmodels.api as sm
import statsmodels.formula.api as smf
from matplotlib.figure import Figure

from plotme.analysis import marginal_effects, plot_me
from plotme.errors import (
    InvalidModelKind,
    InvalidTermKind,
    NotImplementedStrategy,
    UnsupportedCiType,
)
from plotme.model import FittedModel


def test_income_by_population_table(states_fit, states_df):
    frame = plot_me(states_fit, "Income", "Population", ci=95, plot=False)

    assert isinstance(frame, pd.DataFrame)
    assert list(frame.columns) == ["fitted2", "dy_dx", "se_dy_dx", "lower", "upper"]
    assert len(frame) == states_df["Population"].nunique()
    assert frame["fitted2"].is_monotonic_increasing
    assert (frame["lower"] < frame["dy_dx"]).all()
    assert (frame["dy_dx"] < frame["upper"]).all()


def test_three_level_factor_table(tiers_fit):
    frame = plot_me(tiers_fit, "x", "tier", plot=False)

    assert list(frame["fitted2"]) == ["Low", "Mid", "High"]
    assert frame["dy_dx"].iloc[0] == pytest.approx(tiers_fit.params["x"])
    assert frame["se_dy_dx"].iloc[0] == pytest.approx(tiers_fit.bse["x"])
    assert frame["dy_dx"].iloc[1] == pytest.approx(
        tiers_fit.params["x"] + tiers_fit.params["x:tier[T.Mid]"]
    )


def test_marginal_effects_metadata(tiers_fit, tiers_df):
    table = marginal_effects(tiers_fit, "x", "tier")
    assert table.term2 == "tier"
    assert table.categorical
    assert len(table.term2_distribution) == len(tiers_df)
    assert table.t_statistic == pytest.approx(1.959964, abs=1e-6)


def test_formula_order_independent(states_df):
    fit_ab = smf.ols("Murder ~ Income * Population", data=states_df).fit()
    fit_ba = smf.ols("Murder ~ Population * Income", data=states_df).fit()
    frame_ab = plot_me(fit_ab, "Income", "Population", plot=False)
    frame_ba = plot_me(fit_ba, "Income", "Population", plot=False)
    pdt.assert_frame_equal(frame_ab, frame_ba, check_exact=False, rtol=1e-8)


def test_fitted2_grid(states_fit):
    frame = plot_me(states_fit, "Income", "Population", fitted2=[2, 4, 8], plot=False)
    np.testing.assert_array_equal(frame["fitted2"], [2.0, 4.0, 8.0])


def test_t_statistic_override(states_fit, caplog):
    with caplog.at_level("INFO"):
        frame = plot_me(
            states_fit, "Income", "Population", ci_type="fdr", t_statistic=2.0, plot=False
        )
    np.testing.assert_allclose(frame["upper"], frame["dy_dx"] + 2.0 * frame["se_dy_dx"])
    assert "Using custom t-statistic" in caplog.text
    assert "t-statistic used" not in caplog.text


def test_fdr_interval_is_at_least_as_wide(states_fit):
    standard = plot_me(states_fit, "Income", "Population", plot=False)
    fdr = plot_me(states_fit, "Income", "Population", ci_type="fdr", plot=False)
    assert ((fdr["upper"] - fdr["lower"]) >= (standard["upper"] - standard["lower"])).all()


def test_factor_term1_rejected_before_compute(tiers_fit):
    with pytest.raises(InvalidTermKind):
        plot_me(tiers_fit, "tier", "x", plot=False)


def test_glm_is_rejected(states_df):
    glm_fit = smf.glm("Murder ~ Income * Population", data=states_df).fit()
    with pytest.raises(InvalidModelKind):
        plot_me(glm_fit, "Income", "Population", plot=False)


def test_non_model_is_rejected():
    with pytest.raises(InvalidModelKind):
        plot_me({"Income": 1.0}, "Income", "Population", plot=False)


def test_wls_is_rejected(states_df):
    wls_fit = smf.wls(
        "Murder ~ Income * Population", data=states_df, weights=np.ones(len(states_df))
    ).fit()
    with pytest.raises(InvalidModelKind):
        plot_me(wls_fit, "Income", "Population", plot=False)


def test_unknown_ci_type(states_fit):
    with pytest.raises(UnsupportedCiType):
        plot_me(states_fit, "Income", "Population", ci_type="bayes", plot=False)


def test_boot_not_supported(states_fit):
    with pytest.raises(NotImplementedStrategy):
        plot_me(states_fit, "Income", "Population", ci_type="boot", plot=False)


def test_array_fit_needs_data(states_df):
    exog = sm.add_constant(states_df[["Income", "Population"]].to_numpy())
    fit = sm.OLS(states_df["Murder"].to_numpy(), exog).fit()
    with pytest.raises(ValueError, match="Design data"):
        FittedModel.from_statsmodels(fit)


def test_fitted_model_input(states_fit, states_df):
    model = FittedModel.from_statsmodels(states_fit, data=states_df)
    from_model = plot_me(model, "Income", "Population", plot=False)
    from_fit = plot_me(states_fit, "Income", "Population", plot=False)
    pdt.assert_frame_equal(from_model, from_fit)


def test_plot_returns_figure(states_fit, tiers_fit):
    fig = plot_me(states_fit, "Income", "Population")
    assert isinstance(fig, Figure)
    plt.close(fig)

    fig = plot_me(tiers_fit, "x", "tier")
    assert isinstance(fig, Figure)
    plt.close(fig)


def test_rows_dropped_by_fit_are_not_levels(states_df):
    data = states_df.copy()
    data.loc[0, "Population"] = 999.0
    data.loc[0, "Murder"] = np.nan
    fit = smf.ols("Murder ~ Income * Population", data=data).fit()

    frame = plot_me(fit, "Income", "Population", plot=False)
    table = marginal_effects(fit, "Income", "Population")

    assert fit.nobs == len(data) - 1
    assert 999.0 not in set(frame["fitted2"])
    assert len(frame) == data["Population"].iloc[1:].nunique()
    assert len(table.term2_distribution) == int(fit.nobs)
    assert 999.0 not in set(table.term2_distribution)
