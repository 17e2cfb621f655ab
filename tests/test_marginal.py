import math

import numpy as np
import pandas as pd
import pandas.testing as pdt
import pytest
import statsmodels.formula.api as smf

from plotme.model import FittedModel
from plotme.stats.marginal import (
    InteractionLevel,
    ReferenceLevel,
    compute,
    effect_levels,
    me_one,
)
from plotme.terms import level_grid, resolve

NAMES = ["Intercept", "x", "z", "x:z"]
PARAMS = dict(zip(NAMES, [1.0, 2.0, 0.5, -0.3]))
COV = np.array(
    [
        [0.50, 0.01, 0.02, 0.00],
        [0.01, 0.20, 0.00, -0.03],
        [0.02, 0.00, 0.10, 0.01],
        [0.00, -0.03, 0.01, 0.05],
    ]
)


@pytest.fixture
def continuous_model():
    data = pd.DataFrame({"x": [0.1, 0.4, 0.2, 0.9, 0.5, 0.3], "z": [3, 1, 2, 2, 5, 4]})
    return FittedModel.from_arrays(PARAMS, COV, data=data, df_resid=2)


@pytest.fixture
def categorical_model():
    names = ["Intercept", "x", "g[T.B]", "g[T.C]", "x:g[T.B]", "x:g[T.C]"]
    params = dict(zip(names, [0.5, 1.2, 0.3, -0.4, 0.8, -1.1]))
    cov = np.diag([0.4, 0.09, 0.2, 0.2, 0.16, 0.25])
    cov[1, 4] = cov[4, 1] = -0.02
    cov[1, 5] = cov[5, 1] = 0.03
    bse = dict(zip(names, np.sqrt(np.diag(cov))))
    bse["x"] = 0.31
    data = pd.DataFrame(
        {
            "x": [0.1, 0.5, 0.9, 0.2, 0.4, 0.7],
            "g": pd.Categorical(list("ABCABC"), categories=["A", "B", "C"]),
        }
    )
    return FittedModel.from_arrays(params, cov, data=data, df_resid=0, bse=bse)


def test_continuous_point_estimates_and_se(continuous_model):
    spec = resolve(continuous_model, "x", "z")
    table = compute(spec, continuous_model, level_grid(spec))
    frame = table.frame

    v = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    np.testing.assert_allclose(frame["fitted2"], v)
    np.testing.assert_allclose(frame["dy_dx"], 2.0 - 0.3 * v)
    expected_se = np.sqrt(0.20 + v**2 * 0.05 + 2 * v * -0.03)
    np.testing.assert_allclose(frame["se_dy_dx"], expected_se)
    assert frame["lower"].isna().all()
    assert frame["upper"].isna().all()
    assert math.isnan(table.t_statistic)


def test_continuous_matches_scalar_formula(continuous_model):
    spec = resolve(continuous_model, "x", "z")
    table = compute(spec, continuous_model, [2.5])
    dy_dx, se = me_one(InteractionLevel(label=2.5, value=2.5, key="x:z"), "x", continuous_model)
    assert math.isclose(table.frame["dy_dx"].iloc[0], dy_dx)
    assert math.isclose(table.frame["se_dy_dx"].iloc[0], se)


def test_effect_levels_tag_reference_first(categorical_model):
    spec = resolve(categorical_model, "x", "g")
    levels = effect_levels(spec, level_grid(spec))
    assert isinstance(levels[0], ReferenceLevel)
    assert levels[0].label == "A"
    assert [lv.key for lv in levels[1:]] == ["x:g[T.B]", "x:g[T.C]"]
    assert all(lv.value == 1.0 for lv in levels[1:])


def test_categorical_reference_row(categorical_model):
    spec = resolve(categorical_model, "x", "g")
    table = compute(spec, categorical_model, level_grid(spec))
    frame = table.frame

    assert list(frame["fitted2"]) == ["A", "B", "C"]
    assert frame["fitted2"].cat.ordered
    ref = frame.iloc[0]
    assert ref["dy_dx"] == pytest.approx(1.2)
    # Model-reported SE of x, not sqrt(cov[x, x]).
    assert ref["se_dy_dx"] == pytest.approx(0.31)
    assert not math.isclose(ref["se_dy_dx"], math.sqrt(0.09))


def test_categorical_non_reference_rows(categorical_model):
    spec = resolve(categorical_model, "x", "g")
    frame = compute(spec, categorical_model, level_grid(spec)).frame

    assert frame["dy_dx"].iloc[1] == pytest.approx(1.2 + 0.8)
    assert frame["se_dy_dx"].iloc[1] == pytest.approx(math.sqrt(0.09 + 0.16 - 0.04))
    assert frame["dy_dx"].iloc[2] == pytest.approx(1.2 - 1.1)
    assert frame["se_dy_dx"].iloc[2] == pytest.approx(math.sqrt(0.09 + 0.25 + 0.06))


def test_table_metadata(categorical_model):
    spec = resolve(categorical_model, "x", "g")
    table = compute(spec, categorical_model, level_grid(spec))
    assert table.term1 == "x"
    assert table.term2 == "g"
    assert table.categorical
    assert len(table.term2_distribution) == 6
    assert len(table) == 3


def test_formula_order_does_not_change_effects(states_df):
    fit_ab = smf.ols("Murder ~ Income * Population", data=states_df).fit()
    fit_ba = smf.ols("Murder ~ Population * Income", data=states_df).fit()
    model_ab = FittedModel.from_statsmodels(fit_ab)
    model_ba = FittedModel.from_statsmodels(fit_ba)

    spec_ab = resolve(model_ab, "Income", "Population")
    spec_ba = resolve(model_ba, "Income", "Population")
    frame_ab = compute(spec_ab, model_ab, level_grid(spec_ab)).frame
    frame_ba = compute(spec_ba, model_ba, level_grid(spec_ba)).frame

    pdt.assert_frame_equal(frame_ab, frame_ba, check_exact=False, rtol=1e-8)


def test_continuous_point_estimate_against_statsmodels(states_fit):
    model = FittedModel.from_statsmodels(states_fit)
    spec = resolve(model, "Income", "Population")
    frame = compute(spec, model, level_grid(spec)).frame
    b = states_fit.params
    expected = b["Income"] + b["Income:Population"] * frame["fitted2"]
    np.testing.assert_allclose(frame["dy_dx"], expected)


def test_categorical_reference_se_matches_statsmodels_bse(tiers_fit):
    model = FittedModel.from_statsmodels(tiers_fit)
    spec = resolve(model, "x", "tier")
    frame = compute(spec, model, level_grid(spec)).frame
    assert list(frame["fitted2"]) == ["Low", "Mid", "High"]
    assert frame["dy_dx"].iloc[0] == pytest.approx(tiers_fit.params["x"])
    assert frame["se_dy_dx"].iloc[0] == pytest.approx(tiers_fit.bse["x"])
