import math

import numpy as np
import pytest

from barrier_tree.models import BlackScholesTreeModel, KamradRitchken, param_assign
from barrier_tree.pricing import BarrierOptionTree, barrier_price, bs_price
from barrier_tree.validation import (
    analytic_reference,
    boyle_lau_number_of_times,
    convergence_table,
    parity_error,
)


@pytest.fixture(scope="module")
def down_out_call():
    params, opt = param_assign("DOWN_OUT_CALL")
    option = BarrierOptionTree(opt["maturity"], opt["strike"], lower_barrier=opt["lower_barrier"],
                               option_type=opt["option_type"])
    return params, option


@pytest.mark.parametrize("moves, expected", [(2, 65), (4, 260), (8, 1038)])
def test_boyle_lau_number_of_times(moves, expected):
    assert boyle_lau_number_of_times(100.0, 90.0, 0.3, 2.0, moves) == expected


@pytest.mark.parametrize(
    "args",
    [
        (100.0, 90.0, 0.3, 2.0, 0),
        (100.0, 100.0, 0.3, 2.0, 4),
        (100.0, -5.0, 0.3, 2.0, 4),
    ],
)
def test_boyle_lau_rejects_bad_inputs(args):
    with pytest.raises(ValueError):
        boyle_lau_number_of_times(*args)


def test_analytic_reference(down_out_call):
    params, option = down_out_call
    ref = analytic_reference(option, params)
    assert ref == pytest.approx(barrier_price(100.0, 100.0, 2.0, 0.0, 0.3, 90.0, "call", "down", "out"))
    assert ref == pytest.approx(8.46, abs=0.02)

    vanilla = BarrierOptionTree(2.0, 100.0)
    assert analytic_reference(vanilla, params) == pytest.approx(bs_price(100.0, 100.0, 2.0, 0.0, 0.3))

    with pytest.raises(ValueError):
        analytic_reference(BarrierOptionTree(2.0, 100.0, 80.0, 120.0), params)


def test_barrier_on_a_lattice_layer_matches_closed_form(down_out_call):
    params, option = down_out_call
    table = convergence_table(option, params, [260])
    assert table.loc[0, "abs_error"] < 1e-2


def test_barrier_between_layers_overprices(down_out_call):
    # one more time point moves the four-down node just above 90, so the
    # first knocked layer drops to about 87.7
    params, option = down_out_call
    table = convergence_table(option, params, [261])
    assert table.loc[0, "error"] > 0.5


def test_error_shrinks_along_boyle_lau_counts(down_out_call):
    params, option = down_out_call
    counts = [boyle_lau_number_of_times(100.0, 90.0, 0.3, 2.0, m) for m in (2, 8)]
    table = convergence_table(option, params, counts)
    assert table["abs_error"].iloc[-1] < table["abs_error"].iloc[0]


def test_table_layout(down_out_call):
    params, option = down_out_call
    counts = list(range(100, 201, 20))
    table = convergence_table(option, params, counts, reference=8.46)
    assert list(table.columns) == ["number_of_times", "tree_price", "reference", "error", "abs_error"]
    assert table["number_of_times"].tolist() == counts
    assert (table["reference"] == 8.46).all()
    np.testing.assert_allclose(table["error"], table["tree_price"] - 8.46)
    np.testing.assert_allclose(table["abs_error"], np.abs(table["error"]))
    assert (table["tree_price"] > 0).all()


def test_table_with_trinomial_strategy(down_out_call):
    params, option = down_out_call
    table = convergence_table(option, params, [101, 201], strategy=KamradRitchken())
    assert len(table) == 2
    assert np.isfinite(table["tree_price"]).all()
    assert (table["tree_price"] > 0).all()


@pytest.mark.parametrize("name", ["DOWN_OUT_CALL", "UP_OUT_PUT", "DOUBLE_OUT_CALL"])
def test_parity_error_on_scenarios(name):
    params, opt = param_assign(name, number_of_times=101)
    option = BarrierOptionTree(
        opt["maturity"], opt["strike"], opt.get("lower_barrier"), opt.get("upper_barrier"), opt["option_type"]
    )
    model = BlackScholesTreeModel(params)
    assert math.isclose(parity_error(option, model), 0.0, abs_tol=1e-10)
