import logging
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from barrier_tree.errors import InfeasibleCalibrationError, LengthMismatchError
from barrier_tree.models import BinomialLattice, TreeModel


@pytest.fixture
def lattice():
    # prob_up = (1.02 - 0.9) / 0.2 = 0.6
    return BinomialLattice(up=1.1, down=0.9, risk_free_factor=0.02, initial_value=100.0, number_of_times=6)


def test_probability_closure(lattice):
    pu, pd = lattice.up_and_down_probabilities()
    assert pu == pytest.approx(0.6)
    assert pd == pytest.approx(0.4)
    assert pu + pd == pytest.approx(1.0)
    assert 0.0 <= pu <= 1.0 and 0.0 <= pd <= 1.0


def test_state_counts(lattice):
    for n in range(lattice.number_of_times):
        assert lattice.values_at(n).shape == (n + 1,)


def test_values_ordered_by_down_moves(lattice):
    assert np.allclose(lattice.values_at(0), [100.0])
    assert np.allclose(lattice.values_at(2), [121.0, 99.0, 81.0])
    for n in range(1, lattice.number_of_times):
        assert np.all(np.diff(lattice.values_at(n)) < 0)


def test_martingale_property(lattice):
    for n in range(lattice.number_of_times - 1):
        expectation = lattice.conditional_expectation(lattice.values_at(n + 1), n)
        assert np.allclose(expectation, lattice.values_at(n), rtol=1e-12, atol=0.0)


def test_node_probabilities(lattice):
    assert np.allclose(lattice.probabilities_at(2), [0.36, 0.48, 0.16])
    for n in range(lattice.number_of_times):
        probs = lattice.probabilities_at(n)
        assert probs.sum() == pytest.approx(1.0)
        # risk-neutral forward
        assert probs @ lattice.values_at(n) == pytest.approx(100.0 * 1.02 ** n)


def test_transformed_values(lattice):
    payoff = lattice.transformed_values_at(2, lambda s: max(s - 100.0, 0.0))
    assert np.allclose(payoff, [21.0, 0.0, 0.0])


def test_values_are_copies(lattice):
    first = lattice.values_at(3)
    first[:] = -1.0
    assert np.all(lattice.values_at(3) > 0)


def test_bad_indices_and_sizes(lattice):
    with pytest.raises(IndexError):
        lattice.values_at(6)
    with pytest.raises(IndexError):
        lattice.values_at(-1)
    with pytest.raises(LengthMismatchError):
        lattice.conditional_expectation(np.ones(4), 3)
    with pytest.raises(IndexError):
        lattice.conditional_expectation(np.ones(7), 5)
    with pytest.raises(ValueError):
        BinomialLattice(1.1, 0.9, 0.0, 100.0, 0)


def test_satisfies_tree_model_protocol(lattice):
    assert isinstance(lattice, TreeModel)


# ---------------- infeasible calibration: both paths ----------------
INFEASIBLE = dict(up=1.01, down=0.9, risk_free_factor=0.05, initial_value=100.0, number_of_times=4)


def test_infeasible_calibration_raises_when_validating():
    with pytest.raises(InfeasibleCalibrationError) as exc:
        BinomialLattice(**INFEASIBLE, validate=True)
    assert isinstance(exc.value, ValueError)
    assert exc.value.probabilities["prob_up"] > 1.0


def test_infeasible_calibration_is_garbage_in_garbage_out(caplog):
    with caplog.at_level(logging.WARNING, logger="barrier_tree.models.binomial"):
        lattice = BinomialLattice(**INFEASIBLE)
    assert "Infeasible" in caplog.text

    pu, pd = lattice.up_and_down_probabilities()
    assert pu > 1.0 and pd < 0.0
    assert pu + pd == pytest.approx(1.0)
    # the recursion still runs, and the algebraic martingale identity still holds
    values = lattice.conditional_expectation(lattice.values_at(3), 2)
    assert np.allclose(values, lattice.values_at(2))


def test_single_time_point_skips_calibration(caplog):
    with caplog.at_level(logging.WARNING, logger="barrier_tree.models.binomial"):
        lattice = BinomialLattice(1.01, 0.9, 0.05, 100.0, 1, validate=True)
    assert lattice.values_at(0).tolist() == [100.0]
    assert caplog.text == ""


# ---------------- one-time generation ----------------
def test_values_generated_once_under_threads(monkeypatch):
    calls = []
    original = BinomialLattice._generate_values

    def counting(self):
        calls.append(1)
        return original(self)

    monkeypatch.setattr(BinomialLattice, "_generate_values", counting)
    lattice = BinomialLattice(1.05, 1 / 1.05, 0.001, 100.0, 200)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda n: lattice.values_at(n % 200), range(64)))

    assert len(calls) == 1
    assert all(r.shape == ((i % 200) + 1,) for i, r in enumerate(results))
    lattice.values_at(10)
    assert len(calls) == 1
