"""Tests for the adaptive Wiener (LMS/RLS) filter."""

import numpy as np
import pytest

from impulse_filters import AdaptiveAlgorithm, InvalidParameter, WienerFilter


@pytest.mark.parametrize("kwargs", [
    {"filter_order": 0},
    {"mu": 0.0},
    {"mu": 1.0},
    {"mu": -0.1},
    {"lam": 0.0},
    {"lam": 1.5},
    {"seed": -1},
    {"algorithm": "nlms"},
])
def test_invalid_configuration(kwargs):
    with pytest.raises(InvalidParameter):
        WienerFilter(**kwargs)


def test_lambda_of_one_allowed():
    assert WienerFilter(lam=1.0).lam == 1.0


def test_initial_weights_are_small():
    f = WienerFilter(filter_order=16, seed=3)
    assert f.weights.shape == (16,)
    assert np.all(np.abs(f.weights) <= 0.0005)


def test_seed_makes_weights_reproducible():
    np.testing.assert_array_equal(WienerFilter(seed=7).weights, WienerFilter(seed=7).weights)
    assert not np.array_equal(WienerFilter(seed=7).weights, WienerFilter(seed=8).weights)


def test_reset_restores_initial_weights(echo_signal):
    _, noisy, _ = echo_signal
    f = WienerFilter(seed=11)
    initial = f.weights
    f.process(noisy)
    assert not np.array_equal(f.weights, initial)
    f.reset()
    np.testing.assert_array_equal(f.weights, initial)


def test_weights_persist_between_calls(echo_signal):
    _, noisy, _ = echo_signal
    f = WienerFilter(seed=2)
    first = f.process(noisy)
    second = f.process(noisy)
    assert not np.allclose(first, second)
    np.testing.assert_array_equal(first, WienerFilter(seed=2).process(noisy))


def test_reconfiguration_resets_weights(echo_signal):
    _, noisy, _ = echo_signal
    f = WienerFilter(seed=4)
    f.process(noisy)
    f.set_parameters(mu=0.02)
    np.testing.assert_array_equal(f.weights, WienerFilter(seed=4, mu=0.02).weights)


def test_first_output_uses_initial_weights():
    f = WienerFilter(seed=9)
    w0 = f.weights
    x = np.array([2.0, 1.0, 3.0, 0.5])
    assert f.process(x)[0] == pytest.approx(w0[0] * x[0])


def test_single_tap_lms_recursion():
    """Desired values for [1, 2, 3] are 1, (1 + 3) / 2 and (2 + 3) / 2."""
    mu = 0.1
    f = WienerFilter(filter_order=1, mu=mu, seed=0)
    w = f.weights[0]
    expected = []
    for sample, desired in [(1.0, 1.0), (2.0, 2.0), (3.0, 2.5)]:
        y = w * sample
        expected.append(y)
        w += mu * (desired - y) * sample

    np.testing.assert_allclose(f.process([1.0, 2.0, 3.0]), expected)
    assert f.weights[0] == pytest.approx(w)


def test_tiny_step_barely_adapts(echo_signal):
    _, noisy, _ = echo_signal
    f = WienerFilter(mu=1e-12, seed=1)
    before = f.weights
    f.process(noisy)
    np.testing.assert_allclose(f.weights, before, atol=1e-7)


def test_empty_input_keeps_weights():
    f = WienerFilter(seed=5)
    before = f.weights
    assert f.process([]).size == 0
    np.testing.assert_array_equal(f.weights, before)


def test_output_length_and_finite(echo_signal):
    _, noisy, _ = echo_signal
    out = WienerFilter(seed=0).process(noisy)
    assert out.shape == noisy.shape
    assert np.all(np.isfinite(out))


class TestRLS:

    def test_runs_and_stays_finite(self, echo_signal):
        _, noisy, _ = echo_signal
        f = WienerFilter(algorithm=AdaptiveAlgorithm.RLS, seed=0)
        out = f.process(noisy)
        assert out.shape == noisy.shape
        assert np.all(np.isfinite(out))
        assert np.all(np.isfinite(f.weights))

    def test_name(self):
        assert WienerFilter(algorithm="rls").name() == "WienerFilter_RLS_10_0.01_0.99"
        assert WienerFilter(algorithm="rls_standard").name() == "WienerFilter_RLSStd_10_0.01_0.99"

    @pytest.mark.parametrize("algorithm", ["rls", "rls_standard"])
    def test_matches_sample_by_sample_recursion(self, algorithm, rng):
        x = rng.normal(size=40)
        f = WienerFilter(algorithm=algorithm, filter_order=3, lam=0.98, seed=0)
        expected, final_weights = _rls_reference(x, f.weights, 0.98, standard=(algorithm == "rls_standard"))
        np.testing.assert_allclose(f.process(x), expected, rtol=1e-6, atol=1e-9)
        np.testing.assert_allclose(f.weights, final_weights, rtol=1e-6, atol=1e-9)

    def test_variants_differ_after_first_update(self, rng):
        x = rng.normal(size=20)
        historical = WienerFilter(algorithm="rls", filter_order=3, seed=0).process(x)
        standard = WienerFilter(algorithm="rls_standard", filter_order=3, seed=0).process(x)
        np.testing.assert_array_equal(historical[:2], standard[:2])
        assert not np.allclose(historical, standard)


def test_names():
    assert WienerFilter().name() == "WienerFilter_10_0.01_0.99"
    assert WienerFilter(seed=5).name() == "WienerFilter_10_0.01_0.99_seed5"
    assert WienerFilter(filter_order=4, mu=0.05, lam=0.95).name() == "WienerFilter_4_0.05_0.95"


def _rls_reference(x, weights, lam, standard, delta=0.001):
    """Element-wise RLS recursion over plain lists."""
    order = len(weights)
    w = [float(v) for v in weights]
    p = [[(1.0 / delta if i == j else 0.0) for j in range(order)] for i in range(order)]
    d = [0.0] * order
    out = []
    n_samples = len(x)

    for n in range(n_samples):
        d = [float(x[n])] + d[:-1]
        y = sum(w[i] * d[i] for i in range(order))

        desired = float(x[n])
        if 2 < n < n_samples - 2:
            desired = (x[n - 2] + x[n - 1] + x[n] + x[n + 1] + x[n + 2]) / 5.0
        error = desired - y

        denominator = lam + sum(d[i] * p[i][j] * d[j] for i in range(order) for j in range(order))
        k = [sum(p[i][j] * d[j] for j in range(order)) / denominator for i in range(order)]
        w = [w[i] + k[i] * error for i in range(order)]

        if standard:
            dp = [sum(d[m] * p[m][j] for m in range(order)) for j in range(order)]
            p = [[(p[i][j] - k[i] * dp[j]) / lam for j in range(order)] for i in range(order)]
        else:
            p = [[(p[i][j] - k[i] * d[j]) / lam for j in range(order)] for i in range(order)]
        out.append(y)

    return np.array(out), np.array(w)
