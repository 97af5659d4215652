"""Tests for the Karlin distribution and the rejection sampler."""

import math
import random
from collections import Counter

import numpy as np
import pytest
from scipy import integrate, stats

from spinblock import SamplingExhausted, karlin
from spinblock.karlin import COMPETITIVE_RATIO, Sampler, cdf, expected_value, pdf, sample, scale

COSTS = [1, 1.5, 2, 3, 7.5, 10, 100]


class StuckRng:
    """Random source that always proposes x=0 at half the envelope height."""

    def randint(self, a, b):
        return a

    def random(self):
        return 0.5


class TestDensity:
    """Test the closed-form density."""

    def test_expected_value_at_one(self):
        """Test pdf(1, 1) = e / (e - 1)."""
        assert f"{pdf(1, 1):.2f}" == "1.58"
        assert pdf(1, 1) == pytest.approx(COMPETITIVE_RATIO)

    @pytest.mark.parametrize("cost", COSTS)
    def test_normalized(self, cost):
        """Test the density integrates to 1 over its support."""
        total, _ = integrate.quad(lambda x: pdf(x, cost), 0, cost)
        assert total == pytest.approx(1.0, abs=1e-3)

    @pytest.mark.parametrize("cost", COSTS)
    def test_non_negative(self, cost):
        """Test the density is non-negative inside and outside the support."""
        xs = np.linspace(-cost, 2 * cost, 301)
        assert np.all(pdf(xs, cost) >= 0)

    def test_zero_outside_support(self):
        """Test the density vanishes outside [0, cost]."""
        assert pdf(-0.1, 3) == 0.0
        assert pdf(3.1, 3) == 0.0
        assert pdf(3, 3) > 0

    def test_monotone(self):
        """Test the density peaks at the upper end of its support."""
        xs = np.linspace(0, 5, 101)
        ys = pdf(xs, 5)
        assert np.all(np.diff(ys) > 0)
        assert ys.max() == pytest.approx(pdf(5, 5))

    def test_vectorized(self):
        """Test array input returns an array of the same shape."""
        xs = np.array([[0, 1], [2, 3]])
        ys = pdf(xs, 3)
        assert isinstance(ys, np.ndarray)
        assert ys.shape == (2, 2)
        assert ys[1, 1] == pytest.approx(pdf(3, 3))

    def test_scalar_returns_float(self):
        """Test scalar input returns a plain float."""
        assert isinstance(pdf(1, 3), float)
        assert isinstance(cdf(1, 3), float)

    @pytest.mark.parametrize("cost", [0, -1])
    def test_invalid_cost(self, cost):
        """Test non-positive costs are rejected."""
        with pytest.raises(ValueError, match="cost must be > 0"):
            pdf(1, cost)
        with pytest.raises(ValueError, match="cost must be > 0"):
            cdf(1, cost)

    @pytest.mark.parametrize("cost", COSTS)
    def test_expected_value(self, cost):
        """Test the closed-form mean matches numeric integration."""
        mean, _ = integrate.quad(lambda x: x * pdf(x, cost), 0, cost)
        assert expected_value(cost) == pytest.approx(mean, rel=1e-6)


class TestCumulative:
    """Test the cumulative distribution."""

    @pytest.mark.parametrize("cost", COSTS)
    def test_boundaries(self, cost):
        """Test cdf(0) = 0 and cdf(cost) = 1."""
        assert cdf(0, cost) == pytest.approx(0.0)
        assert cdf(cost, cost) == pytest.approx(1.0)

    def test_clamped(self):
        """Test cdf is 0 below and 1 above the support."""
        assert cdf(-5, 3) == 0.0
        assert cdf(50, 3) == pytest.approx(1.0)

    @pytest.mark.parametrize("cost", COSTS)
    def test_monotone(self, cost):
        """Test cdf is non-decreasing."""
        ys = cdf(np.linspace(-1, cost + 1, 200), cost)
        assert np.all(np.diff(ys) >= 0)

    @pytest.mark.parametrize("cost", [1, 3, 10])
    def test_derivative_is_pdf(self, cost):
        """Test d cdf / dx == pdf inside the support."""
        h = 1e-6
        for x in np.linspace(0.05 * cost, 0.95 * cost, 10):
            slope = (cdf(x + h, cost) - cdf(x - h, cost)) / (2 * h)
            assert slope == pytest.approx(pdf(x, cost), rel=1e-5)

    def test_integral_of_pdf(self):
        """Test cdf(x) equals the integral of pdf from 0 to x."""
        for x in (0.5, 1.0, 2.5):
            area, _ = integrate.quad(lambda t: pdf(t, 3), 0, x)
            assert cdf(x, 3) == pytest.approx(area, rel=1e-8)


class TestScale:
    """Test rounding break-even times onto the sampling grid."""

    def test_rounding(self):
        assert scale(3.0) == 3
        assert scale(1.7) == 2
        assert scale(2.4) == 2
        assert scale(0.2) == 1

    @pytest.mark.parametrize("value", [0, -1, math.inf, math.nan])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            scale(value)


class TestSampler:
    """Test rejection sampling."""

    def test_range(self):
        """Test samples are integers in [0, cost]."""
        sampler = Sampler(random.Random(1))
        for cost in (1, 3, 5, 20):
            for _ in range(2000):
                x = sampler.sample(cost)
                assert isinstance(x, int)
                assert 0 <= x <= cost

    def test_zero_cost(self):
        """Test cost 0 has a single possible threshold."""
        assert Sampler(random.Random(1)).sample(0) == 0

    @pytest.mark.parametrize("cost", [-1, 2.5, True, "3"])
    def test_invalid_cost(self, cost):
        """Test non-integer and negative costs are rejected."""
        with pytest.raises(ValueError, match="non-negative integer"):
            Sampler(random.Random(1)).sample(cost)

    def test_numpy_integer_cost(self):
        """Test numpy integers are accepted as costs."""
        assert 0 <= Sampler(random.Random(1)).sample(np.int64(4)) <= 4

    def test_envelope_is_upper_bound(self):
        """Test the envelope equals pdf at the end of the support for Karlin."""
        sampler = Sampler(random.Random(1))
        for cost in (1, 3, 10):
            assert sampler.envelope(cost) == pytest.approx(pdf(cost, cost))

    def test_envelope_for_non_monotone_density(self):
        """Test the envelope follows the true maximum of other shapes."""
        def tent(x, c):
            x = np.asarray(x, dtype=float)
            return np.maximum(0.0, 1.0 - np.abs(x - c / 2) / c)
        sampler = Sampler(random.Random(1), density=tent)
        assert sampler.envelope(4) == pytest.approx(1.0)
        assert sampler.envelope(4) > tent(4, 4)

    def test_distribution_shape(self):
        """Test the sample histogram matches the density (chi-squared)."""
        cost = 5
        n = 20_000
        sampler = Sampler(random.Random(1234))
        counts = Counter(sampler.sample(cost) for _ in range(n))
        observed = np.array([counts[x] for x in range(cost + 1)])
        weights = pdf(np.arange(cost + 1), cost)
        expected = weights / weights.sum() * n
        _, p_value = stats.chisquare(observed, expected)
        assert p_value > 0.001

    def test_mean_tracks_larger_values(self):
        """Test the density favours late thresholds (mean above the midpoint)."""
        sampler = Sampler(random.Random(99))
        draws = [sampler.sample(10) for _ in range(10_000)]
        assert np.mean(draws) > 5

    def test_seeded_determinism(self):
        """Test the same seed reproduces the same draws."""
        first = Sampler(random.Random(7))
        second = Sampler(random.Random(7))
        assert [first.sample(10) for _ in range(100)] == \
            [second.sample(10) for _ in range(100)]

    def test_module_level_sample(self):
        """Test the module-level helper accepts an injected source."""
        assert sample(3, random.Random(2)) == sample(3, random.Random(2))
        assert 0 <= karlin.sample(3) <= 3

    def test_exhausted(self):
        """Test an unreachable acceptance region fails loudly."""
        def spike(x, c):
            return np.where(np.asarray(x) == c, 1.0, 0.0)
        sampler = Sampler(StuckRng(), density=spike, max_iters=50)
        with pytest.raises(SamplingExhausted) as exc:
            sampler.sample(3)
        assert exc.value.iterations == 50
        assert exc.value.cost == 3

    def test_degenerate_density(self):
        """Test a density that is zero everywhere cannot be sampled."""
        sampler = Sampler(random.Random(1), density=lambda x, c: np.zeros(np.shape(x)))
        with pytest.raises(SamplingExhausted) as exc:
            sampler.sample(3)
        assert exc.value.iterations == 0

    def test_max_iters(self):
        """Test the iteration budget must be positive."""
        with pytest.raises(ValueError, match="max_iters"):
            Sampler(random.Random(1), max_iters=0)

    def test_envelope_cached_per_cost(self):
        """Test the density grid is scanned once per cost, not once per draw."""
        grid_calls = Counter()

        def counting_pdf(x, c):
            if np.ndim(x):
                grid_calls[c] += 1
            return pdf(x, c)

        sampler = Sampler(random.Random(3), density=counting_pdf)
        for _ in range(200):
            sampler.sample(10)
        sampler.sample(4)
        sampler.sample(4)
        assert grid_calls == {10: 1, 4: 1}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
