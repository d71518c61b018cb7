"""Unit tests for the initial mass function and the alias sampler."""

import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from star_population.config import IMF_UPPER_MASS_BOUND
from star_population.generation.imf import (
    AliasSampler,
    integrate_kroupa,
    kroupa_mass_distribution,
    kroupa_weights,
    mass_index_distribution,
)
from star_population.generation.sampling import (
    random_direction,
    random_points_in_sphere,
)
from star_population.tracks.grid import SORTED_MASSES


class TestKroupa:
    """Test the Kroupa mass distribution."""

    def test_integrates_to_one(self):
        assert integrate_kroupa(0.0, 2000.0) == pytest.approx(1.0, rel=0.01)

    def test_brown_dwarfs_have_zero_density(self):
        assert kroupa_mass_distribution(0.05) == 0.0
        assert np.all(kroupa_mass_distribution([0.0, 0.01, 0.079]) == 0.0)

    @pytest.mark.parametrize("mass_break", [0.5, 1.0, 20.0])
    def test_continuous_at_breaks(self, mass_break):
        eps = 1e-9
        below = kroupa_mass_distribution(mass_break - eps)
        above = kroupa_mass_distribution(mass_break + eps)
        assert above == pytest.approx(below, rel=1e-6)

    @given(st.floats(min_value=0.08, max_value=500.0), st.floats(min_value=1e-3, max_value=100.0))
    def test_decreasing(self, mass, delta):
        assert kroupa_mass_distribution(mass + delta) < kroupa_mass_distribution(mass)

    def test_empty_interval(self):
        assert integrate_kroupa(2.0, 2.0) == 0.0
        assert integrate_kroupa(3.0, 2.0) == 0.0

    def test_integral_is_additive(self):
        whole = integrate_kroupa(0.5, 2.0)
        parts = integrate_kroupa(0.5, 1.0) + integrate_kroupa(1.0, 2.0)
        assert whole == pytest.approx(parts, rel=1e-3)


class TestKroupaWeights:
    """Test birth probabilities of the grid masses."""

    def test_one_weight_per_mass(self):
        weights = kroupa_weights(SORTED_MASSES)
        assert weights.shape == (len(SORTED_MASSES),)
        assert np.all(weights >= 0)

    def test_weights_cover_the_whole_distribution(self):
        total = kroupa_weights(SORTED_MASSES).sum()
        assert total == pytest.approx(integrate_kroupa(0.0, IMF_UPPER_MASS_BOUND), rel=0.01)
        assert total == pytest.approx(1.0, abs=0.02)

    def test_light_stars_dominate(self):
        weights = kroupa_weights(SORTED_MASSES)
        light = weights[np.asarray(SORTED_MASSES) < 1.0].sum()
        assert light > 0.8


class TestAliasSampler:
    """Test Vose's alias method."""

    def test_frequencies_match_weights(self):
        weights = np.array([1.0, 2.0, 3.0, 4.0, 0.0, 10.0])
        sampler = AliasSampler(weights)
        rng = np.random.default_rng(7)
        draws = sampler.sample(rng, 200_000)
        frequencies = np.bincount(draws, minlength=len(weights)) / len(draws)
        np.testing.assert_allclose(frequencies, weights / weights.sum(), atol=5e-3)

    def test_zero_weight_never_drawn(self):
        sampler = AliasSampler([0.0, 1.0, 0.0])
        rng = np.random.default_rng(1)
        assert set(sampler.sample(rng, 1000).tolist()) == {1}
        assert sampler.sample(rng) == 1

    def test_single_draw_is_int(self):
        sampler = AliasSampler([1.0, 1.0])
        assert isinstance(sampler.sample(np.random.default_rng(0)), int)

    @given(st.lists(st.floats(min_value=0.0, max_value=1e6), min_size=1, max_size=50))
    @settings(max_examples=50)
    def test_tables_are_valid(self, weights):
        if sum(weights) <= 0:
            with pytest.raises(ValueError):
                AliasSampler(weights)
            return
        sampler = AliasSampler(weights)
        assert len(sampler) == len(weights)
        assert np.all(sampler._accept >= 0)
        assert np.all(sampler._accept <= 1.0 + 1e-9)
        # Every column's acceptance plus what it hands to aliases recovers the weights
        n = len(weights)
        recovered = sampler._accept.copy()
        np.add.at(recovered, sampler._alias, 1.0 - sampler._accept)
        np.testing.assert_allclose(recovered / n, sampler.probabilities, atol=1e-9)

    @pytest.mark.parametrize(
        "weights",
        [[], [-1.0, 2.0], [np.nan, 1.0], [np.inf], [0.0, 0.0], [[1.0, 2.0]]],
    )
    def test_rejects_bad_weights(self, weights):
        with pytest.raises(ValueError):
            AliasSampler(weights)

    def test_mass_index_distribution(self):
        sampler = mass_index_distribution(SORTED_MASSES)
        draws = sampler.sample(np.random.default_rng(3), 10_000)
        assert draws.min() >= 0
        assert draws.max() < len(SORTED_MASSES)


class TestSampling:
    """Test uniform sampling of positions and directions."""

    def test_points_inside_sphere(self, rng):
        center = np.array([10.0, -5.0, 2.0])
        points = random_points_in_sphere(rng, 5000, 3.0, center)
        assert points.shape == (5000, 3)
        assert np.all(np.linalg.norm(points - center, axis=1) <= 3.0)

    def test_points_uniform_in_volume(self, rng):
        points = random_points_in_sphere(rng, 50_000, 1.0)
        # Half the volume of a unit ball lies beyond radius 0.5**(1/3)
        outer = np.mean(np.linalg.norm(points, axis=1) > 0.5 ** (1.0 / 3.0))
        assert outer == pytest.approx(0.5, abs=0.01)
        np.testing.assert_allclose(points.mean(axis=0), 0.0, atol=0.01)

    def test_per_point_radii(self, rng):
        radii = np.array([1.0, 100.0] * 500)
        points = random_points_in_sphere(rng, len(radii), radii)
        assert np.all(np.linalg.norm(points, axis=1) <= radii)
        assert np.linalg.norm(points[1::2], axis=1).max() > 1.0

    def test_zero_points(self, rng):
        assert random_points_in_sphere(rng, 0, 5.0).shape == (0, 3)

    def test_random_direction_is_unit(self, rng):
        for _ in range(100):
            assert np.linalg.norm(random_direction(rng)) == pytest.approx(1.0)
