"""Unit tests for stellar evolution and the Star model."""

import numpy as np
import pytest
from hypothesis import given, strategies as st

from star_population.errors import NormalizingZeroVectorError
from star_population.geometry import unit_vector
from star_population.stars.evolution import Evolution, LifestageRates
from star_population.stars.fate import WHITE_DWARF_LUMINOUS_INTENSITY, Fate
from star_population.stars.snapshot import StarSnapshot
from star_population.stars.star import Star
from star_population.units import SOLAR_LUMINOUS_INTENSITY


def make_snapshot(**changes):
    values = dict(
        mass=1.0,
        radius=1.0,
        luminous_intensity=SOLAR_LUMINOUS_INTENSITY,
        temperature=5778.0,
        position=np.array([10.0, 0.0, 0.0]),
        age=4.6e9,
    )
    values.update(changes)
    return StarSnapshot(**values)


def make_star(age=4.6e9, lifetime=1e10, fate=Fate.WHITE_DWARF, rates=None):
    if rates is None:
        rates = LifestageRates(
            mass_per_year=-1e-12,
            radius_per_year=1e-11,
            luminous_intensity_per_year=SOLAR_LUMINOUS_INTENSITY * 1e-11,
            temperature_per_year=1e-8,
        )
    return Star(make_snapshot(age=age), Evolution(rates, age, lifetime, fate))


class TestLifestageRates:
    """Test finite difference rates."""

    def test_rates_between_snapshots(self):
        now = make_snapshot(mass=0.9, radius=2.0, luminous_intensity=20.0, temperature=6000.0)
        then = make_snapshot(mass=1.0, radius=1.0, luminous_intensity=10.0, temperature=5000.0)
        rates = LifestageRates.between(now, then, 100.0)
        assert rates.mass_per_year == pytest.approx(-0.001)
        assert rates.radius_per_year == pytest.approx(0.01)
        assert rates.luminous_intensity_per_year == pytest.approx(0.1)
        assert rates.temperature_per_year == pytest.approx(10.0)

    def test_missing_values_give_zero_rate(self):
        now = make_snapshot(mass=None, radius=None)
        then = make_snapshot()
        rates = LifestageRates.between(now, then, 100.0)
        assert rates.mass_per_year == 0.0
        assert rates.radius_per_year == 0.0

    def test_zero_years_give_zero_rates(self):
        rates = LifestageRates.between(make_snapshot(mass=2.0), make_snapshot(), 0.0)
        assert rates == LifestageRates()


class TestEvolution:
    """Test the evolution state machine."""

    def test_time_until_death(self):
        evolution = Evolution(None, 100.0, 1000.0, Fate.WHITE_DWARF)
        assert evolution.time_until_death(0.0) == 900.0
        assert evolution.time_until_death(1000.0) == -100.0

    def test_unknown_age_never_dies(self):
        evolution = Evolution.none()
        assert evolution.time_until_death(1e12) is None
        assert not evolution.is_dead(1e12)

    def test_from_age_and_mass(self):
        evolution = Evolution.from_age_and_mass(1e9, 1.0)
        assert evolution.lifetime == pytest.approx(1e10)
        assert evolution.lifestage_rates is None
        assert evolution.fate is Fate.WHITE_DWARF
        assert Evolution.from_age_and_mass(1e6, 10.0).fate is Fate.TYPE_II_SUPERNOVA

    def test_linear_evolution_while_alive(self):
        evolution = Evolution(LifestageRates(0.0, 0.0, 2.0, -1.0), 0.0, 1e9, Fate.WHITE_DWARF)
        assert evolution.apply_to_luminous_intensity(10.0, 5.0) == 20.0
        assert evolution.apply_to_temperature(100.0, 5.0) == 95.0

    def test_missing_mass_stays_missing(self):
        evolution = Evolution(LifestageRates(1.0), 0.0, 10.0, Fate.WHITE_DWARF)
        assert evolution.apply_to_mass(None, 5.0) is None
        assert evolution.apply_to_mass(None, 50.0) is None

    def test_fate_applies_after_death(self):
        evolution = Evolution(None, 0.0, 10.0, Fate.WHITE_DWARF)
        assert evolution.apply_to_mass(2.0, 20.0) == pytest.approx(0.6)
        assert evolution.apply_to_luminous_intensity(1e30, 20.0) == (
            WHITE_DWARF_LUMINOUS_INTENSITY
        )


class TestHasChanged:
    """Test change detection between two times."""

    def test_crossing_death(self):
        star = make_star(age=1e10 - 100.0, lifetime=1e10)
        assert star.has_changed(0.0, 200.0)
        assert star.has_changed(200.0, 0.0)

    def test_shortly_after_death(self):
        star = make_star(age=1e10 + 5.0, lifetime=1e10)
        # Already dead at both times, but within ten years of death
        assert star.has_changed(0.0, 1.0)

    def test_long_dead_with_small_step(self):
        star = make_star(age=1e10 + 1e6, lifetime=1e10)
        assert not star.has_changed(0.0, 1.0)

    def test_evolution_timescale(self):
        star = make_star()
        assert not star.has_changed(0.0, 500.0)
        assert star.has_changed(0.0, 2000.0)

    def test_static_star_never_changes_with_time(self):
        star = make_star(rates=LifestageRates())
        static = Star(star.snapshot, Evolution(None, 4.6e9, 1e10, Fate.WHITE_DWARF))
        assert not static.has_changed(0.0, 2000.0)

    @given(
        st.floats(min_value=-1e4, max_value=1e4),
        st.floats(min_value=-1e4, max_value=1e4),
        st.floats(min_value=1e10 - 2e4, max_value=1e10 + 2e4),
    )
    def test_symmetric(self, then, now, age):
        star = make_star(age=age, lifetime=1e10)
        assert star.has_changed(then, now) == star.has_changed(now, then)


class TestStar:
    """Test star snapshots over time."""

    def test_state_at_zero_is_the_base_snapshot(self):
        star = make_star()
        assert star.state_at(0.0) == star.snapshot

    def test_state_at_does_not_modify_base(self):
        star = make_star()
        base = star.snapshot
        star.state_at(1e6)
        assert star.snapshot is base
        assert star.snapshot.luminous_intensity == SOLAR_LUMINOUS_INTENSITY

    def test_state_after_death_is_remnant(self):
        star = make_star(age=9e9, lifetime=1e10)
        state = star.state_at(2e9)
        assert state.radius == pytest.approx(0.0084)
        assert state.temperature == 25_000.0
        assert state.age == pytest.approx(1.1e10)

    def test_supernova_light_continuous_at_death(self):
        star = make_star(age=1e7 - 100.0, lifetime=1e7, fate=Fate.TYPE_II_SUPERNOVA)
        before = star.state_at(100.0 - 1e-6).luminous_intensity
        after = star.state_at(100.0 + 1e-6).luminous_intensity
        assert after == pytest.approx(before, rel=1e-3)

    def test_accessors(self):
        star = make_star(age=100.0, lifetime=1000.0)
        assert star.get_fate() is Fate.WHITE_DWARF
        assert star.lifetime == 1000.0
        assert star.time_until_death(0.0) == 900.0
        assert star.distance == pytest.approx(10.0)

    def test_hand_authored_star(self):
        star = Star.hand_authored(
            mass=2.0,
            radius=1.7,
            luminous_intensity=25.0 * SOLAR_LUMINOUS_INTENSITY,
            temperature=9940.0,
            position=[8.6, 0.0, 0.0],
            name="Sirius",
            constellation="Canis Major",
        )
        assert star.evolution == Evolution.none()
        assert star.state_at(1e9) == star.snapshot
        assert star.snapshot.constellation == "Canis Major"

    def test_appearance(self):
        star = make_star()
        appearance = star.to_appearance(0.0)
        assert appearance.illuminance == pytest.approx(star.illuminance_at(0.0))
        np.testing.assert_allclose(appearance.direction, [1.0, 0.0, 0.0])
        assert all(0.0 <= c <= 1.0 for c in appearance.color)
        assert appearance.apparently_the_same(star.to_appearance(1.0))

    def test_appearance_at_origin_uses_fallback_direction(self):
        star = Star(make_snapshot(position=np.zeros(3)), Evolution.none())
        np.testing.assert_allclose(star.to_appearance().direction, [1.0, 0.0, 0.0])


class TestUnitVector:
    def test_zero_vector_raises(self):
        with pytest.raises(NormalizingZeroVectorError):
            unit_vector([0.0, 0.0, 0.0])

    def test_zero_vector_error_is_value_error(self):
        with pytest.raises(ValueError):
            unit_vector(np.zeros(3))
