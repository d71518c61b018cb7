"""Unit tests for stellar fates and the supernova light curve."""

import pytest
from hypothesis import given, strategies as st

from star_population.config import (
    SUPERNOVA_PEAK_MAGNITUDE,
    SUPERNOVA_PEAK_TEMPERATURE,
    SUPERNOVA_PLATEAU_MAGNITUDE,
    SUPERNOVA_PLATEAU_TEMPERATURE,
)
from star_population.stars.fate import (
    REMNANT_RADIUS_SOLAR,
    WHITE_DWARF_LUMINOUS_INTENSITY,
    Fate,
    supernova_absolute_magnitude,
    supernova_luminous_intensity,
    supernova_temperature,
)
from star_population.units import SOLAR_LUMINOUS_INTENSITY

PHASE_BOUNDARIES = [0.0, 10.0, 20.0, 110.0]


class TestFateSelection:
    """Test fate selection by initial mass."""

    @pytest.mark.parametrize("mass", [0.09, 1.0, 7.0, 7.99])
    def test_light_stars_become_white_dwarfs(self, mass):
        assert Fate.from_initial_mass(mass) is Fate.WHITE_DWARF

    @pytest.mark.parametrize("mass", [8.0, 12.0, 350.0])
    def test_heavy_stars_explode(self, mass):
        assert Fate.from_initial_mass(mass) is Fate.TYPE_II_SUPERNOVA


class TestWhiteDwarf:
    """Test the white dwarf transform."""

    def test_values(self):
        fate = Fate.WHITE_DWARF
        assert fate.apply_to_mass(2.0) == pytest.approx(0.6)
        assert fate.apply_to_radius() == pytest.approx(0.0084)
        assert fate.apply_to_temperature(5000.0, 1e6) == 25_000.0
        assert fate.apply_to_luminous_intensity(1e30, 1e6) == WHITE_DWARF_LUMINOUS_INTENSITY

    def test_white_dwarf_is_dim(self):
        assert WHITE_DWARF_LUMINOUS_INTENSITY == pytest.approx(0.056 * SOLAR_LUMINOUS_INTENSITY)

    def test_no_time_dependence(self):
        fate = Fate.WHITE_DWARF
        assert fate.apply_to_luminous_intensity(1.0, 1.0) == fate.apply_to_luminous_intensity(
            1.0, 1e9
        )


class TestSupernovaRemnant:
    """Test the remnant left by a supernova."""

    def test_neutron_star(self):
        assert Fate.TYPE_II_SUPERNOVA.apply_to_mass(12.0) == 1.4

    def test_black_hole(self):
        assert Fate.TYPE_II_SUPERNOVA.apply_to_mass(40.0) == 7.0

    def test_remnant_radius_is_ten_kilometers(self):
        assert Fate.TYPE_II_SUPERNOVA.apply_to_radius() == REMNANT_RADIUS_SOLAR
        assert REMNANT_RADIUS_SOLAR == pytest.approx(1e4 / 6.957e8)


class TestSupernovaLightCurve:
    """Test the Type II-P light curve phases."""

    progenitor_magnitude = -5.0
    progenitor_temperature = 4000.0

    def test_day_zero_is_the_progenitor(self):
        assert supernova_absolute_magnitude(0.0, self.progenitor_magnitude) == pytest.approx(
            self.progenitor_magnitude
        )
        assert supernova_temperature(0.0, self.progenitor_temperature) == pytest.approx(
            self.progenitor_temperature
        )

    def test_negative_days_return_input(self):
        assert supernova_absolute_magnitude(-3.0, self.progenitor_magnitude) == (
            self.progenitor_magnitude
        )
        assert supernova_temperature(-3.0, self.progenitor_temperature) == (
            self.progenitor_temperature
        )
        assert supernova_luminous_intensity(-1.0, 123.0) == 123.0

    def test_peak_and_plateau(self):
        assert supernova_absolute_magnitude(10.0, self.progenitor_magnitude) == pytest.approx(
            SUPERNOVA_PEAK_MAGNITUDE
        )
        assert supernova_absolute_magnitude(50.0, self.progenitor_magnitude) == (
            SUPERNOVA_PLATEAU_MAGNITUDE
        )
        assert supernova_temperature(10.0, self.progenitor_temperature) == pytest.approx(
            SUPERNOVA_PEAK_TEMPERATURE
        )
        assert supernova_temperature(50.0, self.progenitor_temperature) == (
            SUPERNOVA_PLATEAU_TEMPERATURE
        )

    def test_late_decline(self):
        assert supernova_absolute_magnitude(210.0, self.progenitor_magnitude) == pytest.approx(
            SUPERNOVA_PLATEAU_MAGNITUDE + 1.0
        )
        assert supernova_temperature(1e6, self.progenitor_temperature) == 0.0

    @pytest.mark.parametrize("boundary", PHASE_BOUNDARIES)
    def test_continuous_at_phase_boundaries(self, boundary):
        eps = 1e-6
        before = supernova_absolute_magnitude(boundary - eps, self.progenitor_magnitude)
        after = supernova_absolute_magnitude(boundary + eps, self.progenitor_magnitude)
        assert abs(after - before) < 1e-3

        before = supernova_temperature(boundary - eps, self.progenitor_temperature)
        after = supernova_temperature(boundary + eps, self.progenitor_temperature)
        assert abs(after - before) < 1.0

    @given(st.floats(min_value=10.0, max_value=1e5), st.floats(min_value=0.0, max_value=1e4))
    def test_never_brightens_after_peak(self, day, later_by):
        earlier = supernova_absolute_magnitude(day, self.progenitor_magnitude)
        later = supernova_absolute_magnitude(day + later_by, self.progenitor_magnitude)
        # Larger magnitude means dimmer
        assert later >= earlier - 1e-9

    @given(st.floats(min_value=10.0, max_value=1e5), st.floats(min_value=0.0, max_value=1e4))
    def test_never_heats_after_peak(self, day, later_by):
        earlier = supernova_temperature(day, self.progenitor_temperature)
        later = supernova_temperature(day + later_by, self.progenitor_temperature)
        assert later <= earlier + 1e-9

    @given(
        st.floats(min_value=0.0, max_value=9.999),
        st.floats(min_value=0.0, max_value=9.999),
        st.sampled_from([-5.0, -20.0]),
    )
    def test_rise_never_dims(self, day, other_day, progenitor_magnitude):
        earlier, later = sorted((day, other_day))
        assert supernova_absolute_magnitude(later, progenitor_magnitude) <= (
            supernova_absolute_magnitude(earlier, progenitor_magnitude) + 1e-9
        )

    @given(
        st.floats(min_value=0.0, max_value=9.999),
        st.floats(min_value=0.0, max_value=9.999),
        st.sampled_from([4000.0, 250_000.0]),
    )
    def test_rise_never_cools(self, day, other_day, progenitor_temperature):
        earlier, later = sorted((day, other_day))
        assert supernova_temperature(later, progenitor_temperature) >= (
            supernova_temperature(earlier, progenitor_temperature) - 1e-9
        )

    def test_peak_never_cooler_than_a_very_hot_progenitor(self):
        hot = 250_000.0
        assert supernova_temperature(10.0, hot) == pytest.approx(hot)
        assert supernova_temperature(5.0, hot) == pytest.approx(hot)

    def test_peak_never_dimmer_than_a_very_bright_progenitor(self):
        bright = -20.0
        assert supernova_absolute_magnitude(10.0, bright) == pytest.approx(bright)

    def test_intensity_in_years_via_fate(self):
        progenitor = 1e5 * SOLAR_LUMINOUS_INTENSITY
        fate = Fate.TYPE_II_SUPERNOVA
        at_peak = fate.apply_to_luminous_intensity(progenitor, 10.0 / 365.25)
        on_plateau = fate.apply_to_luminous_intensity(progenitor, 50.0 / 365.25)
        assert at_peak > on_plateau > progenitor

    def test_dark_progenitor(self):
        assert supernova_luminous_intensity(10.0, 0.0) > 0.0
