"""
Tests for the 21-dimension feature builder.

Covers:
  - Fixed name/array order
  - Scenario knobs
  - Tagged fallbacks for missing or malformed weather
  - Seven-day trend features
"""

from datetime import date

import numpy as np
import pytest

from wx_scoring.features import (
    FEATURE_INDEX,
    FEATURE_NAMES,
    Scenario,
    build_feature_vector,
    to_array,
)
from wx_scoring.results import Computed, Defaulted, is_defaulted
from wx_simulation.forecast import generate_forecast
from wx_simulation.geo import state_by_code
from wx_simulation.meteorology import vpd

WEDNESDAY = date(2024, 1, 10)
SATURDAY = date(2024, 1, 13)


@pytest.fixture
def weather():
    return {"temperature": 40.0, "humidity": 35.0, "precipitation": 0.1}


# ── Ordering ────────────────────────────────────────────────────────────────


class TestOrdering:
    def test_twenty_one_names(self):
        assert len(FEATURE_NAMES) == 21
        assert len(set(FEATURE_NAMES)) == 21
        assert FEATURE_NAMES[0] == "TempF"
        assert FEATURE_NAMES[-1] == "ComfortShock7d"

    def test_array_matches_names(self, weather):
        fv = build_feature_vector(weather, on_date=WEDNESDAY)
        x = to_array(fv)
        assert x.shape == (21,)
        assert list(fv.as_dict()) == FEATURE_NAMES
        np.testing.assert_allclose(list(fv.as_dict().values()), x)
        assert x[FEATURE_INDEX["TempF"]] == 40.0
        assert x[FEATURE_INDEX["RH%"]] == 35.0

    def test_interaction_terms(self, weather):
        fv = build_feature_vector(weather, scenario=Scenario(promo_adj=0.4), on_date=SATURDAY)
        assert fv.vpd_times_hdd == pytest.approx(fv.vpd_kpa * fv.hdd)
        assert fv.weekend == 1.0
        assert fv.weekend_times_promo == pytest.approx(0.4)

    def test_weekday(self, weather):
        assert build_feature_vector(weather, on_date=WEDNESDAY).weekend == 0.0

    def test_dryness_bounds(self, weather):
        fv = build_feature_vector(weather, on_date=WEDNESDAY)
        assert 0.0 <= fv.dryness <= 1.0
        assert -1.0 <= fv.dryness_trend <= 1.0


# ── Scenario knobs ──────────────────────────────────────────────────────────


class TestScenario:
    def test_temperature_scaling(self, weather):
        fv = build_feature_vector(weather, scenario=Scenario(temp_adj=1.0), on_date=WEDNESDAY)
        assert fv.temp_f == pytest.approx(46.0)

    def test_precipitation_floor(self, weather):
        fv = build_feature_vector(weather, scenario=Scenario(precip_adj=-1.0), on_date=WEDNESDAY)
        assert fv.precip_in == 0.0

    def test_promo_strength_clamped(self, weather):
        fv = build_feature_vector(weather, scenario=Scenario(promo_adj=3.0), on_date=WEDNESDAY)
        assert fv.promo_strength == 1.0
        assert fv.promo_active == 1.0

    def test_explicit_flags_without_strength(self, weather):
        fv = build_feature_vector(
            weather, on_date=WEDNESDAY, promo_active=True, campaign_active=True
        )
        assert fv.promo_active == 1.0
        assert fv.promo_strength == 0.0
        assert fv.campaign_active == 1.0

    def test_campaign_strength(self, weather):
        fv = build_feature_vector(weather, scenario=Scenario(campaign_adj=0.3), on_date=WEDNESDAY)
        assert fv.campaign_active == 1.0
        assert fv.campaign_strength == pytest.approx(0.3)

    def test_ad_spend_scales_today_only(self, weather):
        fv = build_feature_vector(
            weather,
            scenario=Scenario(ad_spend_adj=1.0),
            spend_today_norm=0.5,
            spend_7d_norm=0.5,
            on_date=WEDNESDAY,
        )
        assert fv.spend_today_norm == pytest.approx(0.75)
        assert fv.spend_7d_norm == pytest.approx(0.5)

    def test_spend_clamped(self, weather):
        fv = build_feature_vector(
            weather, spend_today_norm=1.4, spend_7d_norm=-0.2, on_date=WEDNESDAY
        )
        assert fv.spend_today_norm == 1.0
        assert fv.spend_7d_norm == 0.0


# ── Fallbacks ───────────────────────────────────────────────────────────────


class TestFallbacks:
    def test_missing_weather_uses_defaults(self):
        fv = build_feature_vector(None, on_date=WEDNESDAY)
        assert (fv.temp_f, fv.rh_pct, fv.precip_in) == (65.0, 55.0, 0.0)
        assert "missing_temperature" in fv.fallbacks
        assert "missing_humidity" in fv.fallbacks
        assert "missing_precipitation" in fv.fallbacks
        assert not fv.fully_computed

    def test_partial_weather(self):
        fv = build_feature_vector({"temperature": 50}, on_date=WEDNESDAY)
        assert isinstance(fv.provenance["temperature"], Computed)
        assert is_defaulted(fv.provenance["humidity"])
        assert fv.rh_pct == 55.0

    @pytest.mark.parametrize("raw", ["hot", float("nan"), float("inf"), [1, 2]])
    def test_malformed_value(self, raw):
        fv = build_feature_vector({"temperature": raw, "humidity": 40}, on_date=WEDNESDAY)
        assert fv.temp_f == 65.0
        assert "malformed_temperature" in fv.fallbacks
        assert np.all(np.isfinite(fv.to_array()))

    def test_nested_current_block(self):
        fv = build_feature_vector(
            {"current": {"temperature": 50, "humidity": 40, "precipitation": 0.2}},
            on_date=WEDNESDAY,
        )
        assert (fv.temp_f, fv.rh_pct, fv.precip_in) == (50.0, 40.0, 0.2)

    def test_date_from_forecast_day(self):
        day = generate_forecast(state_by_code("NY").point, SATURDAY, 1)[0]
        fv = build_feature_vector(day)
        assert isinstance(fv.provenance["calendar"], Computed)
        assert fv.weekend == 1.0
        assert fv.temp_f == day.temp_f

    def test_missing_date_is_tagged(self, weather):
        fv = build_feature_vector(weather)
        reading = fv.provenance["calendar"]
        assert isinstance(reading, Defaulted)
        assert reading.reason == "date_not_supplied"

    def test_short_history_is_tagged(self, weather):
        fv = build_feature_vector(weather, on_date=WEDNESDAY, recent=[weather, weather])
        assert fv.dryness_momentum_7d == 0.0
        assert fv.comfort_shock_7d == 0.0
        assert fv.fallbacks.count("insufficient_history") == 2


# ── Trend features ──────────────────────────────────────────────────────────


class TestTrends:
    def test_warming_week(self, weather):
        recent = [
            {"temperature": 30, "humidity": 50},
            {"temperature": 38, "humidity": 50},
            {"temperature": 50, "humidity": 50},
        ]
        fv = build_feature_vector(weather, on_date=WEDNESDAY, recent=recent)
        assert fv.comfort_shock_7d == pytest.approx(1.0)
        expected = float(vpd(50, 50) - vpd(30, 50)) / 2.5
        assert fv.dryness_momentum_7d == pytest.approx(expected)
        assert fv.fully_computed

    def test_cooling_week_clamped(self, weather):
        recent = [{"temperature": 80, "humidity": 20}] + [{"temperature": 20, "humidity": 90}] * 3
        fv = build_feature_vector(weather, on_date=WEDNESDAY, recent=recent)
        assert fv.comfort_shock_7d == -1.0
        assert -1.0 <= fv.dryness_momentum_7d < 0.0

    def test_forecast_days_as_history(self):
        days = list(generate_forecast(state_by_code("MN").point, WEDNESDAY, 7))
        fv = build_feature_vector(days[-1], recent=days)
        assert fv.comfort_shock_7d == pytest.approx(
            max(-1.0, min(1.0, (days[-1].temp_f - days[0].temp_f) / 20))
        )

    @pytest.mark.parametrize(
        "bad_entry",
        [
            {"temperature": "n/a", "humidity": 30},
            {"temperature": 40, "humidity": float("nan")},
            {"humidity": 30},
            None,
        ],
    )
    def test_unreadable_history_is_tagged(self, weather, bad_entry):
        recent = [bad_entry, {"temperature": 40, "humidity": 30}, bad_entry]
        fv = build_feature_vector(weather, on_date=WEDNESDAY, recent=recent)
        assert fv.dryness_momentum_7d == 0.0
        assert fv.comfort_shock_7d == 0.0
        assert fv.provenance["dryness_momentum_7d"] == Defaulted(0.0, "malformed_history")
        assert fv.provenance["comfort_shock_7d"] == Defaulted(0.0, "malformed_history")
        assert np.all(np.isfinite(fv.to_array()))

    def test_only_end_points_are_read(self, weather):
        recent = [
            {"temperature": 30, "humidity": 50},
            {"temperature": "n/a", "humidity": 50},
            {"temperature": 50, "humidity": 50},
        ]
        fv = build_feature_vector(weather, on_date=WEDNESDAY, recent=recent)
        assert fv.comfort_shock_7d == pytest.approx(1.0)
        assert "malformed_history" not in fv.fallbacks
