"""
Feature builder: weather + scenario knobs -> fixed-order numeric vector.

``FEATURE_NAMES`` and ``FeatureVector.to_array`` share one canonical order.
Learned coefficient vectors and explainability panels index into it
positionally, so the order must never change.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from wx_simulation.meteorology import (
    dew_point_anomaly_f,
    dew_point_f,
    dryness_index,
    hdd,
    rh_anomaly,
    vpd,
)

from .results import Computed, Defaulted, Reading, is_defaulted

logger = logging.getLogger(__name__)

FEATURE_NAMES = [
    "TempF",
    "RH%",
    "PrecipIn",
    "DewPointF",
    "VPD(kPa)",
    "HDD",
    "RH_Anom",
    "DP_AnomF",
    "Dryness01",
    "DrynessTrend",
    "Weekend",
    "PromoActive",
    "PromoStrength",
    "CampaignActive",
    "CampaignStrength",
    "SpendToday",
    "Spend7d",
    "VPDxHDD",
    "WeekendxPromo",
    "DrynessMomentum7d",
    "ComfortShock7d",
]
FEATURE_INDEX = {name: i for i, name in enumerate(FEATURE_NAMES)}

_FIELD_ORDER = (
    "temp_f",
    "rh_pct",
    "precip_in",
    "dew_point_f",
    "vpd_kpa",
    "hdd",
    "rh_anom",
    "dp_anom_f",
    "dryness",
    "dryness_trend",
    "weekend",
    "promo_active",
    "promo_strength",
    "campaign_active",
    "campaign_strength",
    "spend_today_norm",
    "spend_7d_norm",
    "vpd_times_hdd",
    "weekend_times_promo",
    "dryness_momentum_7d",
    "comfort_shock_7d",
)

DEFAULT_TEMP_F = 65.0
DEFAULT_RH_PCT = 55.0
DEFAULT_PRECIP_IN = 0.0
MIN_HISTORY = 3

# (mapping key, attribute name, default)
_WEATHER_FIELDS = (
    ("temperature", "temp_f", DEFAULT_TEMP_F),
    ("humidity", "rh_pct", DEFAULT_RH_PCT),
    ("precipitation", "precip_in", DEFAULT_PRECIP_IN),
)


@dataclass
class Scenario:
    temp_adj: float = 0.0
    precip_adj: float = 0.0
    promo_adj: float = 0.0
    campaign_adj: float = 0.0
    ad_spend_adj: float = 0.0


@dataclass
class FeatureVector:
    temp_f: float
    rh_pct: float
    precip_in: float
    dew_point_f: float
    vpd_kpa: float
    hdd: float
    rh_anom: float
    dp_anom_f: float
    dryness: float
    dryness_trend: float
    weekend: float
    promo_active: float
    promo_strength: float
    campaign_active: float
    campaign_strength: float
    spend_today_norm: float
    spend_7d_norm: float
    vpd_times_hdd: float
    weekend_times_promo: float
    dryness_momentum_7d: float
    comfort_shock_7d: float
    provenance: Dict[str, Reading] = field(default_factory=dict, compare=False, repr=False)

    def to_array(self) -> np.ndarray:
        return np.array([getattr(self, name) for name in _FIELD_ORDER], dtype=float)

    def as_dict(self) -> Dict[str, float]:
        return {name: float(getattr(self, attr)) for name, attr in zip(FEATURE_NAMES, _FIELD_ORDER)}

    @property
    def fallbacks(self) -> List[str]:
        """Reasons for every input that fell back to a constant."""
        return [r.reason for r in self.provenance.values() if isinstance(r, Defaulted)]

    @property
    def fully_computed(self) -> bool:
        return not self.fallbacks


def to_array(features: FeatureVector) -> np.ndarray:
    return features.to_array()


def _lookup(weather: Any, key: str, attr: str) -> Any:
    if weather is None:
        return None
    if isinstance(weather, Mapping):
        source = weather.get("current", weather)
        if not isinstance(source, Mapping):
            return None
        return source[key] if key in source else source.get(attr)
    return getattr(weather, attr, None)


def read_weather_field(weather: Any, key: str, attr: str, default: float) -> Reading:
    raw = _lookup(weather, key, attr)
    if raw is None:
        return Defaulted(default, f"missing_{key}")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning(f"Malformed {key} value {raw!r}; using {default}")
        return Defaulted(default, f"malformed_{key}")
    if not math.isfinite(value):
        logger.warning(f"Non-finite {key} value {raw!r}; using {default}")
        return Defaulted(default, f"malformed_{key}")
    return Computed(value)


def _resolve_date(weather: Any, on_date: Optional[date]) -> Tuple[date, Reading]:
    if on_date is None:
        candidate = _lookup(weather, "date", "date")
        if isinstance(candidate, (date, datetime)):
            on_date = candidate
    if isinstance(on_date, datetime):
        on_date = on_date.date()
    if on_date is None:
        today = date.today()
        return today, Defaulted(float(today.month - 1), "date_not_supplied")
    return on_date, Computed(float(on_date.month - 1))


def _recent_pair(entry: Any) -> Tuple[Reading, Reading]:
    return (
        read_weather_field(entry, "temperature", "temp_f", DEFAULT_TEMP_F),
        read_weather_field(entry, "humidity", "rh_pct", DEFAULT_RH_PCT),
    )


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def build_feature_vector(
    weather: Any,
    scenario: Optional[Scenario] = None,
    spend_today_norm: float = 0.5,
    spend_7d_norm: float = 0.5,
    on_date: Optional[date] = None,
    promo_active: bool = False,
    campaign_active: bool = False,
    recent: Optional[Sequence[Any]] = None,
) -> FeatureVector:
    """
    Build the 21-dimension feature vector for one scoring request.

    Args:
        weather: DailyForecast, or a mapping with temperature/humidity/precipitation
            keys (optionally nested under "current")
        scenario: What-if adjustments applied before deriving features
        spend_today_norm: Normalized spend today, 0..1
        spend_7d_norm: Normalized trailing 7-day spend, 0..1
        on_date: Calendar date; defaults to the weather's date, then today
        promo_active: Explicit promotion flag
        campaign_active: Explicit paid-campaign flag
        recent: Recent daily weather, oldest first, for the 7-day trend features

    Returns:
        FeatureVector with per-input provenance
    """
    provenance: Dict[str, Reading] = {}
    values = {}
    for key, attr, default in _WEATHER_FIELDS:
        reading = read_weather_field(weather, key, attr, default)
        provenance[key] = reading
        values[attr] = reading.value

    on_date, calendar = _resolve_date(weather, on_date)
    provenance["calendar"] = calendar
    month = on_date.month - 1
    is_weekend = 1.0 if on_date.weekday() >= 5 else 0.0

    temp_f = values["temp_f"]
    rh_pct = values["rh_pct"]
    precip_in = values["precip_in"]
    if scenario is not None:
        temp_f = temp_f * (1 + scenario.temp_adj * 0.15)
        precip_in = max(0.0, precip_in + scenario.precip_adj * 0.5)

    dp_f = float(dew_point_f(temp_f, rh_pct))
    v = float(vpd(temp_f, rh_pct))
    h = float(hdd(temp_f))
    dry = float(dryness_index(temp_f, rh_pct, month))
    # finite-difference proxy against a slightly colder day
    dry_prev = float(dryness_index(temp_f - 2, rh_pct, month))
    dry_trend = _clamp(dry - dry_prev, -1.0, 1.0)

    promo_strength = _clamp(scenario.promo_adj if scenario else 0.0, 0.0, 1.0)
    campaign_strength = _clamp(scenario.campaign_adj if scenario else 0.0, 0.0, 1.0)
    ad_spend_adj = scenario.ad_spend_adj if scenario else 0.0

    if recent is not None and len(recent) >= MIN_HISTORY:
        ends = _recent_pair(recent[0]) + _recent_pair(recent[-1])
        if any(is_defaulted(r) for r in ends):
            momentum_reading: Reading = Defaulted(0.0, "malformed_history")
            shock_reading: Reading = Defaulted(0.0, "malformed_history")
        else:
            first_t, first_rh, last_t, last_rh = (r.value for r in ends)
            momentum = float(vpd(last_t, last_rh) - vpd(first_t, first_rh))
            momentum_reading = Computed(_clamp(momentum / 2.5, -1.0, 1.0))
            shock_reading = Computed(_clamp((last_t - first_t) / 20.0, -1.0, 1.0))
    else:
        momentum_reading = Defaulted(0.0, "insufficient_history")
        shock_reading = Defaulted(0.0, "insufficient_history")
    provenance["dryness_momentum_7d"] = momentum_reading
    provenance["comfort_shock_7d"] = shock_reading

    features = FeatureVector(
        temp_f=temp_f,
        rh_pct=rh_pct,
        precip_in=precip_in,
        dew_point_f=dp_f,
        vpd_kpa=v,
        hdd=h,
        rh_anom=float(rh_anomaly(rh_pct, month)),
        dp_anom_f=float(dew_point_anomaly_f(dp_f, month)),
        dryness=dry,
        dryness_trend=dry_trend,
        weekend=is_weekend,
        promo_active=1.0 if (promo_active or promo_strength > 0) else 0.0,
        promo_strength=promo_strength,
        campaign_active=1.0 if (campaign_active or campaign_strength > 0) else 0.0,
        campaign_strength=campaign_strength,
        spend_today_norm=_clamp(spend_today_norm * (1 + ad_spend_adj * 0.5), 0.0, 1.0),
        spend_7d_norm=_clamp(spend_7d_norm, 0.0, 1.0),
        vpd_times_hdd=v * h,
        weekend_times_promo=is_weekend * promo_strength,
        dryness_momentum_7d=momentum_reading.value,
        comfort_shock_7d=shock_reading.value,
        provenance=provenance,
    )
    if features.fallbacks:
        logger.debug(f"Feature vector built with fallbacks: {features.fallbacks}")
    return features


__all__ = [
    "FEATURE_INDEX",
    "FEATURE_NAMES",
    "FeatureVector",
    "Scenario",
    "build_feature_vector",
    "read_weather_field",
    "to_array",
]
