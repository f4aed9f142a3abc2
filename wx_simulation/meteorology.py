"""
Meteorology helpers.

Units default to imperial (degrees F, percent RH, inches). Functions accept
floats or numpy arrays.
"""

from __future__ import annotations

import numpy as np

# Monthly climatology baselines (index 0 = January)
MONTHLY_RH_BASELINE = np.array([65, 62, 60, 58, 60, 64, 66, 67, 66, 64, 66, 66], dtype=float)
MONTHLY_DEW_POINT_BASELINE_F = np.array(
    [35, 36, 38, 43, 51, 58, 62, 60, 55, 48, 41, 37], dtype=float
)

DEGREE_DAY_BASE_F = 65.0
VPD_CAP_KPA = 2.5


def f_to_c(temp_f):
    return (temp_f - 32.0) * 5.0 / 9.0


def c_to_f(temp_c):
    return temp_c * 9.0 / 5.0 + 32.0


def dew_point_f(temp_f, rh_pct):
    """Magnus approximation; RH is clamped into (0, 100]."""
    t_c = f_to_c(temp_f)
    rh = np.clip(rh_pct, 1e-6, 100.0)
    a, b = 17.27, 237.7
    alpha = (a * t_c) / (b + t_c) + np.log(rh / 100.0)
    return c_to_f((b * alpha) / (a - alpha))


def vpd(temp_f, rh_pct):
    """Vapor pressure deficit in kPa (Tetens saturation pressure), floored at 0."""
    t_c = f_to_c(temp_f)
    es = 0.6108 * np.exp((17.27 * t_c) / (t_c + 237.3))
    ea = (rh_pct / 100.0) * es
    return np.maximum(0.0, es - ea)


def hdd(temp_f, base_f: float = DEGREE_DAY_BASE_F):
    return np.maximum(0.0, base_f - temp_f)


def cdd(temp_f, base_f: float = DEGREE_DAY_BASE_F):
    return np.maximum(0.0, temp_f - base_f)


def rh_anomaly(rh_pct, month_idx: int):
    return rh_pct - MONTHLY_RH_BASELINE[month_idx % 12]


def dew_point_anomaly_f(dp_f, month_idx: int):
    return dp_f - MONTHLY_DEW_POINT_BASELINE_F[month_idx % 12]


def dryness_index(temp_f, rh_pct, month_idx: int):
    """
    Composite dryness score in [0, 1].

    Blends normalized VPD, inverted RH anomaly and inverted dew point anomaly
    against the monthly baselines with weights 0.5 / 0.3 / 0.2.
    """
    dp = dew_point_f(temp_f, rh_pct)
    v_norm = np.minimum(1.0, vpd(temp_f, rh_pct) / VPD_CAP_KPA)
    rh_norm = np.clip((-rh_anomaly(rh_pct, month_idx) + 20.0) / 40.0, 0.0, 1.0)
    dp_norm = np.clip((-dew_point_anomaly_f(dp, month_idx) + 20.0) / 40.0, 0.0, 1.0)
    return np.clip(0.5 * v_norm + 0.3 * rh_norm + 0.2 * dp_norm, 0.0, 1.0)


def climate_zone_for_lat_lng(lat: float, lng: float) -> str:
    """Very rough Koppen-like zone for a point."""
    if lat < -20 or lat > 20:
        if lat > 40:
            return "humid_continental"
        if lat > 30:
            return "humid_subtropical"
        return "marine_west_coast"
    if abs(lng) > 110:
        return "semi_arid"
    return "tropical"


__all__ = [
    "DEGREE_DAY_BASE_F",
    "MONTHLY_DEW_POINT_BASELINE_F",
    "MONTHLY_RH_BASELINE",
    "c_to_f",
    "cdd",
    "climate_zone_for_lat_lng",
    "dew_point_anomaly_f",
    "dew_point_f",
    "dryness_index",
    "f_to_c",
    "hdd",
    "rh_anomaly",
    "vpd",
]
