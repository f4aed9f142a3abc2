"""
Hand-authored "network priors" per category profile and climate.

A prior's pool size simulates how many anonymous observations back it;
priors with a thin pool are not blended with online estimates.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from wx_config.settings import ScoringConfig

from .features import FEATURE_INDEX, FEATURE_NAMES

logger = logging.getLogger(__name__)


class CategoryProfile(str, Enum):
    HUMIDITY = "humidity"
    WARM_WEATHER = "warm_weather"
    PRECIPITATION = "precipitation"
    NEUTRAL = "neutral"


# Checked in order; the first tag contained in the category name wins.
CATEGORY_TAGS: Tuple[Tuple[str, CategoryProfile], ...] = (
    ("humidifier", CategoryProfile.HUMIDITY),
    ("indoor", CategoryProfile.HUMIDITY),
    ("winter", CategoryProfile.HUMIDITY),
    ("summer", CategoryProfile.WARM_WEATHER),
    ("outdoor", CategoryProfile.WARM_WEATHER),
    ("rain", CategoryProfile.PRECIPITATION),
)

# profile -> (coefficients, spread, pool size)
PROFILE_PRIORS: Dict[CategoryProfile, Tuple[Dict[str, float], float, int]] = {
    CategoryProfile.HUMIDITY: (
        {
            "VPD(kPa)": 0.35,
            "DP_AnomF": -0.1,  # lower dew point -> stronger signal
            "RH_Anom": -0.12,  # lower RH -> stronger signal
            "HDD": 0.08,
            "Dryness01": 0.25,
            "DrynessTrend": 0.12,
            "VPDxHDD": 0.15,
        },
        0.45,
        7,
    ),
    CategoryProfile.WARM_WEATHER: (
        {"TempF": 0.18, "VPD(kPa)": 0.12, "Weekend": 0.06, "WeekendxPromo": 0.08},
        0.55,
        6,
    ),
    CategoryProfile.PRECIPITATION: ({"PrecipIn": 0.25, "RH_Anom": 0.08}, 0.5, 5),
    CategoryProfile.NEUTRAL: ({}, 0.6, 3),
}

_COLD_HUMID_NUDGE = {"HDD": 0.05, "TempF": 0.04}
_WARM_HUMID_NUDGE = {"RH_Anom": -0.05, "VPD(kPa)": 0.05}

CLIMATE_NUDGES: Dict[str, Dict[str, float]] = {
    "humid_continental": _COLD_HUMID_NUDGE,
    "marine_west": _COLD_HUMID_NUDGE,
    "marine_west_coast": _COLD_HUMID_NUDGE,
    "humid_subtropical": _WARM_HUMID_NUDGE,
    "tropical": _WARM_HUMID_NUDGE,
}


@dataclass(frozen=True, eq=False)
class Prior:
    mu: np.ndarray
    sigma: float
    pool_size: int
    profile: CategoryProfile


@dataclass(frozen=True, eq=False)
class Blend:
    theta: np.ndarray
    confidence: float
    prior_only: bool


def profile_for_category(category: str) -> CategoryProfile:
    name = category.lower()
    for tag, profile in CATEGORY_TAGS:
        if tag in name:
            return profile
    return CategoryProfile.NEUTRAL


def get_prior(category: str, climate: str) -> Prior:
    profile = profile_for_category(category)
    coefficients, sigma, pool = PROFILE_PRIORS[profile]

    mu = np.zeros(len(FEATURE_NAMES))
    for name, value in coefficients.items():
        mu[FEATURE_INDEX[name]] = value
    for name, value in CLIMATE_NUDGES.get(climate, {}).items():
        mu[FEATURE_INDEX[name]] += value

    logger.debug(f"Prior for '{category}' in {climate}: profile={profile.value}, pool={pool}")
    return Prior(mu=mu, sigma=sigma, pool_size=pool, profile=profile)


def blend_prior_and_online(
    prior: Prior,
    theta_online: Optional[np.ndarray],
    config: Optional[ScoringConfig] = None,
) -> Blend:
    """
    Blend prior coefficients with the online estimate.

    With no online estimate, or a prior pool below the anonymity floor, the
    prior is used alone at reduced confidence.
    """
    config = config or ScoringConfig()
    if theta_online is None or prior.pool_size < config.min_prior_pool:
        return Blend(theta=prior.mu.copy(), confidence=config.prior_only_confidence, prior_only=True)
    w = config.prior_weight
    theta = w * prior.mu + (1 - w) * np.asarray(theta_online, dtype=float)
    return Blend(theta=theta, confidence=config.blended_confidence, prior_only=False)


__all__ = [
    "Blend",
    "CATEGORY_TAGS",
    "CLIMATE_NUDGES",
    "CategoryProfile",
    "PROFILE_PRIORS",
    "Prior",
    "blend_prior_and_online",
    "get_prior",
    "profile_for_category",
]
