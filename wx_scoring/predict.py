"""
Scoring orchestrator: features + network priors + per-cohort online learner.

``ScoringService`` owns its cohort registry, so a host that serves several
tenants creates one service per tenant or request. The module-level
``score_category``/``update_category`` functions share a lazily created
process-wide service, which is what the single-user demo uses.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

import numpy as np

from wx_config.brands import Brand
from wx_config.settings import ScoringConfig, load_platform_config
from wx_simulation.meteorology import climate_zone_for_lat_lng

from .features import FEATURE_NAMES, FeatureVector, Scenario, build_feature_vector
from .online import theta, ucb_score
from .priors import blend_prior_and_online, get_prior
from .registry import OnlineStateRegistry, cohort_key

logger = logging.getLogger(__name__)


@dataclass
class PredictInput:
    brand_key: str
    brand: Brand
    category: str
    weather: Any
    scenario: Optional[Scenario] = None
    spend_today_norm: Optional[float] = None
    spend_7d_norm: Optional[float] = None
    geo_key: Optional[str] = None
    on_date: Optional[date] = None
    recent: Optional[Sequence[Any]] = None
    promo_active: bool = False
    campaign_active: bool = False


@dataclass(eq=False)
class PredictionResult:
    features: FeatureVector
    x: np.ndarray
    theta: np.ndarray
    mean: float
    ucb: float
    confidence: float
    prior_pool: int
    variance: float
    cohort: str
    climate: str
    prior_only: bool


class ScoringService:
    """Scores categories for a brand and folds rewards back into cohort states."""

    def __init__(
        self,
        config: Optional[ScoringConfig] = None,
        registry: Optional[OnlineStateRegistry] = None,
    ):
        self.config = config or load_platform_config().scoring
        if registry is None:
            registry = OnlineStateRegistry(
                dim=len(FEATURE_NAMES),
                lam=self.config.ridge_lambda,
                max_entries=self.config.max_cohorts,
            )
        if registry.dim != len(FEATURE_NAMES):
            raise ValueError(
                f"Registry dimension {registry.dim} does not match {len(FEATURE_NAMES)} features"
            )
        self.registry = registry

    def build_features(self, inp: PredictInput) -> FeatureVector:
        default_spend = self.config.default_spend_norm
        return build_feature_vector(
            inp.weather,
            scenario=inp.scenario,
            spend_today_norm=default_spend if inp.spend_today_norm is None else inp.spend_today_norm,
            spend_7d_norm=default_spend if inp.spend_7d_norm is None else inp.spend_7d_norm,
            on_date=inp.on_date,
            promo_active=inp.promo_active,
            campaign_active=inp.campaign_active,
            recent=inp.recent,
        )

    def score_category(self, inp: PredictInput) -> PredictionResult:
        features = self.build_features(inp)
        x = features.to_array()
        key = cohort_key(inp.brand_key, inp.category, inp.geo_key)
        state = self.registry.get_or_create(key)

        climate = climate_zone_for_lat_lng(inp.brand.location.lat, inp.brand.location.lng)
        prior = get_prior(inp.category, climate)
        blend = blend_prior_and_online(prior, theta(state), self.config)

        mean = float(np.dot(blend.theta, x))
        online = ucb_score(state, x, alpha=self.config.score_alpha)
        # hedge between the prior-dominated mean and the learner's own bound
        hedge = self.config.ucb_hedge_weight
        ucb = hedge * online.ucb + (1 - hedge) * mean

        return PredictionResult(
            features=features,
            x=x,
            theta=blend.theta,
            mean=mean,
            ucb=ucb,
            confidence=blend.confidence,
            prior_pool=prior.pool_size,
            variance=online.variance,
            cohort=key,
            climate=climate,
            prior_only=blend.prior_only,
        )

    def pseudo_reward(self, features: FeatureVector) -> float:
        cfg = self.config
        return (
            cfg.reward_dryness_weight * features.dryness
            + cfg.reward_promo_weight * features.promo_strength
            + cfg.reward_spend_weight * features.spend_today_norm
        )

    def update_category(self, inp: PredictInput, reward: Optional[float] = None) -> float:
        """
        Fold an observed reward (or the pseudo-reward when none is given) into
        the cohort's online state.

        Returns:
            The reward that was applied
        """
        result = self.score_category(inp)
        applied = self.pseudo_reward(result.features) if reward is None else float(reward)
        self.registry.update(result.cohort, result.x, applied)
        logger.debug(f"Updated cohort {result.cohort} with reward {applied:.4f}")
        return applied


_default_service: Optional[ScoringService] = None
_default_lock = threading.Lock()


def default_service() -> ScoringService:
    global _default_service
    with _default_lock:
        if _default_service is None:
            _default_service = ScoringService()
            logger.info("Created process-wide scoring service")
        return _default_service


def reset_default_service() -> None:
    global _default_service
    with _default_lock:
        _default_service = None


def score_category(inp: PredictInput) -> PredictionResult:
    return default_service().score_category(inp)


def update_category(inp: PredictInput, reward: Optional[float] = None) -> float:
    return default_service().update_category(inp, reward)


__all__ = [
    "PredictInput",
    "PredictionResult",
    "ScoringService",
    "default_service",
    "reset_default_service",
    "score_category",
    "update_category",
]
