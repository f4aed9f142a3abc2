"""
Budget recommendations per brand category, and the automation gate that
applies confident ones.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

import numpy as np

from wx_config.brands import Brand
from wx_config.settings import PlatformConfig, load_platform_config
from wx_scoring.features import Scenario
from wx_scoring.predict import PredictInput, PredictionResult, ScoringService, default_service
from wx_scoring.regime import detect_regime, similar_event_count
from wx_simulation.rng import stream_for

from .audit import AuditEntry, AuditLog
from .safety import SafetyState, SafetyStatus
from .staging import stage_plan

logger = logging.getLogger(__name__)


@dataclass
class Recommendation:
    category: str
    products: List[str]
    action: str
    budget_multiplier: float
    expected_lift: str
    confidence: float
    reasoning: str
    regime: str
    analog_count: int
    season_group: str
    staged_steps: List[float]
    mean_score: float
    ucb_score: float
    variance: float
    prior_pool: int
    features: List[float] = field(default_factory=list)
    theta: List[float] = field(default_factory=list)


def season_group(category: str) -> str:
    name = category.lower()
    if "winter" in name:
        return "winter"
    if "summer" in name:
        return "summer"
    return "neutral"


def _is_relevant(category: str, result: PredictionResult, config: PlatformConfig) -> bool:
    rec = config.recommendations
    name = category.lower()
    if "winter" in name:
        return result.features.temp_f < rec.winter_max_temp_f
    if "summer" in name:
        return result.features.temp_f > rec.summer_min_temp_f
    if "rain" in name:
        return result.features.precip_in > rec.rain_min_precip_in
    return True


def _multiplier(result: PredictionResult, relevant: bool, config: PlatformConfig) -> float:
    rec = config.recommendations
    base = 1 + max(0.0, result.mean) * 0.2
    ucb_adj = 1 + max(0.0, result.ucb) * 0.15
    multiplier = min(rec.max_multiplier, max(1.0, 0.6 * base + 0.4 * ucb_adj))
    if not relevant:
        multiplier = max(1.0, multiplier - rec.irrelevance_penalty)
    return multiplier


def _reasoning(result: PredictionResult, regime: str, analogs: int) -> str:
    fx = result.features
    parts = []
    if fx.dryness > 0.6:
        parts.append("Indoor air is unusually dry")
    if fx.hdd > 5:
        parts.append("Heating demand is up (HDD high)")
    if fx.promo_strength > 0.2:
        parts.append("Promotions active")
    if fx.campaign_strength > 0.2:
        parts.append("Paid channels pushed")
    if not parts:
        parts.append("Weather favorable vs baseline")
    if regime != "normal":
        parts.append(f"{regime.replace('_', ' ').title()} regime ({analogs} similar events)")
    return " · ".join(parts)


def _select(scored: List[Recommendation], top_n: int) -> List[Recommendation]:
    """Best category plus one whose season group does not conflict with it."""
    ranked = sorted(scored, key=lambda r: r.budget_multiplier, reverse=True)
    if not ranked:
        return []
    picks = [ranked[0]]
    lead = ranked[0].season_group
    for rec in ranked[1:]:
        if lead == "neutral" or rec.season_group in ("neutral", lead):
            picks.append(rec)
            break
    if len(picks) == 1 and len(ranked) > 1:
        fallback = next((r for r in ranked[1:] if r.season_group == "neutral"), ranked[1])
        picks.append(fallback)
    return picks[:top_n]


def build_recommendations(
    brand_key: str,
    brand: Brand,
    weather: Any,
    scenario: Optional[Scenario] = None,
    geo_key: Optional[str] = None,
    service: Optional[ScoringService] = None,
    on_date: Optional[date] = None,
    config: Optional[PlatformConfig] = None,
    recent: Optional[Sequence[Any]] = None,
) -> List[Recommendation]:
    """
    Score every category of a brand and pick the recommendations to show.

    Args:
        brand_key: Catalog key of the brand
        brand: Brand definition
        weather: Today's weather (DailyForecast or mapping)
        scenario: What-if adjustments
        geo_key: Geographic cohort, e.g. "NY|NY-M1|all"
        service: Scoring service; defaults to the process-wide one
        on_date: Calendar date; defaults to the weather's date
        config: Platform config; defaults to the loaded platform.yaml
        recent: Recent daily weather for the trend features

    Returns:
        At most ``top_n`` recommendations, best first
    """
    config = config or load_platform_config()
    service = service or default_service()
    day = on_date or getattr(weather, "date", None)

    scored: List[Recommendation] = []
    for category in brand.categories:
        inp = PredictInput(
            brand_key=brand_key,
            brand=brand,
            category=category,
            weather=weather,
            scenario=scenario,
            geo_key=geo_key,
            on_date=on_date,
            recent=recent,
        )
        result = service.score_category(inp)
        relevant = _is_relevant(category, result, config)
        multiplier = _multiplier(result, relevant, config)

        u = stream_for(f"confidence:{brand_key}:{category}:{day}:{geo_key}")()
        confidence = min(0.99, max(0.55, result.confidence - 0.05 + u * 0.1))

        fx = result.features
        regime = detect_regime(fx.temp_f, fx.rh_pct, fx.precip_in)
        analogs = similar_event_count(regime, result.climate, f"{brand_key}:{category}:{day}")
        plan = stage_plan(multiplier, start=1.0, config=config.staging)
        pct = math.floor((multiplier - 1) * 100 + 0.5)
        lift = math.floor((multiplier - 1) * 40 + 0.5)

        scored.append(
            Recommendation(
                category=category,
                products=list(brand.products_for(category)),
                action=f"Increase {category} by {pct}% · {plan.narrative}",
                budget_multiplier=round(multiplier, 2),
                expected_lift=f"+{lift}%",
                confidence=confidence,
                reasoning=_reasoning(result, regime, analogs),
                regime=regime,
                analog_count=analogs,
                season_group=season_group(category),
                staged_steps=plan.rounded_steps,
                mean_score=round(result.mean, 2),
                ucb_score=round(result.ucb, 2),
                variance=result.variance,
                prior_pool=result.prior_pool,
                features=[round(float(v), 2) for v in result.x],
                theta=[float(v) for v in np.asarray(result.theta)],
            )
        )

    picks = _select(scored, config.recommendations.top_n)
    logger.debug(f"Recommendations for {brand_key}: {[r.category for r in picks]}")
    return picks


class AutomationGate:
    """Auto-applies confident recommendations unless the safety gate halts."""

    def __init__(
        self,
        service: ScoringService,
        audit_log: Optional[AuditLog] = None,
        config: Optional[PlatformConfig] = None,
    ):
        self.config = config or load_platform_config()
        self.service = service
        self.audit_log = audit_log or AuditLog(self.config.automation.audit_capacity)

    def apply(
        self,
        brand_key: str,
        brand: Brand,
        weather: Any,
        recommendations: Sequence[Recommendation],
        safety: SafetyState,
        scenario: Optional[Scenario] = None,
        geo_key: Optional[str] = None,
        on_date: Optional[date] = None,
        recent: Optional[Sequence[Any]] = None,
        now: Optional[datetime] = None,
    ) -> List[Recommendation]:
        """
        Apply every recommendation at or above the confidence threshold.

        Applied multipliers are damped toward 1.0 by the safety damping, each
        application is audited, and the cohort learns from its pseudo-reward.

        Returns:
            The recommendations that were applied
        """
        now = now or datetime.now()
        if safety.status == SafetyStatus.HALT:
            for rec in recommendations:
                self.audit_log.add(
                    AuditEntry(
                        time=now,
                        category=rec.category,
                        action="Automation halted",
                        multiplier=1.0,
                        confidence=rec.confidence,
                    )
                )
            logger.warning(f"Automation halted for {brand_key}: {safety.reasons}")
            return []

        threshold = self.config.automation.confidence_threshold
        applied = []
        for rec in recommendations:
            if rec.confidence < threshold:
                continue
            multiplier = 1 + (rec.budget_multiplier - 1) * safety.damping
            self.audit_log.add(
                AuditEntry(
                    time=now,
                    category=rec.category,
                    action="Auto-apply staged change",
                    multiplier=round(multiplier, 2),
                    confidence=rec.confidence,
                    staged=tuple(rec.staged_steps),
                )
            )
            self.service.update_category(
                PredictInput(
                    brand_key=brand_key,
                    brand=brand,
                    category=rec.category,
                    weather=weather,
                    scenario=scenario,
                    geo_key=geo_key,
                    on_date=on_date,
                    recent=recent,
                )
            )
            applied.append(rec)

        if applied:
            logger.info(f"Auto-applied {len(applied)} recommendation(s) for {brand_key}")
        return applied


__all__ = ["AutomationGate", "Recommendation", "build_recommendations", "season_group"]
