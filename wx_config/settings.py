"""
Typed platform configuration parsed from ``platform.yaml``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from functools import lru_cache
from typing import Any, Mapping, Optional, Type, TypeVar

from .loader import PLATFORM_CONFIG_ENV, read_yaml, resolve_config_path

logger = logging.getLogger(__name__)

S = TypeVar("S")


@dataclass
class ScoringConfig:
    ridge_lambda: float = 5.0
    score_alpha: float = 1.1
    min_prior_pool: int = 5
    prior_weight: float = 0.5
    prior_only_confidence: float = 0.6
    blended_confidence: float = 0.75
    ucb_hedge_weight: float = 0.5
    default_spend_norm: float = 0.5
    reward_dryness_weight: float = 0.6
    reward_promo_weight: float = 0.3
    reward_spend_weight: float = 0.1
    max_cohorts: Optional[int] = None


@dataclass
class StagingConfig:
    horizon: int = 3
    max_daily: float = 0.15
    floor: float = 0.5
    ceiling: float = 3.0


@dataclass
class SafetyConfig:
    min_days: int = 3
    window_days: int = 3
    gust_limit_mph: float = 26.0
    gust_damping: float = 0.8
    pop_limit: float = 0.6
    pop_damping: float = 0.85
    temp_range_limit_f: float = 20.0
    temp_range_damping: float = 0.9
    gust_norm_mph: float = 35.0
    temp_range_norm_f: float = 25.0
    halt_entropy: float = 0.85
    insufficient_damping: float = 0.8


@dataclass
class AutomationConfig:
    confidence_threshold: float = 0.82
    audit_capacity: int = 100


@dataclass
class RecommendationConfig:
    top_n: int = 2
    max_multiplier: float = 2.0
    irrelevance_penalty: float = 0.2
    winter_max_temp_f: float = 55.0
    summer_min_temp_f: float = 65.0
    rain_min_precip_in: float = 0.05


@dataclass
class PlatformConfig:
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    staging: StagingConfig = field(default_factory=StagingConfig)
    safety: SafetyConfig = field(default_factory=SafetyConfig)
    automation: AutomationConfig = field(default_factory=AutomationConfig)
    recommendations: RecommendationConfig = field(default_factory=RecommendationConfig)


def _parse_section(cls: Type[S], raw: Optional[Mapping[str, Any]]) -> S:
    raw = raw or {}
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ValueError(f"Unknown keys for {cls.__name__}: {unknown}")
    return cls(**raw)


def parse_platform_config(raw: Mapping[str, Any]) -> PlatformConfig:
    sections = {f.name for f in fields(PlatformConfig)}
    unknown = sorted(set(raw) - sections)
    if unknown:
        raise ValueError(f"Unknown config sections: {unknown}")
    return PlatformConfig(
        scoring=_parse_section(ScoringConfig, raw.get("scoring")),
        staging=_parse_section(StagingConfig, raw.get("staging")),
        safety=_parse_section(SafetyConfig, raw.get("safety")),
        automation=_parse_section(AutomationConfig, raw.get("automation")),
        recommendations=_parse_section(RecommendationConfig, raw.get("recommendations")),
    )


@lru_cache
def load_platform_config(path: Optional[str] = None) -> PlatformConfig:
    """
    Load platform tunables from YAML.

    Args:
        path: Optional explicit file; falls back to $WX_PLATFORM_CONFIG and
            then the packaged platform.yaml

    Returns:
        Parsed PlatformConfig
    """
    config_path = resolve_config_path(path, PLATFORM_CONFIG_ENV, "platform.yaml")
    config = parse_platform_config(read_yaml(config_path))
    logger.info(f"Loaded platform config from {config_path}")
    return config


__all__ = [
    "AutomationConfig",
    "PlatformConfig",
    "RecommendationConfig",
    "SafetyConfig",
    "ScoringConfig",
    "StagingConfig",
    "load_platform_config",
    "parse_platform_config",
]
