"""
Scoring Module

Feature construction, network priors and the per-cohort contextual bandit
that turn simulated weather into category scores.
"""

from .features import FEATURE_NAMES, FeatureVector, Scenario, build_feature_vector, to_array
from .online import OnlineState, init_online, theta, ucb_score, update_online
from .predict import (
    PredictInput,
    PredictionResult,
    ScoringService,
    reset_default_service,
    score_category,
    update_category,
)
from .priors import CategoryProfile, Prior, blend_prior_and_online, get_prior
from .regime import detect_regime, similar_event_count
from .registry import OnlineStateRegistry, cohort_key
from .results import Computed, Defaulted

__all__ = [
    "CategoryProfile",
    "Computed",
    "Defaulted",
    "FEATURE_NAMES",
    "FeatureVector",
    "OnlineState",
    "OnlineStateRegistry",
    "PredictInput",
    "PredictionResult",
    "Prior",
    "Scenario",
    "ScoringService",
    "blend_prior_and_online",
    "build_feature_vector",
    "cohort_key",
    "detect_regime",
    "get_prior",
    "init_online",
    "reset_default_service",
    "score_category",
    "similar_event_count",
    "theta",
    "to_array",
    "ucb_score",
    "update_category",
    "update_online",
]
