"""
Replay scaffolding for multi-day pipeline simulations.

This module advances a simulated date day by day, regenerates forecasts,
scores and recommends, applies automation, lets every cohort learn, and
produces per-day frames ready for inspection or export.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd
import yaml
from sklearn.linear_model import Ridge

from wx_config.brands import get_brand
from wx_config.settings import PlatformConfig, load_platform_config
from wx_scoring.features import Scenario
from wx_scoring.online import theta
from wx_scoring.predict import PredictInput, ScoringService
from wx_scoring.registry import cohort_key
from wx_simulation.export import check_format, write_frame
from wx_simulation.forecast import generate_forecast
from wx_simulation.geo import state_by_code

from .audit import AuditLog
from .recommendations import AutomationGate, build_recommendations
from .safety import compute_safety

logger = logging.getLogger(__name__)


@dataclass
class HorizonConfig:
    days: int
    forecast_days: int = 7
    history_days: int = 7


@dataclass
class ReplayConfig:
    horizon: HorizonConfig
    assignments: List[Tuple[str, str]]
    start_date: date
    scenario: Scenario = field(default_factory=Scenario)
    automation_enabled: bool = True
    output_dir: Path = Path("outputs")
    output_format: str = "csv"


def _replay_assignment(
    brand_key: str,
    state_code: str,
    config: ReplayConfig,
    service: ScoringService,
    platform: PlatformConfig,
) -> pd.DataFrame:
    brand = get_brand(brand_key)
    state = state_by_code(state_code)
    geo_key = f"{state.code}|all|all"
    gate = AutomationGate(service, AuditLog(platform.automation.audit_capacity), platform)

    history = []
    rows = []
    samples: Dict[str, List[Tuple[np.ndarray, float]]] = {cat: [] for cat in brand.categories}

    for offset in range(config.horizon.days):
        day = config.start_date + timedelta(days=offset)
        forecast = generate_forecast(state.point, day, config.horizon.forecast_days)
        today = forecast[0]
        n_recent = config.horizon.history_days
        recent = (history + [today])[-n_recent:] if n_recent > 0 else []
        safety = compute_safety(forecast, platform.safety)

        recommendations = build_recommendations(
            brand_key,
            brand,
            today,
            scenario=config.scenario,
            geo_key=geo_key,
            service=service,
            config=platform,
            recent=recent,
        )
        multipliers = {rec.category: rec.budget_multiplier for rec in recommendations}
        applied = set()
        if config.automation_enabled:
            applied = {
                rec.category
                for rec in gate.apply(
                    brand_key,
                    brand,
                    today,
                    recommendations,
                    safety,
                    scenario=config.scenario,
                    geo_key=geo_key,
                    recent=recent,
                )
            }

        for category in brand.categories:
            inp = PredictInput(
                brand_key=brand_key,
                brand=brand,
                category=category,
                weather=today,
                scenario=config.scenario,
                geo_key=geo_key,
                recent=recent,
            )
            result = service.score_category(inp)
            reward = service.pseudo_reward(result.features)
            if category not in applied:
                # simulated manual "Apply"; every cohort learns once per day
                service.update_category(inp, reward)
            samples[category].append((result.x, reward))
            rows.append(
                {
                    "date": pd.Timestamp(day),
                    "brand": brand_key,
                    "state": state.code,
                    "category": category,
                    "temp_f": today.temp_f,
                    "rh_pct": today.rh_pct,
                    "precip_in": today.precip_in,
                    "dryness": result.features.dryness,
                    "mean": result.mean,
                    "ucb": result.ucb,
                    "confidence": result.confidence,
                    "prior_only": result.prior_only,
                    "recommended": category in multipliers,
                    "multiplier": multipliers.get(category, 1.0),
                    "safety_status": safety.status.value,
                    "damping": safety.damping,
                    "reward": reward,
                    "applied": category in applied,
                }
            )
        history.append(today)

    df = pd.DataFrame(rows)
    gaps = _offline_gaps(brand_key, geo_key, samples, service)
    df["offline_gap"] = df["category"].map(gaps)
    sq_err = (df["mean"] - df["reward"]) ** 2
    rmse = np.sqrt(sq_err.groupby(df["category"]).mean())
    df["rmse_reward"] = df["category"].map(rmse)
    df["audit_entries"] = len(gate.audit_log)
    return df


def _offline_gaps(
    brand_key: str,
    geo_key: str,
    samples: Mapping[str, List[Tuple[np.ndarray, float]]],
    service: ScoringService,
) -> Dict[str, float]:
    """Max |theta_online - theta_ridge| per category, refitting the batch ridge offline."""
    gaps: Dict[str, float] = {}
    for category, pairs in samples.items():
        state = service.registry.get(cohort_key(brand_key, category, geo_key))
        if state is None or not pairs:
            gaps[category] = float("nan")
            continue
        X = np.vstack([x for x, _ in pairs])
        y = np.array([r for _, r in pairs])
        model = Ridge(alpha=state.lam, fit_intercept=False)
        model.fit(X, y)
        gaps[category] = float(np.max(np.abs(theta(state) - model.coef_)))
    return gaps


def run_replay(
    config: ReplayConfig,
    service_factory: Optional[Callable[[], ScoringService]] = None,
    platform: Optional[PlatformConfig] = None,
) -> Dict[Tuple[str, str], pd.DataFrame]:
    platform = platform or load_platform_config()
    outputs: Dict[Tuple[str, str], pd.DataFrame] = {}
    for brand_key, state_code in config.assignments:
        service = service_factory() if service_factory else ScoringService(platform.scoring)
        outputs[(brand_key, state_code)] = _replay_assignment(
            brand_key, state_code, config, service, platform
        )
        logger.info(f"Replayed {config.horizon.days} days for {brand_key} in {state_code}")
    return outputs


def save_replay_outputs(
    outputs: Mapping[Tuple[str, str], pd.DataFrame],
    output_dir: Path,
    format: str = "csv",
) -> List[Path]:
    check_format(format)
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for (brand, state), df in outputs.items():
        written.append(write_frame(df, output_dir / f"{brand}_{state}.{format}", format))
    logger.info(f"Wrote {len(written)} replay file(s) to {output_dir}")
    return written


def _parse_scenario(raw: Optional[Mapping[str, float]]) -> Scenario:
    raw = raw or {}
    return Scenario(
        temp_adj=raw.get("temp_adj", 0.0),
        precip_adj=raw.get("precip_adj", 0.0),
        promo_adj=raw.get("promo_adj", 0.0),
        campaign_adj=raw.get("campaign_adj", 0.0),
        ad_spend_adj=raw.get("ad_spend_adj", 0.0),
    )


def parse_replay_config(cfg_dict: Mapping) -> ReplayConfig:
    replay_cfg = cfg_dict["replay"]
    horizon = HorizonConfig(
        days=replay_cfg["horizon"]["days"],
        forecast_days=replay_cfg["horizon"].get("forecast_days", 7),
        history_days=replay_cfg["horizon"].get("history_days", 7),
    )
    if horizon.days < 1 or horizon.forecast_days < 1:
        raise ValueError("Replay horizon must cover at least one day")

    start = replay_cfg.get("start_date", "2024-01-01")
    if isinstance(start, str):
        start = date.fromisoformat(start)

    assignments = [(item["brand"], item["state"]) for item in replay_cfg["assignments"]]
    return ReplayConfig(
        horizon=horizon,
        assignments=assignments,
        start_date=start,
        scenario=_parse_scenario(replay_cfg.get("scenario")),
        automation_enabled=replay_cfg.get("automation_enabled", True),
        output_dir=Path(replay_cfg.get("output_dir", "outputs")),
        output_format=replay_cfg.get("output_format", "csv"),
    )


def load_replay(config_path: Path) -> Dict[Tuple[str, str], pd.DataFrame]:
    with open(config_path, "r", encoding="utf-8") as f:
        cfg_dict = yaml.safe_load(f)

    config = parse_replay_config(cfg_dict)
    outputs = run_replay(config)
    save_replay_outputs(outputs, config.output_dir, config.output_format)
    return outputs


__all__ = [
    "HorizonConfig",
    "ReplayConfig",
    "load_replay",
    "parse_replay_config",
    "run_replay",
    "save_replay_outputs",
]
