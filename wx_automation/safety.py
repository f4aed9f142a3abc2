"""
Rule-based safety gate over near-term forecast volatility.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence

from wx_config.settings import SafetyConfig

logger = logging.getLogger(__name__)


class SafetyStatus(str, Enum):
    OK = "OK"
    DEGRADED = "DEGRADED"
    HALT = "HALT"


@dataclass
class SafetyState:
    status: SafetyStatus
    reasons: List[str] = field(default_factory=list)
    damping: float = 1.0


def _value(day: Any, name: str) -> float:
    raw = day.get(name) if isinstance(day, Mapping) else getattr(day, name, None)
    return float(raw) if raw is not None else 0.0


def compute_safety(forecast: Optional[Sequence[Any]], config: Optional[SafetyConfig] = None) -> SafetyState:
    """
    Inspect the next few forecast days and return a status with a damping factor.

    Soft limits (gusts, precipitation probability, temperature swing) damp
    multiplicatively; a high combined risk halts with zero damping.
    """
    config = config or SafetyConfig()
    if not forecast or len(forecast) < config.min_days:
        return SafetyState(
            SafetyStatus.DEGRADED, ["insufficient_forecast"], config.insufficient_damping
        )

    window = list(forecast)[: config.window_days]
    gust_max = max(_value(d, "gust_mph") for d in window)
    pop_max = max(_value(d, "pop") for d in window)
    temps = [_value(d, "temp_f") for d in window]
    temp_range = max(temps) - min(temps)

    reasons: List[str] = []
    damping = 1.0
    if gust_max > config.gust_limit_mph:
        reasons.append("wind_gusts")
        damping *= config.gust_damping
    if pop_max > config.pop_limit:
        reasons.append("precip_probability")
        damping *= config.pop_damping
    if temp_range > config.temp_range_limit_f:
        reasons.append("temp_whiplash")
        damping *= config.temp_range_damping

    entropy = (
        pop_max
        + min(1.0, gust_max / config.gust_norm_mph)
        + min(1.0, temp_range / config.temp_range_norm_f)
    ) / 3
    entropy = max(0.0, min(1.0, entropy))

    if entropy > config.halt_entropy:
        reasons.append("forecast_entropy_high")
        logger.warning(f"Safety HALT: entropy proxy {entropy:.2f}, reasons {reasons}")
        return SafetyState(SafetyStatus.HALT, reasons, 0.0)
    if reasons:
        return SafetyState(SafetyStatus.DEGRADED, reasons, damping)
    return SafetyState(SafetyStatus.OK, reasons, damping)


__all__ = ["SafetyState", "SafetyStatus", "compute_safety"]
