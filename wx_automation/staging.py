"""
Staged budget rollout: a rate-limited ramp from the current multiplier to a target.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from wx_config.settings import StagingConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedPlan:
    steps: List[float]
    narrative: str

    @property
    def rounded_steps(self) -> List[float]:
        return [round(step, 2) for step in self.steps]


def _percent(multiplier: float) -> str:
    return f"{math.floor((multiplier - 1) * 100 + 0.5)}%"


def stage_plan(
    target: float,
    start: float = 1.0,
    horizon: Optional[int] = None,
    max_daily: Optional[float] = None,
    config: Optional[StagingConfig] = None,
) -> StagedPlan:
    """
    Ramp toward ``target`` moving at most ``current * max_daily`` per day.

    Each day's multiplier is clamped to the configured floor/ceiling, and the
    ramp never steps past the target.
    """
    config = config or StagingConfig()
    horizon = max(1, config.horizon if horizon is None else horizon)
    max_daily = max(0.01, config.max_daily if max_daily is None else max_daily)

    steps: List[float] = []
    current = start
    for _ in range(horizon):
        remaining = target - current
        allowed = math.copysign(min(abs(remaining), current * max_daily), remaining)
        current = max(config.floor, min(config.ceiling, current + allowed))
        steps.append(current)

    labels = ["today", "day 2", "day 3"]
    narrative = "Staged: " + ", ".join(
        f"{_percent(step)} {label}" for step, label in zip(steps, labels)
    )
    logger.debug(f"Staged plan toward {target:.2f}: {narrative}")
    return StagedPlan(steps=steps, narrative=narrative)


__all__ = ["StagedPlan", "stage_plan"]
