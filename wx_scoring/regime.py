"""
Coarse weather regimes used to annotate recommendations.
"""

from __future__ import annotations

from typing import List

from wx_simulation.rng import stream_for

REGIMES = ("dry_cold", "heat", "storm", "normal")


def detect_regime(temp_f: float, rh_pct: float, precip_in: float) -> str:
    if precip_in > 0.3:
        return "storm"
    if temp_f <= 45 and rh_pct < 40:
        return "dry_cold"
    if temp_f >= 85:
        return "heat"
    return "normal"


def regime_embedding(regime: str) -> List[int]:
    if regime not in REGIMES:
        regime = "normal"
    return [1 if r == regime else 0 for r in REGIMES]


def similar_event_count(regime: str, climate: str, key: str) -> int:
    """Plausible number of similar historical events, reproducible per key."""
    u = stream_for(f"analogs:{regime}:{climate}:{key}")()
    if regime == "dry_cold" and "humid" in climate:
        return 24 + int(u * 12)
    if regime == "heat":
        return 18 + int(u * 10)
    if regime == "storm":
        return 12 + int(u * 8)
    return 8 + int(u * 6)


__all__ = ["REGIMES", "detect_regime", "regime_embedding", "similar_event_count"]
