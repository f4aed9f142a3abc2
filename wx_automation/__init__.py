"""
Automation Module

Staged rollouts, the forecast safety gate, recommendations with automated
application and audit, and the multi-day replay runner.
"""

from .audit import AuditEntry, AuditLog
from .recommendations import AutomationGate, Recommendation, build_recommendations
from .safety import SafetyState, SafetyStatus, compute_safety
from .staging import StagedPlan, stage_plan
from .experiment import (
    HorizonConfig,
    ReplayConfig,
    load_replay,
    parse_replay_config,
    run_replay,
    save_replay_outputs,
)

__all__ = [
    "AuditEntry",
    "AuditLog",
    "AutomationGate",
    "HorizonConfig",
    "Recommendation",
    "ReplayConfig",
    "SafetyState",
    "SafetyStatus",
    "StagedPlan",
    "build_recommendations",
    "compute_safety",
    "load_replay",
    "parse_replay_config",
    "run_replay",
    "save_replay_outputs",
    "stage_plan",
]
