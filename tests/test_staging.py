"""
Tests for the staged budget rollout planner.
"""

import pytest

from wx_config import StagingConfig
from wx_automation.staging import stage_plan


class TestStagePlan:
    def test_default_ramp(self):
        plan = stage_plan(1.3)
        assert plan.steps == pytest.approx([1.15, 1.3, 1.3])
        assert plan.narrative == "Staged: 15% today, 30% day 2, 30% day 3"

    def test_each_step_within_daily_cap(self):
        plan = stage_plan(2.0, horizon=6)
        previous = 1.0
        for step in plan.steps:
            assert step >= previous
            assert step - previous <= previous * 0.15 + 1e-12
            assert step <= 2.0
            previous = step

    def test_reaches_target_without_overshoot(self):
        plan = stage_plan(1.2, horizon=5)
        assert plan.steps[-1] == pytest.approx(1.2)
        assert max(plan.steps) <= 1.2 + 1e-12

    def test_downward_target(self):
        plan = stage_plan(0.7, start=1.0)
        assert plan.steps == sorted(plan.steps, reverse=True)
        assert plan.steps[0] == pytest.approx(0.85)
        assert min(plan.steps) >= 0.7 - 1e-12

    def test_floor_and_ceiling(self):
        config = StagingConfig(floor=0.9, ceiling=1.1)
        assert stage_plan(2.0, config=config).steps[-1] == pytest.approx(1.1)
        assert stage_plan(0.1, config=config).steps[-1] == pytest.approx(0.9)

    def test_at_target_holds(self):
        assert stage_plan(1.0).steps == [1.0, 1.0, 1.0]
        assert stage_plan(1.0).narrative == "Staged: 0% today, 0% day 2, 0% day 3"

    def test_horizon_at_least_one(self):
        plan = stage_plan(1.5, horizon=0)
        assert len(plan.steps) == 1
        assert plan.narrative == "Staged: 15% today"

    def test_long_horizon_narrative_covers_three_days(self):
        plan = stage_plan(2.0, horizon=5)
        assert len(plan.steps) == 5
        assert plan.narrative.count("%") == 3

    def test_custom_daily_cap(self):
        plan = stage_plan(2.0, max_daily=0.5, horizon=2)
        assert plan.steps == pytest.approx([1.5, 2.0])

    def test_rounded_steps(self):
        plan = stage_plan(1.5, max_daily=0.2)
        assert plan.rounded_steps == [1.2, 1.44, 1.5]
