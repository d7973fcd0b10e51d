"""Tests for the execution planner."""

from step_orchestrator.scheduler.graph import resolve
from step_orchestrator.scheduler.planner import ExecutionPlanner

from .helpers import diamond_steps, make_step


def test_build_plan_diamond():
	"""Diamond graph should yield three groups with the middle one parallel."""
	plan = ExecutionPlanner().build_plan(resolve(diamond_steps()))

	assert plan.total_steps == 4
	assert [g.level for g in plan.groups] == [0, 1, 2]
	assert [g.can_parallelize for g in plan.groups] == [False, True, False]
	# 5000 + max(5000, 5000) + 5000
	assert plan.estimated_duration_ms == 15000


def test_build_plan_uses_timeouts():
	"""Plan estimate follows step timeouts."""
	steps = [
		make_step("a", timeout_ms=1500),
		make_step("b", ["a"], timeout_ms=2500),
	]
	plan = ExecutionPlanner().build_plan(resolve(steps))
	assert plan.estimated_duration_ms == 4000


def test_build_plan_custom_default():
	"""Planner default timeout applies to steps without one."""
	plan = ExecutionPlanner(default_timeout_ms=100).build_plan(resolve(diamond_steps()))
	assert plan.estimated_duration_ms == 300


def test_build_plan_empty():
	"""Empty graph should yield an empty plan."""
	plan = ExecutionPlanner().build_plan(resolve([]))
	assert plan.groups == []
	assert plan.total_steps == 0
	assert plan.estimated_duration_ms == 0
