"""Execution planner - turns a resolved graph into an executable plan."""

import logging

from ..models import DependencyGraph, ExecutionPlan
from .graph import DEFAULT_STEP_TIMEOUT_MS, estimate_duration, find_parallel_groups

logger = logging.getLogger(__name__)


class ExecutionPlanner:
	"""Builds ExecutionPlans from dependency graphs. Holds no per-plan state."""

	def __init__(self, default_timeout_ms: int = DEFAULT_STEP_TIMEOUT_MS):
		self.default_timeout_ms = default_timeout_ms

	def build_plan(self, graph: DependencyGraph) -> ExecutionPlan:
		groups = find_parallel_groups(graph)
		plan = ExecutionPlan(
			groups=groups,
			total_steps=len(graph.nodes),
			estimated_duration_ms=estimate_duration(groups, self.default_timeout_ms),
		)
		logger.info(
			f"Built plan: {plan.total_steps} steps in {len(groups)} groups, "
			f"~{plan.estimated_duration_ms}ms"
		)
		return plan
