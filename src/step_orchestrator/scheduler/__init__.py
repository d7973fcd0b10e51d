"""Scheduler module - Step graph resolution, planning and group execution."""

from .executor import GroupExecutor
from .graph import estimate_duration, find_parallel_groups, resolve, resolve_steps
from .planner import ExecutionPlanner

__all__ = [
	"resolve",
	"resolve_steps",
	"find_parallel_groups",
	"estimate_duration",
	"ExecutionPlanner",
	"GroupExecutor",
]
