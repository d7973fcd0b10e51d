"""
Task Orchestrator - Drives a task from description to ExecutionResult.

Flow:
- Reason about the description
- Decompose into steps
- Resolve the step graph (fails closed on structural errors)
- Build the plan and hand its groups to the executor
- Aggregate step results

execute_task turns every failure into a failed ExecutionResult; nothing is
raised to the caller. get_plan stops after planning and raises instead.
"""

import logging
import time
from typing import Awaitable, Callable, Optional, Protocol

from .config import Config
from .decomposition import TemplateDecomposer
from .errors import StepFailedError
from .models import ExecutionPlan, ExecutionResult, Step, StepGroup, StepResult, Task
from .reasoning import KeywordReasoner, ReasoningEngine
from .scheduler.executor import GroupExecutor
from .scheduler.graph import resolve_steps
from .scheduler.planner import ExecutionPlanner
from .tools.registry import ToolDefinition, ToolRegistry

logger = logging.getLogger(__name__)


class Executor(Protocol):
	"""Executor collaborator contract."""

	async def execute(self, groups: list[StepGroup]) -> list[StepResult]:
		...

	def register_tool(self, tool: ToolDefinition) -> None:
		...


class Decomposer(Protocol):
	"""Decomposition strategy contract."""

	def breakdown(self, task: Task, conclusion: str) -> list[Step]:
		...


class TaskOrchestrator:
	"""
	Coordinates reasoning, planning and execution for one task at a time.

	Holds only its collaborators; each execute_task call builds its own
	graph and plan.
	"""

	def __init__(
		self,
		reasoner: ReasoningEngine,
		executor: Executor,
		decomposer: Optional[Decomposer] = None,
		planner: Optional[ExecutionPlanner] = None,
	):
		self.reasoner = reasoner
		self.executor = executor
		self.decomposer = decomposer or TemplateDecomposer()
		self.planner = planner or ExecutionPlanner()

	async def execute_task(self, task: Task) -> ExecutionResult:
		"""
		Execute a task end to end.

		Args:
			task: The task to run

		Returns:
			ExecutionResult; success is True only if every step succeeded
		"""
		start = time.monotonic()
		logger.info(f"Executing task {task.id}: {task.description[:80]}")

		try:
			reasoning = await self.reasoner.reason(task.description, task.context)
			steps = self.decomposer.breakdown(task, reasoning.conclusion)

			resolution = resolve_steps(steps)
			if not resolution.ok:
				logger.error(f"Task {task.id} not executed: {resolution.error}")
				return ExecutionResult.failed(task.id, resolution.error, time.monotonic() - start)

			plan = self.planner.build_plan(resolution.graph)
			results = await self.executor.execute(plan.groups)
		except Exception as e:
			logger.exception(f"Task {task.id} failed before completion: {e}")
			return ExecutionResult.failed(task.id, e, time.monotonic() - start)

		completed = sum(1 for r in results if r.success)
		failed = len(results) - completed
		errors: list[Exception] = [
			StepFailedError(r.step_id, r.error or "") for r in results if not r.success
		]

		result = ExecutionResult(
			task_id=task.id,
			success=failed == 0,
			steps=list(results),
			duration_seconds=time.monotonic() - start,
			errors=errors,
			completed_steps=completed,
			failed_steps=failed,
			plan=plan,
		)
		logger.info(
			f"Task {task.id} finished: {completed} completed, {failed} failed "
			f"in {result.duration_seconds:.2f}s"
		)
		return result

	async def get_plan(self, task: Task) -> ExecutionPlan:
		"""
		Build the plan for a task without executing it.

		Args:
			task: The task to plan

		Returns:
			The ExecutionPlan execute_task would run

		Raises:
			StepGraphError: If the decomposed steps do not form a valid graph
			ReasoningError: If the reasoner rejects the task
		"""
		reasoning = await self.reasoner.reason(task.description, task.context)
		steps = self.decomposer.breakdown(task, reasoning.conclusion)
		return self.planner.build_plan(resolve_steps(steps).unwrap())

	def register_tool(self, tool: ToolDefinition) -> None:
		self.executor.register_tool(tool)

	async def explain_reasoning(self, task: Task) -> str:
		return await self.reasoner.explain(task)


def create_orchestrator(
	config: Optional[Config] = None,
	registry: Optional[ToolRegistry] = None,
	on_step_complete: Optional[Callable[[StepResult], Awaitable[None]]] = None,
) -> TaskOrchestrator:
	"""Build an orchestrator wired with the default collaborators."""
	config = config or Config()
	executor = GroupExecutor(
		registry=registry,
		max_concurrency=config.max_concurrency,
		max_retries=config.max_retries,
		retry_backoff_s=config.retry_backoff_s,
		enforce_timeouts=config.enforce_timeouts,
		dependency_failure=config.dependency_failure,
		on_step_complete=on_step_complete,
	)
	return TaskOrchestrator(
		reasoner=KeywordReasoner(),
		executor=executor,
		planner=ExecutionPlanner(default_timeout_ms=config.default_timeout_ms),
	)
