"""
Group Executor - Level-by-level execution of a step plan.

Groups run strictly in level order. A parallel group fans out its steps
concurrently (bounded by a semaphore) and is complete only once every step
has resolved. Individual step failures are captured as StepResults and do
not abort the plan.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..errors import ToolNotFoundError
from ..models import Step, StepGroup, StepResult, StepStatus
from ..tools.registry import ToolDefinition, ToolRegistry

logger = logging.getLogger(__name__)


class DependencyFailurePolicy(str, Enum):
	"""What happens to steps whose prerequisite failed."""
	SKIP = "skip"
	CONTINUE = "continue"


class GroupExecutor:
	"""
	Default executor collaborator.

	Runs each step through the tool registered under its tool name,
	retrying retryable steps and optionally enforcing step timeouts.
	"""

	def __init__(
		self,
		registry: Optional[ToolRegistry] = None,
		max_concurrency: int = 5,
		max_retries: int = 1,
		retry_backoff_s: float = 0.0,
		enforce_timeouts: bool = False,
		dependency_failure: str = DependencyFailurePolicy.SKIP.value,
		on_step_complete: Optional[Callable[[StepResult], Awaitable[None]]] = None,
	):
		"""
		Initialize the executor.

		Args:
			registry: Tools available to steps
			max_concurrency: Maximum steps of one group running at once
			max_retries: Extra attempts for retryable steps
			retry_backoff_s: Base delay between attempts, multiplied by the attempt number
			enforce_timeouts: Cancel attempts that exceed their timeout instead of only logging
			dependency_failure: "skip" to fail dependents of a failed step without running them,
				"continue" to run them anyway
			on_step_complete: Optional callback after each step resolves
		"""
		if max_concurrency < 1:
			raise ValueError("max_concurrency must be at least 1")
		self.registry = registry or ToolRegistry()
		self.max_concurrency = max_concurrency
		self.max_retries = max(0, max_retries)
		self.retry_backoff_s = retry_backoff_s
		self.enforce_timeouts = enforce_timeouts
		self.dependency_failure = DependencyFailurePolicy(dependency_failure)
		self.on_step_complete = on_step_complete

	def register_tool(self, tool: ToolDefinition) -> None:
		self.registry.register(tool)

	async def execute(self, groups: list[StepGroup]) -> list[StepResult]:
		"""
		Execute groups in ascending level order.

		Returns:
			Exactly one StepResult per input step
		"""
		results: list[StepResult] = []
		failed_ids: set[str] = set()
		semaphore = asyncio.Semaphore(self.max_concurrency)

		for group in sorted(groups, key=lambda g: g.level):
			runnable: list[Step] = []
			for step in group.steps:
				blocker = self._failed_dependency(step, failed_ids)
				if blocker is None:
					runnable.append(step)
					continue
				step.status = StepStatus.FAILED
				blocked = StepResult(
					step_id=step.id,
					success=False,
					error=f"blocked by failed dependency: {blocker}",
					skipped=True,
				)
				logger.warning(f"Skipping step {step.id}: {blocked.error}")
				self._record(blocked, results, failed_ids)
				await self._notify(blocked)

			mode = "parallel" if group.can_parallelize else "sequential"
			logger.info(f"Group {group.level}: running {len(runnable)} step(s) ({mode})")

			if group.can_parallelize:
				async def run_bounded(step: Step) -> StepResult:
					async with semaphore:
						result = await self._run_step(step)
					await self._notify(result)
					return result

				# Fan out, then join on every step
				tasks = [asyncio.create_task(run_bounded(step)) for step in runnable]
				group_results = await asyncio.gather(*tasks)
			else:
				group_results = []
				for step in runnable:
					result = await self._run_step(step)
					await self._notify(result)
					group_results.append(result)

			# Results keep plan order; failures only affect later levels
			for result in group_results:
				self._record(result, results, failed_ids)

		return results

	def _failed_dependency(self, step: Step, failed_ids: set[str]) -> Optional[str]:
		if self.dependency_failure != DependencyFailurePolicy.SKIP:
			return None
		for dep in step.dependencies:
			if dep in failed_ids:
				return dep
		return None

	def _record(self, result: StepResult, results: list[StepResult], failed_ids: set[str]) -> None:
		results.append(result)
		if not result.success:
			failed_ids.add(result.step_id)

	async def _notify(self, result: StepResult) -> None:
		if self.on_step_complete:
			try:
				await self.on_step_complete(result)
			except Exception as e:
				logger.warning(f"on_step_complete callback failed for {result.step_id}: {e}")

	async def _run_step(self, step: Step) -> StepResult:
		"""Run one step to completion, retrying if allowed."""
		step.status = StepStatus.RUNNING
		start = time.monotonic()

		try:
			tool = self.registry.get(step.tool_name)
		except ToolNotFoundError as e:
			step.status = StepStatus.FAILED
			logger.warning(f"Step {step.id} failed: {e}")
			return StepResult(
				step_id=step.id,
				success=False,
				error=str(e),
				duration_seconds=time.monotonic() - start,
			)

		timeout_ms = step.timeout_ms if step.timeout_ms is not None else tool.timeout_ms
		attempts = 1 + (self.max_retries if step.retryable and tool.retryable else 0)
		last_error = ""

		for attempt in range(attempts):
			if attempt:
				logger.warning(f"Retrying step {step.id} (attempt {attempt + 1}/{attempts})")
				if self.retry_backoff_s:
					await asyncio.sleep(self.retry_backoff_s * attempt)

			attempt_start = time.monotonic()
			try:
				output = await self._invoke(tool, step, timeout_ms)
			except asyncio.TimeoutError:
				last_error = f"timed out after {timeout_ms}ms"
			except Exception as e:
				last_error = str(e) or type(e).__name__
			else:
				attempt_ms = (time.monotonic() - attempt_start) * 1000
				if timeout_ms is not None and attempt_ms > timeout_ms:
					logger.warning(f"Step {step.id} took {attempt_ms:.0f}ms, over its {timeout_ms}ms timeout")
				step.status = StepStatus.COMPLETED
				return StepResult(
					step_id=step.id,
					success=True,
					output=output,
					duration_seconds=time.monotonic() - start,
					retries=attempt,
				)

			logger.warning(f"Step {step.id} attempt {attempt + 1} failed: {last_error}")

		step.status = StepStatus.FAILED
		return StepResult(
			step_id=step.id,
			success=False,
			error=last_error,
			duration_seconds=time.monotonic() - start,
			retries=attempts - 1,
		)

	async def _invoke(self, tool: ToolDefinition, step: Step, timeout_ms: Optional[int]) -> Any:
		call = tool.execute(dict(step.inputs))
		if self.enforce_timeouts and timeout_ms is not None:
			return await asyncio.wait_for(call, timeout=timeout_ms / 1000)
		return await call
