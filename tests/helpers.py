"""Shared test fixtures and helpers for step-orchestrator tests."""

import asyncio
from typing import Any, Optional

from step_orchestrator.models import Step, StepGroup, StepResult, Task
from step_orchestrator.reasoning import Reasoning
from step_orchestrator.tools.registry import ToolDefinition


def make_step(
	step_id: str,
	deps: Optional[list[str]] = None,
	timeout_ms: Optional[int] = None,
	tool: Optional[str] = "ok",
	retryable: bool = True,
	**kwargs: Any,
) -> Step:
	"""Create a Step with sensible defaults for tests."""
	return Step(
		id=step_id,
		action=kwargs.pop("action", step_id.lower()),
		description=kwargs.pop("description", f"Step {step_id}"),
		tool=tool,
		dependencies=deps or [],
		timeout_ms=timeout_ms,
		retryable=retryable,
		**kwargs,
	)


def diamond_steps() -> list[Step]:
	"""A -> (B, C) -> D."""
	return [
		make_step("A"),
		make_step("B", ["A"]),
		make_step("C", ["A"]),
		make_step("D", ["B", "C"]),
	]


def level_ids(levels: list[list[Step]]) -> list[list[str]]:
	return [[step.id for step in level] for level in levels]


def ok_tool(name: str = "ok", delay: float = 0.0, **kwargs: Any) -> ToolDefinition:
	"""A tool that succeeds, optionally after a delay."""

	async def _run(inputs: dict[str, Any]) -> str:
		if delay:
			await asyncio.sleep(delay)
		return f"{name}-done"

	return ToolDefinition(name=name, execute=_run, **kwargs)


def failing_tool(name: str = "fail", message: str = "boom", **kwargs: Any) -> ToolDefinition:
	"""A tool that always raises."""

	async def _run(inputs: dict[str, Any]) -> None:
		raise RuntimeError(message)

	return ToolDefinition(name=name, execute=_run, **kwargs)


class FakeReasoner:
	"""Reasoner returning a fixed conclusion, or raising if given an error."""

	def __init__(self, conclusion: str = "general", error: Optional[Exception] = None):
		self.conclusion = conclusion
		self.error = error
		self.calls: list[str] = []

	async def reason(self, description: str, context: dict[str, Any]) -> Reasoning:
		self.calls.append(description)
		if self.error:
			raise self.error
		return Reasoning(conclusion=self.conclusion, confidence=0.9)

	async def explain(self, task: Task) -> str:
		return f"explained {task.id}"


class FakeDecomposer:
	"""Decomposer returning a fixed step list."""

	def __init__(self, steps: list[Step]):
		self.steps = steps

	def breakdown(self, task: Task, conclusion: str) -> list[Step]:
		return self.steps


class FakeExecutor:
	"""Executor returning canned results and recording its calls."""

	def __init__(self, results: Optional[list[StepResult]] = None, error: Optional[Exception] = None):
		self.results = results
		self.error = error
		self.calls: list[list[StepGroup]] = []
		self.tools: list[ToolDefinition] = []

	async def execute(self, groups: list[StepGroup]) -> list[StepResult]:
		self.calls.append(groups)
		if self.error:
			raise self.error
		if self.results is not None:
			return self.results
		return [
			StepResult(step_id=step.id, success=True)
			for group in groups
			for step in group.steps
		]

	def register_tool(self, tool: ToolDefinition) -> None:
		self.tools.append(tool)
