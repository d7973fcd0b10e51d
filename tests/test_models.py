"""Tests for task, step and result models."""

import pytest
from pydantic import ValidationError

from step_orchestrator.errors import CircularDependencyError, StepFailedError
from step_orchestrator.models import (
	ExecutionResult,
	StepGroup,
	StepResult,
	StepStatus,
	Task,
	TaskPriority,
)

from .helpers import make_step


class TestTask:
	"""Tests for Task."""

	def test_defaults(self):
		task = Task(description="Do something")
		assert task.id.startswith("task-")
		assert task.priority == TaskPriority.MEDIUM
		assert task.context == {}
		assert task.constraints == []

	def test_immutable(self):
		task = Task(description="Do something")
		with pytest.raises(ValidationError):
			task.description = "changed"


class TestStep:
	"""Tests for Step."""

	def test_defaults(self):
		step = make_step("A")
		assert step.status == StepStatus.PENDING
		assert step.retryable is True

	def test_tool_name_falls_back_to_action(self):
		assert make_step("A", tool=None, action="deploy").tool_name == "deploy"
		assert make_step("A", tool="shell", action="deploy").tool_name == "shell"

	def test_negative_timeout_rejected(self):
		with pytest.raises(ValidationError):
			make_step("A", timeout_ms=-1)


def test_step_group_parallel_flag():
	assert StepGroup(level=0, steps=[make_step("A")]).can_parallelize is False
	assert StepGroup(level=0, steps=[make_step("A"), make_step("B")]).can_parallelize is True
	assert StepGroup(level=0).can_parallelize is False


class TestExecutionResult:
	"""Tests for ExecutionResult."""

	def test_failed_factory(self):
		error = CircularDependencyError(["A", "B", "A"])
		result = ExecutionResult.failed("t1", error)

		assert result.success is False
		assert result.errors == [error]
		assert result.completed_steps == 0
		assert result.failed_steps == 0
		assert result.steps == []

	def test_to_dict(self):
		result = ExecutionResult(
			task_id="t1",
			success=False,
			steps=[
				StepResult(step_id="A", success=True, output={"k": 1}),
				StepResult(step_id="B", success=False, error="bad", output=object()),
			],
			errors=[StepFailedError("B", "bad")],
			completed_steps=1,
			failed_steps=1,
		)
		data = result.to_dict()

		assert data["task_id"] == "t1"
		assert data["errors"] == [{"type": "StepFailedError", "message": "Step 'B' failed: bad"}]
		assert data["steps"][0]["output"] == {"k": 1}
		assert isinstance(data["steps"][1]["output"], str)
