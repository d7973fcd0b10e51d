"""
Models - Tasks, steps, plans and execution results.

Task and Step are Pydantic models: they are the declared inputs handed to the
scheduler. Graphs, groups, plans and results are plain dataclasses derived
from them at run time.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import OrchestratorError


class TaskPriority(str, Enum):
	"""Priority of a task."""
	LOW = "low"
	MEDIUM = "medium"
	HIGH = "high"
	CRITICAL = "critical"


class StepStatus(str, Enum):
	"""Lifecycle status of a step."""
	PENDING = "pending"
	RUNNING = "running"
	COMPLETED = "completed"
	FAILED = "failed"


class Task(BaseModel):
	"""A user request to be decomposed into steps and executed."""
	model_config = ConfigDict(frozen=True)

	id: str = Field(default_factory=lambda: f"task-{uuid.uuid4().hex[:8]}")
	description: str = Field(description="What the user asked for")
	context: dict[str, Any] = Field(default_factory=dict)
	constraints: list[str] = Field(default_factory=list)
	priority: TaskPriority = Field(default=TaskPriority.MEDIUM)
	created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class Step(BaseModel):
	"""A single unit of work within a task."""
	id: str = Field(description="Unique within a task")
	action: str = Field(description="Short verb naming the step")
	description: str = Field(default="")
	tool: Optional[str] = Field(default=None, description="Tool to run; defaults to the action")
	inputs: dict[str, Any] = Field(default_factory=dict)
	outputs: list[str] = Field(default_factory=list)
	dependencies: list[str] = Field(default_factory=list, description="Ids of steps this one waits for")
	retryable: bool = Field(default=True)
	timeout_ms: Optional[int] = Field(default=None, ge=0)
	status: StepStatus = Field(default=StepStatus.PENDING)

	@property
	def tool_name(self) -> str:
		return self.tool or self.action


@dataclass
class DependencyGraph:
	"""Resolved step graph. Levels partition the nodes in dependency order."""
	nodes: dict[str, Step] = field(default_factory=dict)
	edges: dict[str, list[str]] = field(default_factory=dict)
	levels: list[list[Step]] = field(default_factory=list)

	def level_of(self, step_id: str) -> int:
		"""Index of the level holding step_id."""
		for index, level in enumerate(self.levels):
			if any(step.id == step_id for step in level):
				return index
		raise KeyError(step_id)

	def dependents(self, step_id: str) -> list[str]:
		"""Ids of steps that list step_id as a dependency."""
		return [node_id for node_id, deps in self.edges.items() if step_id in deps]


@dataclass
class StepGroup:
	"""Steps of one graph level."""
	level: int
	steps: list[Step] = field(default_factory=list)

	@property
	def can_parallelize(self) -> bool:
		return len(self.steps) > 1


@dataclass
class ExecutionPlan:
	"""Level-ordered groups with a wall-clock estimate."""
	groups: list[StepGroup] = field(default_factory=list)
	total_steps: int = 0
	estimated_duration_ms: int = 0


@dataclass
class StepResult:
	"""Outcome of a single step, produced by the executor."""
	step_id: str
	success: bool
	output: Any = None
	error: Optional[str] = None
	duration_seconds: float = 0.0
	retries: int = 0
	skipped: bool = False


@dataclass
class ExecutionResult:
	"""Task-level outcome of one execute_task call."""
	task_id: str
	success: bool
	steps: list[StepResult] = field(default_factory=list)
	duration_seconds: float = 0.0
	errors: list[Exception] = field(default_factory=list)
	completed_steps: int = 0
	failed_steps: int = 0
	plan: Optional[ExecutionPlan] = None

	@classmethod
	def failed(cls, task_id: str, error: Exception, duration_seconds: float = 0.0) -> "ExecutionResult":
		"""A failed result carrying a single error and no step outcomes."""
		return cls(
			task_id=task_id,
			success=False,
			duration_seconds=duration_seconds,
			errors=[error],
		)

	def to_dict(self) -> dict:
		"""JSON-friendly representation."""
		return {
			"task_id": self.task_id,
			"success": self.success,
			"duration_seconds": round(self.duration_seconds, 4),
			"completed_steps": self.completed_steps,
			"failed_steps": self.failed_steps,
			"errors": [
				{"type": type(e).__name__, "message": str(e)}
				for e in self.errors
			],
			"steps": [
				{
					"step_id": r.step_id,
					"success": r.success,
					"output": r.output if _is_jsonable(r.output) else repr(r.output),
					"error": r.error,
					"duration_seconds": round(r.duration_seconds, 4),
					"retries": r.retries,
					"skipped": r.skipped,
				}
				for r in self.steps
			],
		}


@dataclass
class Resolution:
	"""Tagged outcome of resolving a step list: a graph or a structural error."""
	graph: Optional[DependencyGraph] = None
	error: Optional[OrchestratorError] = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def unwrap(self) -> DependencyGraph:
		"""Return the graph or raise the captured error."""
		if self.error is not None:
			raise self.error
		assert self.graph is not None
		return self.graph


def _is_jsonable(value: Any) -> bool:
	return value is None or isinstance(value, (str, int, float, bool, list, dict))
