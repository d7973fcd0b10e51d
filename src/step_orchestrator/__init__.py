"""step-orchestrator - Dependency-ordered planning and execution of multi-step tasks."""

from .errors import (
	CircularDependencyError,
	DuplicateStepError,
	OrchestratorError,
	ReasoningError,
	StepFailedError,
	StepGraphError,
	ToolNotFoundError,
	UnresolvedDependencyError,
)
from .models import (
	DependencyGraph,
	ExecutionPlan,
	ExecutionResult,
	Step,
	StepGroup,
	StepResult,
	StepStatus,
	Task,
	TaskPriority,
)
from .orchestrator import TaskOrchestrator, create_orchestrator

__all__ = [
	"Task",
	"TaskPriority",
	"Step",
	"StepStatus",
	"StepGroup",
	"StepResult",
	"DependencyGraph",
	"ExecutionPlan",
	"ExecutionResult",
	"TaskOrchestrator",
	"create_orchestrator",
	"OrchestratorError",
	"StepGraphError",
	"CircularDependencyError",
	"UnresolvedDependencyError",
	"DuplicateStepError",
	"ReasoningError",
	"ToolNotFoundError",
	"StepFailedError",
]
