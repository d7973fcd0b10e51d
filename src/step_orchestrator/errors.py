"""Error hierarchy for step scheduling and orchestration."""


class OrchestratorError(Exception):
	"""Base class for all step-orchestrator errors."""


class StepGraphError(OrchestratorError):
	"""The step list cannot be turned into a valid dependency graph."""


class CircularDependencyError(StepGraphError):
	"""The step dependencies contain a cycle."""

	def __init__(self, cycle: list[str]):
		self.cycle = list(cycle)
		super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")

	@property
	def step_ids(self) -> list[str]:
		"""Distinct step ids on the cycle, in traversal order."""
		seen: list[str] = []
		for step_id in self.cycle:
			if step_id not in seen:
				seen.append(step_id)
		return seen


class UnresolvedDependencyError(StepGraphError):
	"""A step depends on an id that is not in the step list."""

	def __init__(self, step_id: str, dependency: str):
		self.step_id = step_id
		self.dependency = dependency
		super().__init__(f"Step '{step_id}' depends on unknown step '{dependency}'")


class DuplicateStepError(StepGraphError):
	"""Two steps share the same id."""

	def __init__(self, step_id: str):
		self.step_id = step_id
		super().__init__(f"Duplicate step id: '{step_id}'")


class ReasoningError(OrchestratorError):
	"""The reasoning collaborator could not produce a conclusion."""


class ToolNotFoundError(OrchestratorError):
	"""No tool is registered under the requested name."""

	def __init__(self, name: str):
		self.name = name
		super().__init__(f"Tool not registered: '{name}'")


class StepFailedError(OrchestratorError):
	"""A single step finished unsuccessfully."""

	def __init__(self, step_id: str, message: str = ""):
		self.step_id = step_id
		self.message = message
		super().__init__(f"Step '{step_id}' failed: {message}" if message else f"Step '{step_id}' failed")
