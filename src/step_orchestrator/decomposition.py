"""
Decomposition - Expands a task into steps from canned templates.

A template is an ordered list of step specs. Dependencies refer to other
specs in the same template by key and are rewritten to step ids.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .models import Step, Task

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepTemplate:
	"""One step of a decomposition template."""
	key: str
	description: str
	depends_on: list[str] = field(default_factory=list)
	timeout_ms: Optional[int] = None
	outputs: list[str] = field(default_factory=list)


TEMPLATES: dict[str, list[StepTemplate]] = {
	"build": [
		StepTemplate("prepare", "Prepare the workspace for: {description}", [], 3000, ["workspace"]),
		StepTemplate("implement", "Implement: {description}", ["prepare"], 10000, ["changes"]),
		StepTemplate("test", "Test the implementation", ["implement"], 6000, ["test_report"]),
		StepTemplate("validate", "Validate the result against the request", ["test"], 3000, ["verdict"]),
	],
	"refactor": [
		StepTemplate("analyze", "Analyze the code affected by: {description}", [], 4000, ["findings"]),
		StepTemplate("plan-changes", "Plan the refactoring steps", ["analyze"], 3000, ["change_plan"]),
		StepTemplate("apply-changes", "Apply the planned changes", ["plan-changes"], 8000, ["changes"]),
		StepTemplate("run-tests", "Run the test suite for regressions", ["apply-changes"], 6000, ["test_report"]),
	],
	"integrate": [
		StepTemplate("discover-api", "Discover the interface to integrate for: {description}", [], 4000, ["api_spec"]),
		StepTemplate("implement-adapter", "Implement the adapter", ["discover-api"], 8000, ["adapter"]),
		StepTemplate("configure", "Configure credentials and endpoints", ["discover-api"], 2000, ["settings"]),
		StepTemplate(
			"verify-integration",
			"Verify the integration end to end",
			["implement-adapter", "configure"],
			5000,
			["verdict"],
		),
	],
	"general": [
		StepTemplate("analyze", "Analyze: {description}", [], 4000, ["findings"]),
		StepTemplate("execute", "Execute: {description}", ["analyze"], 6000, ["result"]),
		StepTemplate("verify", "Verify the outcome", ["execute"], 3000, ["verdict"]),
	],
}

KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
	("build", ("create", "build")),
	("refactor", ("refactor",)),
	("integrate", ("integrate",)),
]


def template_tools() -> list[str]:
	"""Every tool name a template step can ask for."""
	return sorted({spec.key for specs in TEMPLATES.values() for spec in specs})


class TemplateDecomposer:
	"""Keyword-triggered template selection."""

	def select_template(self, description: str, conclusion: str = "") -> str:
		text = description.lower()
		for name, keywords in KEYWORDS:
			if any(kw in text for kw in keywords):
				return name
		if conclusion in TEMPLATES:
			return conclusion
		return "general"

	def breakdown(self, task: Task, conclusion: str = "") -> list[Step]:
		"""Expand a task into well-formed steps with ids `<task id>-<n>`."""
		name = self.select_template(task.description, conclusion)
		specs = TEMPLATES[name]
		ids = {spec.key: f"{task.id}-{index}" for index, spec in enumerate(specs, start=1)}

		steps = [
			Step(
				id=ids[spec.key],
				action=spec.key,
				description=spec.description.format(description=task.description),
				inputs={
					"task": task.description,
					"context": dict(task.context),
					"constraints": list(task.constraints),
					"hint": conclusion,
				},
				outputs=list(spec.outputs),
				dependencies=[ids[dep] for dep in spec.depends_on],
				timeout_ms=spec.timeout_ms,
			)
			for spec in specs
		]
		logger.info(f"Decomposed task {task.id} with '{name}' template into {len(steps)} steps")
		return steps
