"""
Reasoning - Classifies a task description before decomposition.

The conclusion is only a hint for the decomposer; the scheduler never
depends on it being correct.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

from .errors import ReasoningError
from .models import Task

logger = logging.getLogger(__name__)


@dataclass
class Reasoning:
	"""Outcome of reasoning about a task description."""
	conclusion: str
	confidence: float
	rationale: list[str] = field(default_factory=list)


class ReasoningEngine(Protocol):
	"""Reasoning collaborator contract."""

	async def reason(self, description: str, context: dict[str, Any]) -> Reasoning:
		...

	async def explain(self, task: Task) -> str:
		...


class KeywordReasoner:
	"""
	Keyword-based reasoner.

	Picks the task category whose keywords best match the description.
	Confidence grows with the number of matched keywords.
	"""

	CATEGORIES: dict[str, list[str]] = {
		"build": ["create", "build", "add", "implement", "scaffold", "new"],
		"refactor": ["refactor", "restructure", "clean", "rename", "simplify"],
		"integrate": ["integrate", "connect", "sync", "webhook", "api"],
	}

	BASE_CONFIDENCE = 0.3

	async def reason(self, description: str, context: dict[str, Any]) -> Reasoning:
		if not description or not description.strip():
			raise ReasoningError("Cannot reason about an empty task description")

		words = set(re.findall(r"[a-z]+", description.lower()))
		scores = {
			category: [kw for kw in keywords if kw in words]
			for category, keywords in self.CATEGORIES.items()
		}
		best, matched = max(scores.items(), key=lambda item: len(item[1]))

		if not matched:
			return Reasoning(
				conclusion="general",
				confidence=self.BASE_CONFIDENCE,
				rationale=["No category keywords matched; using the general approach"],
			)

		confidence = min(1.0, self.BASE_CONFIDENCE + 0.2 * len(matched))
		rationale = [f"Matched {best} keywords: {', '.join(matched)}"]
		if context:
			rationale.append(f"Context keys: {', '.join(sorted(context))}")

		logger.debug(f"Reasoned '{best}' ({confidence:.2f}) for: {description[:60]}")
		return Reasoning(conclusion=best, confidence=confidence, rationale=rationale)

	async def explain(self, task: Task) -> str:
		reasoning = await self.reason(task.description, task.context)
		lines = [
			f"Task: {task.description}",
			f"Conclusion: {reasoning.conclusion} (confidence {reasoning.confidence:.0%})",
		]
		lines.extend(f"- {line}" for line in reasoning.rationale)
		return "\n".join(lines)
