"""
Step graph - Dependency resolution, cycle detection and leveling.

Everything here is a pure function over a step list. No I/O, no state.
"""

import logging
from typing import Optional

from ..errors import (
	CircularDependencyError,
	DuplicateStepError,
	StepGraphError,
	UnresolvedDependencyError,
)
from ..models import DependencyGraph, Resolution, Step, StepGroup

logger = logging.getLogger(__name__)

DEFAULT_STEP_TIMEOUT_MS = 5000


def resolve(steps: list[Step]) -> DependencyGraph:
	"""
	Build a level-ordered dependency graph from a step list.

	Args:
		steps: Steps with unique ids whose dependencies reference each other

	Returns:
		DependencyGraph whose levels partition the steps

	Raises:
		DuplicateStepError: Two steps share an id
		UnresolvedDependencyError: A dependency names a step not in the list
		CircularDependencyError: The dependencies are not acyclic
	"""
	nodes: dict[str, Step] = {}
	edges: dict[str, list[str]] = {}

	for step in steps:
		if step.id in nodes:
			raise DuplicateStepError(step.id)
		nodes[step.id] = step
		edges[step.id] = list(dict.fromkeys(step.dependencies))

	for step_id, deps in edges.items():
		for dep in deps:
			if dep not in nodes:
				raise UnresolvedDependencyError(step_id, dep)

	cycle = _find_cycle(edges)
	if cycle:
		raise CircularDependencyError(cycle)

	levels = _compute_levels(nodes, edges)
	logger.debug(f"Resolved {len(nodes)} steps into {len(levels)} levels")
	return DependencyGraph(nodes=nodes, edges=edges, levels=levels)


def resolve_steps(steps: list[Step]) -> Resolution:
	"""Like resolve(), but returns structural errors instead of raising them."""
	try:
		return Resolution(graph=resolve(steps))
	except StepGraphError as e:
		return Resolution(error=e)


def _find_cycle(edges: dict[str, list[str]]) -> Optional[list[str]]:
	"""
	Depth-first search for a cycle over the whole graph.

	Uses an explicit stack so long dependency chains do not hit the
	interpreter recursion limit.

	Returns:
		The cycle as a path of ids (first id repeated at the end), or None
	"""
	visited: set[str] = set()
	on_stack: set[str] = set()

	for root in edges:
		if root in visited:
			continue

		visited.add(root)
		on_stack.add(root)
		path = [root]
		stack = [iter(edges[root])]

		while stack:
			dep = next(stack[-1], None)
			if dep is None:
				stack.pop()
				on_stack.discard(path.pop())
				continue
			if dep in on_stack:
				return path[path.index(dep):] + [dep]
			if dep not in visited:
				visited.add(dep)
				on_stack.add(dep)
				path.append(dep)
				stack.append(iter(edges[dep]))

	return None


def _compute_levels(nodes: dict[str, Step], edges: dict[str, list[str]]) -> list[list[Step]]:
	"""
	Kahn-style leveling.

	Each round takes every unprocessed step whose dependencies are all
	processed. Input order is kept within a level.
	"""
	remaining = {step_id: len(deps) for step_id, deps in edges.items()}
	dependents: dict[str, list[str]] = {step_id: [] for step_id in nodes}
	for step_id, deps in edges.items():
		for dep in deps:
			dependents[dep].append(step_id)

	processed: set[str] = set()
	levels: list[list[Step]] = []

	while len(processed) < len(nodes):
		ready = [
			step_id for step_id in nodes
			if step_id not in processed and remaining[step_id] == 0
		]
		if not ready:
			stuck = [step_id for step_id in nodes if step_id not in processed]
			raise CircularDependencyError(stuck)

		levels.append([nodes[step_id] for step_id in ready])
		processed.update(ready)
		for step_id in ready:
			for dependent in dependents[step_id]:
				remaining[dependent] -= 1

	return levels


def find_parallel_groups(graph: DependencyGraph) -> list[StepGroup]:
	"""One group per level, in level order."""
	return [
		StepGroup(level=index, steps=list(level))
		for index, level in enumerate(graph.levels)
	]


def estimate_duration(
	groups: list[StepGroup],
	default_timeout_ms: int = DEFAULT_STEP_TIMEOUT_MS,
) -> int:
	"""
	Estimate plan wall-clock time in milliseconds.

	Levels run one after another. A parallel group costs its slowest step,
	a sequential group the sum of its steps.
	"""
	total = 0
	for group in groups:
		costs = [
			step.timeout_ms if step.timeout_ms is not None else default_timeout_ms
			for step in group.steps
		]
		if not costs:
			continue
		total += max(costs) if group.can_parallelize else sum(costs)
	return total
