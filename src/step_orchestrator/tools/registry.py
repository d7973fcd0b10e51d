"""Tool registry - named async callables that steps run."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from ..errors import ToolNotFoundError

logger = logging.getLogger(__name__)

ToolCallable = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass
class ToolDefinition:
	"""A tool that can execute a step's inputs."""
	name: str
	execute: ToolCallable
	timeout_ms: Optional[int] = None
	retryable: bool = True
	description: str = ""


class ToolRegistry:
	"""Name-to-tool mapping used by the executor."""

	def __init__(self, tools: Optional[list[ToolDefinition]] = None):
		self._tools: dict[str, ToolDefinition] = {}
		for tool in tools or []:
			self.register(tool)

	def register(self, tool: ToolDefinition) -> None:
		"""Register a tool, replacing any tool with the same name."""
		if tool.name in self._tools:
			logger.warning(f"Replacing registered tool '{tool.name}'")
		self._tools[tool.name] = tool

	def get(self, name: str) -> ToolDefinition:
		tool = self._tools.get(name)
		if tool is None:
			raise ToolNotFoundError(name)
		return tool

	def list(self) -> list[str]:
		return sorted(self._tools)

	def __contains__(self, name: object) -> bool:
		return name in self._tools

	def __len__(self) -> int:
		return len(self._tools)


def echo_tool(name: str = "echo") -> ToolDefinition:
	"""A tool that returns its inputs unchanged. Useful for dry runs."""

	async def _echo(inputs: dict[str, Any]) -> dict[str, Any]:
		return dict(inputs)

	return ToolDefinition(name=name, execute=_echo, description="Echo step inputs back as output")
