"""Tests for the tool registry."""

import pytest

from step_orchestrator.errors import ToolNotFoundError
from step_orchestrator.tools.registry import ToolRegistry, echo_tool

from .helpers import ok_tool


def test_register_and_get():
	registry = ToolRegistry()
	tool = ok_tool("build")
	registry.register(tool)

	assert registry.get("build") is tool
	assert "build" in registry
	assert len(registry) == 1


def test_get_unknown_raises():
	with pytest.raises(ToolNotFoundError) as exc_info:
		ToolRegistry().get("missing")
	assert exc_info.value.name == "missing"


def test_register_replaces():
	"""Registering the same name twice keeps the latest tool."""
	registry = ToolRegistry([ok_tool("a")])
	replacement = ok_tool("a", delay=0.1)
	registry.register(replacement)

	assert registry.get("a") is replacement
	assert len(registry) == 1


def test_list_sorted():
	registry = ToolRegistry([ok_tool("b"), ok_tool("a")])
	assert registry.list() == ["a", "b"]


@pytest.mark.asyncio
async def test_echo_tool():
	"""Echo returns a copy of its inputs."""
	tool = echo_tool("analyze")
	inputs = {"x": 1}
	output = await tool.execute(inputs)

	assert tool.name == "analyze"
	assert output == {"x": 1}
	assert output is not inputs
