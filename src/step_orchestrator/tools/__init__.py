"""Tools module - Tool definitions and registry."""

from .registry import ToolDefinition, ToolRegistry, echo_tool

__all__ = [
	"ToolDefinition",
	"ToolRegistry",
	"echo_tool",
]
