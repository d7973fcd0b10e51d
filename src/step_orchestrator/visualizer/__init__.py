"""Visualizer module - Rich terminal views for plans and results."""

from .plan_view import format_duration, render_plan, render_result, render_step_result

__all__ = [
	"format_duration",
	"render_plan",
	"render_result",
	"render_step_result",
]
