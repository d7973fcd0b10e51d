"""Rich views for execution plans and results."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree

from ..models import ExecutionPlan, ExecutionResult, StepResult, StepStatus

STATUS_ICONS = {
	StepStatus.PENDING: r"[dim]\[ ][/dim]",
	StepStatus.RUNNING: r"[yellow]\[~][/yellow]",
	StepStatus.COMPLETED: r"[green]\[x][/green]",
	StepStatus.FAILED: r"[red]\[!][/red]",
}


def format_duration(seconds: float) -> str:
	"""Format a duration for display. e.g. '1.2s', '45ms', '2m 3s'."""
	if seconds < 0.001:
		return "<1ms"
	if seconds < 1.0:
		return f"{seconds * 1000:.0f}ms"
	if seconds < 60.0:
		return f"{seconds:.1f}s"
	minutes = int(seconds // 60)
	secs = seconds % 60
	return f"{minutes}m {secs:.0f}s"


def render_plan(plan: ExecutionPlan, title: str = "Execution plan", console: Optional[Console] = None) -> None:
	"""Render a plan as a Rich Tree of levels and steps."""
	console = console or Console()

	tree = Tree(
		f"[bold]{title}[/bold]  "
		f"[dim]({plan.total_steps} steps, {len(plan.groups)} levels, "
		f"~{format_duration(plan.estimated_duration_ms / 1000)})[/dim]"
	)

	for group in plan.groups:
		mode = "[cyan]parallel[/cyan]" if group.can_parallelize else "[dim]sequential[/dim]"
		branch = tree.add(f"[bold]Level {group.level}[/bold] {mode}")
		for step in group.steps:
			icon = STATUS_ICONS.get(step.status, r"\[ ]")
			deps = f" [dim]<- {', '.join(step.dependencies)}[/dim]" if step.dependencies else ""
			branch.add(f"{icon} {step.id} [bold]{step.action}[/bold] {step.description}{deps}")

	console.print(tree)


def render_result(result: ExecutionResult, console: Optional[Console] = None) -> None:
	"""Render step outcomes as a table with a summary panel."""
	console = console or Console()

	if result.steps:
		table = Table(title=f"Task {result.task_id}")
		table.add_column("Step")
		table.add_column("Status")
		table.add_column("Duration", justify="right")
		table.add_column("Retries", justify="right")
		table.add_column("Error")

		for r in result.steps:
			if r.success:
				status = "[green]OK[/green]"
			elif r.skipped:
				status = "[yellow]SKIPPED[/yellow]"
			else:
				status = "[red]FAIL[/red]"
			table.add_row(r.step_id, status, format_duration(r.duration_seconds), str(r.retries), r.error or "")

		console.print(table)

	lines = [
		f"[bold]Success:[/bold] {'yes' if result.success else 'no'}",
		f"[bold]Completed:[/bold] {result.completed_steps}",
		f"[bold]Failed:[/bold] {result.failed_steps}",
		f"[bold]Duration:[/bold] {format_duration(result.duration_seconds)}",
	]
	if result.errors:
		lines.append("")
		lines.append("[bold]Errors:[/bold]")
		for e in result.errors:
			lines.append(f"  - {type(e).__name__}: {e}")

	console.print(Panel(
		"\n".join(lines),
		title="Result",
		border_style="green" if result.success else "red",
	))


def render_step_result(result: StepResult, console: Optional[Console] = None) -> None:
	"""Print a one-line progress entry for a resolved step."""
	console = console or Console()
	if result.success:
		icon = STATUS_ICONS[StepStatus.COMPLETED]
	elif result.skipped:
		icon = STATUS_ICONS[StepStatus.PENDING]
	else:
		icon = STATUS_ICONS[StepStatus.FAILED]
	detail = f" [dim]{escape(result.error)}[/dim]" if result.error else ""
	console.print(f"{icon} {escape(result.step_id)} ({format_duration(result.duration_seconds)}){detail}")
