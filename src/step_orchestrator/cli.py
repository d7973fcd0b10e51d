"""CLI for step-orchestrator: plan, run and config commands."""

import argparse
import asyncio
import json
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from typing import Awaitable, Callable

from rich.console import Console
from rich.markup import escape

from .config import Config, load_config
from .decomposition import template_tools
from .errors import OrchestratorError
from .logging_config import setup_logging
from .models import ExecutionPlan, StepResult, Task
from .orchestrator import create_orchestrator
from .tools.registry import ToolRegistry, echo_tool
from .visualizer.plan_view import render_plan, render_result, render_step_result


def _parse_context(pairs: list[str] | None) -> dict[str, str]:
	"""Parse KEY=VALUE pairs into a dict."""
	context: dict[str, str] = {}
	for pair in pairs or []:
		key, sep, value = pair.partition("=")
		if not sep or not key:
			raise argparse.ArgumentTypeError(f"Expected KEY=VALUE, got '{pair}'")
		context[key.strip()] = value.strip()
	return context


def _positive_int(value: str) -> int:
	try:
		number = int(value)
	except ValueError:
		raise argparse.ArgumentTypeError(f"Expected a positive integer, got '{value}'")
	if number < 1:
		raise argparse.ArgumentTypeError(f"Expected a positive integer, got {number}")
	return number


def _make_task(args: argparse.Namespace) -> Task:
	return Task(description=args.description, context=_parse_context(args.context))


def _echo_registry() -> ToolRegistry:
	"""Registry with an echo tool under every template tool name."""
	return ToolRegistry([echo_tool(name) for name in template_tools()])


def _progress_printer(console: Console) -> Callable[[StepResult], Awaitable[None]]:
	"""Step callback printing one line per resolved step."""
	async def _print(result: StepResult) -> None:
		render_step_result(result, console=console)

	return _print


def cmd_plan(args: argparse.Namespace, config: Config, console: Console) -> int:
	"""Show the plan a description would produce, without running it."""
	task = _make_task(args)
	orchestrator = create_orchestrator(config, registry=_echo_registry())

	async def _preview() -> tuple[str, ExecutionPlan]:
		return await orchestrator.explain_reasoning(task), await orchestrator.get_plan(task)

	explanation, plan = asyncio.run(_preview())
	console.print(f"[dim]{escape(explanation)}[/dim]")
	render_plan(plan, title=task.description, console=console)
	return 0


def cmd_run(args: argparse.Namespace, config: Config, console: Console) -> int:
	"""Execute a description with echo tools and report the result."""
	if args.enforce_timeouts:
		config.enforce_timeouts = True
	if args.max_concurrency is not None:
		config.max_concurrency = args.max_concurrency

	on_step_complete = None if args.json else _progress_printer(console)
	orchestrator = create_orchestrator(config, registry=_echo_registry(), on_step_complete=on_step_complete)
	result = asyncio.run(orchestrator.execute_task(_make_task(args)))

	if args.json:
		print(json.dumps(result.to_dict(), indent=2))
	else:
		if result.plan is not None:
			render_plan(result.plan, title=args.description, console=console)
		render_result(result, console=console)
	return 0 if result.success else 1


def cmd_config(args: argparse.Namespace, config: Config, console: Console) -> int:
	"""Print the resolved configuration."""
	print(json.dumps(config.as_dict(), indent=2))
	return 0


def _get_version() -> str:
	try:
		return pkg_version("step-orchestrator")
	except PackageNotFoundError:
		return "unknown"


def build_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(
		prog="step-orchestrator",
		description="Plan and run multi-step tasks as dependency-ordered levels",
	)
	parser.add_argument("--version", action="version", version=f"%(prog)s {_get_version()}")
	parser.add_argument("--log-level", type=str, default=None, help="Override log level")
	subparsers = parser.add_subparsers(dest="command")

	plan_parser = subparsers.add_parser("plan", help="Show the execution plan for a task")
	plan_parser.add_argument("description", type=str, help="Task description")
	plan_parser.add_argument("--context", nargs="*", metavar="KEY=VALUE", help="Task context entries")
	plan_parser.set_defaults(func=cmd_plan)

	run_parser = subparsers.add_parser("run", help="Execute a task with echo tools")
	run_parser.add_argument("description", type=str, help="Task description")
	run_parser.add_argument("--context", nargs="*", metavar="KEY=VALUE", help="Task context entries")
	run_parser.add_argument("--json", action="store_true", help="Print the result as JSON")
	run_parser.add_argument("--enforce-timeouts", action="store_true", help="Cancel steps that exceed their timeout")
	run_parser.add_argument("--max-concurrency", type=_positive_int, default=None, help="Max parallel steps per level")
	run_parser.set_defaults(func=cmd_run)

	config_parser = subparsers.add_parser("config", help="Show resolved configuration")
	config_parser.set_defaults(func=cmd_config)

	return parser


def main(argv: list[str] | None = None) -> None:
	parser = build_parser()
	args = parser.parse_args(argv)

	if not getattr(args, "func", None):
		parser.print_help()
		sys.exit(1)

	console = Console()
	try:
		config = load_config()
	except ValueError as e:
		console.print(f"[red]Config error:[/red] {escape(str(e))}")
		sys.exit(1)
	setup_logging(level=args.log_level or config.log_level, log_dir=config.log_dir)

	try:
		code = args.func(args, config, console)
	except argparse.ArgumentTypeError as e:
		parser.error(str(e))
	except OrchestratorError as e:
		console.print(f"[red]Error:[/red] {escape(str(e))}")
		code = 1
	sys.exit(code)


if __name__ == "__main__":
	main()
