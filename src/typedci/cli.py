# cli.py
from __future__ import annotations

import difflib
import sys
from pathlib import Path

import click

from typedci import settings
from typedci.fields import ConfigurationError
from typedci.model import Pipeline
from typedci.render import WorkflowLoadError, load_workflow, render, write_rendered
from typedci.ui.console import Console, set_console, get_console


def find_workflow_files() -> list[Path]:
    """
    Find all workflow files in the current directory.

    Returns:
        List of Path objects for workflow files
    """
    workflow_files = []
    current_dir = Path(".")

    default_workflow = current_dir / settings.DEFAULT_WORKFLOW_FILE
    if default_workflow.exists():
        workflow_files.append(default_workflow)

    for path in current_dir.glob("*_workflow.py"):
        if path != default_workflow:
            workflow_files.append(path)

    return sorted(workflow_files)


def discover_workflow(workflow_arg: str | None) -> Path:
    """
    Discover workflow file from argument, TYPEDCI_WORKFLOW or the current directory.

    Raises:
        SystemExit: If workflow cannot be found or multiple workflows exist
    """
    console = get_console()
    workflow_arg = workflow_arg or settings.WORKFLOW

    if workflow_arg:
        workflow_path = Path(workflow_arg)
        if not workflow_path.exists() and workflow_path.suffix != ".py":
            workflow_path = Path(str(workflow_path) + ".py")
        if not workflow_path.exists():
            console.print_error(
                "Workflow file not found",
                f"Could not find workflow file: {workflow_arg}",
                suggestion="Create a workflow file or specify a different path:\n  typedci render --workflow my_workflow.py",
            )
            sys.exit(1)
        return workflow_path

    workflow_files = find_workflow_files()

    if len(workflow_files) == 0:
        console.print_error(
            "No workflow file found",
            "Could not find any workflow files.",
            details=[
                "Looked for:",
                f"  {settings.DEFAULT_WORKFLOW_FILE}",
                "  *_workflow.py",
            ],
            suggestion=f"Create a workflow file:\n  {settings.DEFAULT_WORKFLOW_FILE}\n\nOr specify a workflow explicitly:\n  typedci render --workflow my_workflow.py",
        )
        sys.exit(1)

    if len(workflow_files) > 1:
        file_list = "\n".join(f"  {f}" for f in workflow_files)
        console.print_error(
            "Multiple workflow files found",
            "Found multiple workflow files. Please specify which one to use:",
            details=[file_list],
            suggestion=f"Specify a workflow explicitly:\n  typedci render --workflow {settings.DEFAULT_WORKFLOW_FILE}",
        )
        sys.exit(1)

    return workflow_files[0]


def _load(workflow_path: Path) -> Pipeline:
    console = get_console()
    try:
        pipeline = load_workflow(workflow_path)
    except WorkflowLoadError as e:
        console.print_error(
            "Failed to load workflow",
            e.message,
            details=[f"path: {e.path}"] + [f"{k}: {v}" for k, v in e.details.items()],
        )
        sys.exit(1)
    console.print_render_started(
        workflow=workflow_path.name,
        pipeline=pipeline.name,
        job_count=len(pipeline.jobs),
    )
    return pipeline


def _render_or_exit(pipeline: Pipeline, fmt: str) -> str:
    console = get_console()
    try:
        return render(pipeline, fmt)
    except ConfigurationError as e:
        console.print_error(
            "Invalid pipeline model",
            e.message,
            details=[f"kind: {e.kind}", f"model: {e.model}"]
            + ([f"field: {e.field}"] if e.field else [])
            + [f"{k}: {v}" for k, v in e.details.items()],
        )
        console.print_debug(str(e))
        sys.exit(1)


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """typedci — typed pipeline objects rendered to workflow YAML."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command("render")
@click.option(
    "--workflow",
    default=None,
    help=f"Workflow file path (defaults to {settings.DEFAULT_WORKFLOW_FILE} if present)",
)
@click.option(
    "--output",
    "-o",
    default=settings.OUTPUT,
    show_default=True,
    help="Where to write the document ('-' for stdout)",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(settings.FORMATS),
    default=settings.FORMAT,
    show_default=True,
    help="Output format",
)
@click.pass_context
def render_cmd(ctx, workflow, output, fmt):
    """Render a workflow file to YAML or JSON."""
    console = get_console()
    workflow_path = discover_workflow(workflow)

    try:
        pipeline = _load(workflow_path)
        text = _render_or_exit(pipeline, fmt)

        if output == "-":
            click.echo(text, nl=False)
        else:
            out = write_rendered(text, output)
            console.print_rendered(str(out), fmt)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


@cli.command()
@click.option(
    "--workflow",
    default=None,
    help=f"Workflow file path (defaults to {settings.DEFAULT_WORKFLOW_FILE} if present)",
)
@click.option("--output", "-o", required=True, help="Committed document to compare against")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(settings.FORMATS),
    default=settings.FORMAT,
    show_default=True,
    help="Output format",
)
@click.pass_context
def check(ctx, workflow, output, fmt):
    """Fail when the committed document differs from a fresh render."""
    console = get_console()
    workflow_path = discover_workflow(workflow)

    try:
        pipeline = _load(workflow_path)
        expected = _render_or_exit(pipeline, fmt)

        out = Path(output)
        current = out.read_text(encoding="utf-8") if out.exists() else ""
        if current == expected:
            console.print_up_to_date(str(out))
            return

        diff = list(difflib.unified_diff(
            current.splitlines(keepends=True),
            expected.splitlines(keepends=True),
            fromfile=f"{out} (committed)",
            tofile=f"{out} (rendered)",
        ))
        console.print_drift(str(out), diff)
        sys.exit(1)

    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
