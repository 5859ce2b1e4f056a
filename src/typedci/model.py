# model.py
from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, Union

from .fields import emit, model


class ShellEnvironments:
    """Shell names understood by GitHub Actions `shell:`."""
    BASH = "bash"
    SH = "sh"
    POWERSHELL_CORE = "pwsh"
    POWERSHELL = "powershell"
    CMD = "cmd"
    PYTHON = "python"


def _freeze(obj, name: str, value, kind=tuple) -> None:
    # copy caller-owned collections so later edits on their side don't leak in
    if value is not None:
        object.__setattr__(obj, name, kind(value))


def _names(value) -> Tuple[str, ...]:
    """A single name or a sequence of names, as a tuple: "main" -> ("main",)."""
    if isinstance(value, str):
        return (value,)
    return tuple(value)


# ---------------------------------------------------------------------
# Tasks (steps)
# ---------------------------------------------------------------------

@model
class RunTask:
    """A shell step: `run:` with an optional `shell:`."""
    name: str = emit(0, default="")
    run: str = emit(7, default="")
    id: str = emit(1, omit_default=True, default="")
    if_: str = emit(2, alias="if", omit_default=True, default="")
    env: Dict[str, str] = emit(3, omit_default=True, default_factory=dict)
    working_directory: str = emit(4, alias="working-directory", omit_default=True, default="")
    shell: str = emit(9, omit_default=True, default="")
    continue_on_error: bool = emit(10, alias="continue-on-error", omit_default=True, default=False)
    timeout_minutes: int = emit(11, alias="timeout-minutes", omit_default=True, default=0)

    def __post_init__(self):
        _freeze(self, "env", self.env, dict)


@model
class ActionTask:
    """A step that calls a published action: `uses:` with `with:` inputs."""
    name: str = emit(0, default="")
    uses: str = emit(5, default="")
    id: str = emit(1, omit_default=True, default="")
    if_: str = emit(2, alias="if", omit_default=True, default="")
    env: Dict[str, str] = emit(3, omit_default=True, default_factory=dict)
    with_: Dict[str, str] = emit(6, alias="with", omit_default=True, default_factory=dict)
    continue_on_error: bool = emit(10, alias="continue-on-error", omit_default=True, default=False)
    timeout_minutes: int = emit(11, alias="timeout-minutes", omit_default=True, default=0)

    def __post_init__(self):
        _freeze(self, "env", self.env, dict)
        _freeze(self, "with_", self.with_, dict)


def property_extraction_script(
    project_relative_path: str,
    property_name: str,
    step_variable_name: str,
    runs_on: str,
) -> Tuple[str, str]:
    """
    Return (shell, run) for a step that reads an MSBuild property out of a
    project file and publishes it as a step output named `step_variable_name`.

    Any runner label starting with "windows" (case-insensitive) gets
    PowerShell + Select-Xml; everything else gets bash + xmlstarlet.
    """
    var = step_variable_name
    publish = (
        f'echo "${var}"\n'
        f'echo "{var}<<EOF" >> $GITHUB_OUTPUT\n'
        f'echo "${var}" >> $GITHUB_OUTPUT\n'
        'echo "EOF" >> $GITHUB_OUTPUT\n'
    )

    if runs_on.lower().startswith("windows"):
        run = (
            "# Running on Windows\n"
            f"${var}=((Select-Xml -Path '{project_relative_path}' -XPath '//{property_name}').Node.InnerXML)\n"
            + publish
        )
        return ShellEnvironments.POWERSHELL_CORE, run

    run = (
        "# Running on Linux/Unix\n"
        "sudo apt-get install xmlstarlet\n"
        f'{var}=$(xmlstarlet sel -t -v "//{property_name}" -n {project_relative_path})\n'
        + publish
    )
    return ShellEnvironments.BASH, run


@model(init=False)
class ExtractProjectPropertyTask:
    """
    Reads a property (e.g. Version) from a .csproj and exposes it as
    `steps.<id>.outputs.<step_variable_name>`.

    `run` and `shell` are fixed when the task is built; a different runner
    needs a new task.
    """
    name: str = emit(0, omit_default=True)
    id: str = emit(1, omit_default=True)
    run: str = emit(7)
    shell: str = emit(9)

    def __init__(
        self,
        name: str,
        id: str,
        project_relative_path: str,
        property_name: str,
        step_variable_name: str,
        runs_on: str,
    ):
        shell, run = property_extraction_script(
            project_relative_path, property_name, step_variable_name, runs_on
        )
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "id", id)
        object.__setattr__(self, "run", run)
        object.__setattr__(self, "shell", shell)


Task = Union[RunTask, ActionTask, ExtractProjectPropertyTask]


# ---------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------

@model
class Job:
    """
    A GitHub Actions job. `steps` keeps the caller's order.

    Nested jobs are accepted in `steps` and rendered inline; this is what
    makes a self-referencing tree possible, which the serializer rejects.
    """
    runs_on: str = emit(1, alias="runs-on")
    steps: Tuple[Union[Task, "Job"], ...] = emit(8, default=())
    name: str = emit(0, omit_default=True, default="")
    needs: Tuple[str, ...] = emit(2, omit_default=True, default=())
    if_: str = emit(3, alias="if", omit_default=True, default="")
    environment: str = emit(4, omit_default=True, default="")
    permissions: Dict[str, str] = emit(5, omit_default=True, default_factory=dict)
    env: Dict[str, str] = emit(6, omit_default=True, default_factory=dict)
    timeout_minutes: int = emit(7, alias="timeout-minutes", omit_default=True, default=0)

    def __post_init__(self):
        _freeze(self, "steps", self.steps)
        object.__setattr__(self, "needs", _names(self.needs))
        _freeze(self, "permissions", self.permissions, dict)
        _freeze(self, "env", self.env, dict)


# ---------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------

@model
class PushEvent:
    branches: Tuple[str, ...] = emit(0, omit_default=True, default=())
    tags: Tuple[str, ...] = emit(1, omit_default=True, default=())
    paths: Tuple[str, ...] = emit(2, omit_default=True, default=())

    def __post_init__(self):
        for name in ("branches", "tags", "paths"):
            object.__setattr__(self, name, _names(getattr(self, name)))


@model
class PullRequestEvent:
    branches: Tuple[str, ...] = emit(0, omit_default=True, default=())
    paths: Tuple[str, ...] = emit(2, omit_default=True, default=())
    types: Tuple[str, ...] = emit(3, omit_default=True, default=())

    def __post_init__(self):
        for name in ("branches", "paths", "types"):
            object.__setattr__(self, name, _names(getattr(self, name)))


@model
class Events:
    push: Optional[PushEvent] = emit(0, omit_default=True, default=None)
    pull_request: Optional[PullRequestEvent] = emit(1, omit_default=True, default=None)


# ---------------------------------------------------------------------
# Pipeline (workflow root)
# ---------------------------------------------------------------------

@model
class Pipeline:
    """
    Root of a workflow document: name, triggers, env and named jobs.

    Job slots set to None are dropped, so an optional stage can be written as
    `publish=publish_job(...) if release else None`. Triggers are not
    checked; a pipeline built with an empty Events renders as `on: {}`.
    """
    name: str = emit(0)
    on: Events = emit(1)
    jobs: Dict[str, Job] = emit(3, default_factory=dict)
    env: Dict[str, str] = emit(2, omit_default=True, default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "jobs", {k: v for k, v in self.jobs.items() if v is not None}
        )
        _freeze(self, "env", self.env, dict)


def events(
    *,
    push: str | Sequence[str] | PushEvent | None = None,
    pull_request: str | Sequence[str] | PullRequestEvent | None = None,
) -> Events:
    """Shorthand: events(push=["main"], pull_request=["main"])."""
    if push is not None and not isinstance(push, PushEvent):
        push = PushEvent(branches=_names(push))
    if pull_request is not None and not isinstance(pull_request, PullRequestEvent):
        pull_request = PullRequestEvent(branches=_names(pull_request))
    return Events(push=push, pull_request=pull_request)
