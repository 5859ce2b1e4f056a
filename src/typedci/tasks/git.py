# tasks/git.py
from __future__ import annotations

from ..model import ActionTask, ExtractProjectPropertyTask, RunTask


def extract_project_property_task(
    name: str,
    id: str,
    project_relative_path: str,
    property_name: str,
    step_variable_name: str,
    runs_on: str,
) -> ExtractProjectPropertyTask:
    """Factory form of ExtractProjectPropertyTask; shell/script are picked from runs_on."""
    return ExtractProjectPropertyTask(
        name=name,
        id=id,
        project_relative_path=project_relative_path,
        property_name=property_name,
        step_variable_name=step_variable_name,
        runs_on=runs_on,
    )


def step_output(step_id: str, variable: str) -> str:
    """Expression that reads a step output, e.g. ${{ steps.x.outputs.version }}."""
    return "${{ steps." + step_id + ".outputs." + variable + " }}"


def display_output_task(name: str, step_id: str, variable: str, label: str) -> RunTask:
    return RunTask(name=name, run=f'echo "{label}: {step_output(step_id, variable)}"')


def configure_git_task(
    name: str = "Configure Git",
    *,
    user_name: str = "Add Git Release Tag Action",
    user_email: str = "github.action@github.com",
) -> RunTask:
    return RunTask(
        name=name,
        run=(
            f'git config user.name "{user_name}"\n'
            f'git config user.email "{user_email}"\n'
        ),
    )


def authenticate_task(
    token: str = "${{ secrets.PAT_FOR_TAGGING }}",
    name: str = "Authenticate with GitHub",
    *,
    version: str = "v3",
) -> ActionTask:
    return ActionTask(
        name=name,
        uses=f"actions/checkout@{version}",
        with_={"token": token},
    )


def add_release_tag_task(version: str, name: str = "Add Release Tag") -> RunTask:
    """Create and push an annotated `v<version>` tag; `version` is usually a step_output()."""
    return RunTask(
        name=name,
        run=(
            f'git tag -a "v{version}" -m "Release - v{version}"\n'
            "git push origin --tags\n"
        ),
    )
