# jobs.py
from __future__ import annotations

from .model import Job
from .tasks.dotnet import (
    checkout_task,
    dotnet_build_task,
    dotnet_test_task,
    nuget_push_task,
    pack_task,
    restore_task,
    setup_dotnet_task,
)
from .tasks.git import (
    add_release_tag_task,
    authenticate_task,
    configure_git_task,
    display_output_task,
    extract_project_property_task,
    step_output,
)


def release_condition(depends_on: str, branch_name: str) -> str:
    """
    Tag only after `depends_on` succeeded for a merged PR into `branch_name`
    whose title starts with RELEASES: and which carries the RELEASES label.
    """
    return (
        f"needs.{depends_on}.result == 'success' &&\n"
        "github.event.pull_request.merged &&\n"
        f"github.event.pull_request.base.ref == '{branch_name}' &&\n"
        "startsWith(github.event.pull_request.title, 'RELEASES:') &&\n"
        "contains(github.event.pull_request.labels.*.name, 'RELEASES')\n"
    )


def build_job(runs_on: str, dotnet_version: str, *, name: str = "") -> Job:
    """Checkout, setup .NET, restore, build and test."""
    return Job(
        runs_on=runs_on,
        name=name,
        steps=(
            checkout_task(),
            setup_dotnet_task(dotnet_version),
            restore_task(),
            dotnet_build_task(),
            dotnet_test_task(),
        ),
    )


def tag_job(
    runs_on: str,
    depends_on: str,
    project_relative_path: str,
    branch_name: str = "main",
    *,
    token: str = "${{ secrets.PAT_FOR_TAGGING }}",
) -> Job:
    """
    Read <Version> from the project file and push a v<Version> tag.

    The extraction step picks PowerShell or bash from `runs_on`, so the same
    job definition works on Windows and Linux runners.
    """
    version = step_output("extract_version", "version_number")
    return Job(
        runs_on=runs_on,
        needs=(depends_on,),
        if_=release_condition(depends_on, branch_name),
        steps=(
            checkout_task("Checkout code"),
            extract_project_property_task(
                name="Extract Version",
                id="extract_version",
                project_relative_path=project_relative_path,
                property_name="Version",
                step_variable_name="version_number",
                runs_on=runs_on,
            ),
            display_output_task("Display Version", "extract_version", "version_number", "Version number"),
            configure_git_task(),
            authenticate_task(token),
            add_release_tag_task(version),
        ),
    )


def publish_job(
    runs_on: str,
    depends_on: str,
    dotnet_version: str,
    nuget_api_key: str = "${{ secrets.NUGET_ACCESS }}",
) -> Job:
    """Build in Release, pack and push to NuGet once `depends_on` succeeded."""
    return Job(
        runs_on=runs_on,
        needs=(depends_on,),
        if_=f"needs.{depends_on}.result == 'success'",
        steps=(
            checkout_task(),
            setup_dotnet_task(dotnet_version),
            restore_task(),
            dotnet_build_task(configuration="Release"),
            pack_task(),
            nuget_push_task(nuget_api_key),
        ),
    )
