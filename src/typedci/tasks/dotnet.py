# tasks/dotnet.py
from __future__ import annotations

from typing import Dict

from ..model import ActionTask, RunTask

NUGET_SOURCE = "https://api.nuget.org/v3/index.json"


# ---------------------------------------------------------------------
# Checkout / toolchain
# ---------------------------------------------------------------------

def checkout_task(
    name: str = "Check out",
    *,
    version: str = "v3",
    with_: Dict[str, str] | None = None,
) -> ActionTask:
    """actions/checkout at the given major version."""
    return ActionTask(name=name, uses=f"actions/checkout@{version}", with_=with_ or {})


def setup_dotnet_task(
    dotnet_version: str,
    name: str = "Setup .Net",
    *,
    include_prerelease: bool = False,
    version: str = "v3",
) -> ActionTask:
    inputs = {"dotnet-version": dotnet_version}
    if include_prerelease:
        inputs["include-prerelease"] = "true"
    return ActionTask(name=name, uses=f"actions/setup-dotnet@{version}", with_=inputs)


# ---------------------------------------------------------------------
# dotnet CLI steps
# ---------------------------------------------------------------------

def restore_task(name: str = "Restore") -> RunTask:
    return RunTask(name=name, run="dotnet restore")


def dotnet_build_task(name: str = "Build", *, configuration: str | None = None) -> RunTask:
    cmd = "dotnet build --no-restore"
    if configuration:
        cmd += f" --configuration {configuration}"
    return RunTask(name=name, run=cmd)


def dotnet_test_task(name: str = "Test", *, verbosity: str = "normal") -> RunTask:
    return RunTask(name=name, run=f"dotnet test --no-build --verbosity {verbosity}")


def pack_task(name: str = "Pack NuGet Package", *, configuration: str = "Release") -> RunTask:
    return RunTask(
        name=name,
        run=f"dotnet pack --configuration {configuration} --include-symbols",
    )


def nuget_push_task(
    api_key: str,
    name: str = "Push NuGet Package",
    *,
    source: str = NUGET_SOURCE,
    configuration: str = "Release",
) -> RunTask:
    """
    Push every package produced by pack_task.

    `api_key` is emitted verbatim, so pass a secret reference such as
    "${{ secrets.NUGET_ACCESS }}", never the key itself.
    """
    return RunTask(
        name=name,
        run=(
            f"dotnet nuget push **/bin/{configuration}/**/*.nupkg "
            f"--source {source} --api-key {api_key} --skip-duplicate"
        ),
    )
