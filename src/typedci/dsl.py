# src/typedci/dsl.py
from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Union

from .model import ActionTask, Events, Job, Pipeline, RunTask, Task, events


# ---------------------------------------------------------------------
# Step helpers
# ---------------------------------------------------------------------

def sh(
    name: str,
    cmd: str,
    *,
    shell: str = "",
    id: str = "",
    if_: str = "",
    env: Optional[Dict[str, str]] = None,
    working_directory: str = "",
) -> RunTask:
    """Create a shell step."""
    return RunTask(
        name=name,
        run=cmd,
        shell=shell,
        id=id,
        if_=if_,
        env=env or {},
        working_directory=working_directory,
    )


def uses(
    name: str,
    action: str,
    *,
    id: str = "",
    if_: str = "",
    env: Optional[Dict[str, str]] = None,
    **inputs: str,
) -> ActionTask:
    """
    Create an action step. Keyword arguments become `with:` inputs;
    underscores are turned into dashes (dotnet_version -> dotnet-version).
    """
    with_ = {k.replace("_", "-"): str(v) for k, v in inputs.items()}
    return ActionTask(name=name, uses=action, id=id, if_=if_, env=env or {}, with_=with_)


# ---------------------------------------------------------------------
# Job helper
# ---------------------------------------------------------------------

def job(
    runs_on: str,
    *steps: Task,  # allow: job("ubuntu-latest", sh(...), sh(...))
    steps_list: Optional[List[Task]] = None,  # allow: job("x", steps_list=[...])
    name: str = "",
    needs: Union[str, Sequence[str], None] = None,
    if_: str = "",
    environment: str = "",
    permissions: Optional[Dict[str, str]] = None,
    env: Optional[Dict[str, str]] = None,
    timeout_minutes: int = 0,
) -> Job:
    steps_final: List[Task] = []
    if steps_list:
        steps_final.extend(list(steps_list))
    steps_final.extend(list(steps))

    if not steps_final:
        raise ValueError(f"job({runs_on!r}) must have at least one step")

    return Job(
        runs_on=runs_on,
        steps=tuple(steps_final),
        name=name,
        needs=needs or (),
        if_=if_,
        environment=environment,
        permissions=permissions or {},
        env=env or {},
        timeout_minutes=timeout_minutes,
    )


# ---------------------------------------------------------------------
# Workflow helper (single-file story)
# ---------------------------------------------------------------------

def wf(
    name: str,
    *,
    on: Events | None = None,
    push: str | Sequence[str] | None = None,
    pull_request: str | Sequence[str] | None = None,
    env: Optional[Dict[str, str]] = None,
    jobs: Optional[Mapping[str, Optional[Job]]] = None,
    **named_jobs: Optional[Job],
) -> Pipeline:
    """
    Workflow definition helper.

        from typedci import wf, job, sh

        def workflow():
            return wf(
                "Build",
                push=["main"],
                pull_request=["main"],
                build=job("ubuntu-latest", sh("Test", "make test")),
            )

    Job ids come from the keyword names and keep their order. The names
    name, on, push, pull_request, env and jobs are taken by the helper
    itself; pass such ids through `jobs={...}` instead (mapping entries come
    first). A job given as None is left out of the document.

    Without `on`, `push` or `pull_request` the document gets `on: {}`.
    """
    if on is None:
        on = events(push=push, pull_request=pull_request)
    all_jobs: Dict[str, Optional[Job]] = dict(jobs or {})
    all_jobs.update(named_jobs)
    return Pipeline(name=name, on=on, jobs=all_jobs, env=env or {})


workflow = wf  # alias; avoid naming your own function workflow if you use it
