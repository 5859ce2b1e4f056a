from .dsl import sh, uses, job, wf, workflow
from .fields import ConfigurationError, FieldSpec, descriptors, emit, model, register
from .jobs import build_job, tag_job, publish_job
from .model import (
    ActionTask,
    Events,
    ExtractProjectPropertyTask,
    Job,
    Pipeline,
    PullRequestEvent,
    PushEvent,
    RunTask,
    ShellEnvironments,
    Task,
    events,
)
from .render import load_workflow, render, to_json, to_yaml
from .serializer import serialize
from .tasks.git import extract_project_property_task

__all__ = [
    "sh", "uses", "job", "wf", "workflow",
    "ConfigurationError", "FieldSpec", "descriptors", "emit", "model", "register",
    "build_job", "tag_job", "publish_job",
    "ActionTask", "Events", "ExtractProjectPropertyTask", "Job", "Pipeline",
    "PullRequestEvent", "PushEvent", "RunTask", "ShellEnvironments", "Task", "events",
    "load_workflow", "render", "to_json", "to_yaml",
    "serialize", "extract_project_property_task",
]
