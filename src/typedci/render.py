# render.py
from __future__ import annotations

import json
import runpy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .model import Pipeline
from .serializer import serialize
from .settings import FORMATS


# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------

@dataclass
class WorkflowLoadError(Exception):
    """A workflow file could not be turned into a Pipeline."""
    kind: str
    path: str
    message: str
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        lines = [f"{self.kind}: {self.message}", f"path={self.path}"]
        for k, v in self.details.items():
            lines.append(f"{k}={v}")
        return "\n".join(lines)


# ----------------------------------------------------------------------
# Emitters
# ----------------------------------------------------------------------

class WorkflowDumper(yaml.SafeDumper):
    """SafeDumper that indents sequences under their key, GitHub style."""

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)


def _represent_str(dumper: yaml.SafeDumper, data: str):
    # scripts and multi-line conditions read best as literal blocks
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


WorkflowDumper.add_representer(str, _represent_str)


def to_yaml(value: Any) -> str:
    """Serialize a model (or document tree) and emit YAML, keeping key order."""
    return yaml.dump(
        serialize(value),
        Dumper=WorkflowDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=4096,
    )


def to_json(value: Any, indent: int = 2) -> str:
    return json.dumps(serialize(value), indent=indent, ensure_ascii=False) + "\n"


def render(pipeline: Pipeline, fmt: str = "yaml") -> str:
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(FORMATS)}")
    if fmt == "json":
        return to_json(pipeline)
    return to_yaml(pipeline)


def write_rendered(text: str, output: str | Path) -> Path:
    out = Path(output)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    return out


# ----------------------------------------------------------------------
# Workflow loading (local file/module)
# ----------------------------------------------------------------------

def load_workflow(path: str | Path) -> Pipeline:
    """
    Load a pipeline from a python file path.

    The file must define either:
      - workflow() -> Pipeline
      - PIPELINE = Pipeline(...)
    """
    wf_path = Path(path).expanduser().resolve()
    if not wf_path.exists():
        raise WorkflowLoadError(
            kind="not_found",
            path=str(wf_path),
            message="Workflow file not found",
        )
    if wf_path.suffix != ".py":
        raise WorkflowLoadError(
            kind="not_python",
            path=str(wf_path),
            message=f"Workflow must be a .py file, got: {wf_path.name}",
        )

    module_name = f"typedci_workflow_{wf_path.stem}"
    globals_dict = runpy.run_path(str(wf_path), run_name=module_name)

    pipeline = None
    if "workflow" in globals_dict and callable(globals_dict["workflow"]):
        try:
            pipeline = globals_dict["workflow"]()
        except TypeError as e:
            if "required positional argument" in str(e):
                raise WorkflowLoadError(
                    kind="name_collision",
                    path=str(wf_path),
                    message=(
                        "Your workflow() shadows the `workflow` helper. "
                        "Use `wf` instead: `from typedci import wf, job, sh`."
                    ),
                    details={"error": str(e)},
                ) from e
            raise
    elif "PIPELINE" in globals_dict:
        pipeline = globals_dict["PIPELINE"]

    if not isinstance(pipeline, Pipeline):
        raise WorkflowLoadError(
            kind="bad_workflow",
            path=str(wf_path),
            message="Workflow must return/define a Pipeline. Define workflow() -> Pipeline or PIPELINE = Pipeline(...).",
            details={"got": type(pipeline).__name__},
        )

    return pipeline
