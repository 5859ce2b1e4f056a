# typedci_workflow.py
# Build, tag and publish pipeline for a .NET library, rendered with:
#   typedci render --output .github/workflows/build.yml
from __future__ import annotations
from typedci import build_job, publish_job, tag_job, wf

RUNS_ON = "ubuntu-latest"
PROJECT = "./src/MyLibrary/MyLibrary.csproj"


def workflow():
    return wf(
        "Build",
        push=["main"],
        pull_request=["main"],
        build=build_job(RUNS_ON, dotnet_version="8.0.x"),
        add_tag=tag_job(RUNS_ON, depends_on="build", project_relative_path=PROJECT),
        publish=publish_job(RUNS_ON, depends_on="add_tag", dotnet_version="8.0.x"),
    )
