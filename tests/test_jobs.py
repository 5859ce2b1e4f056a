import pytest

from typedci.dsl import job, sh, uses, wf
from typedci.jobs import build_job, publish_job, release_condition, tag_job
from typedci.model import ActionTask, ExtractProjectPropertyTask, RunTask
from typedci.serializer import serialize


def test_build_job_steps():
    out = serialize(build_job("ubuntu-latest", "8.0.x"))
    assert out["runs-on"] == "ubuntu-latest"
    assert [s["name"] for s in out["steps"]] == ["Check out", "Setup .Net", "Restore", "Build", "Test"]
    assert out["steps"][1]["with"] == {"dotnet-version": "8.0.x"}
    assert "needs" not in out and "if" not in out


@pytest.mark.parametrize("runs_on,shell", [("windows-latest", "pwsh"), ("ubuntu-latest", "bash")])
def test_tag_job_extracts_version_for_its_runner(runs_on, shell):
    tag = tag_job(runs_on, depends_on="build", project_relative_path="./src/Lib/Lib.csproj")

    extract = tag.steps[1]
    assert isinstance(extract, ExtractProjectPropertyTask)
    assert extract.id == "extract_version"
    assert extract.shell == shell
    assert "./src/Lib/Lib.csproj" in extract.run

    out = serialize(tag)
    assert out["needs"] == ["build"]
    assert out["if"].startswith("needs.build.result == 'success' &&")
    assert "github.event.pull_request.base.ref == 'main'" in out["if"]
    assert out["steps"][-1]["run"].startswith(
        'git tag -a "v${{ steps.extract_version.outputs.version_number }}"'
    )


def test_release_condition_uses_branch_name():
    cond = release_condition("build", "release")
    assert "base.ref == 'release'" in cond
    assert "RELEASES" in cond


def test_publish_job_pushes_with_secret_reference():
    out = serialize(publish_job("ubuntu-latest", depends_on="add_tag", dotnet_version="8.0.x"))
    assert out["needs"] == ["add_tag"]
    assert out["if"] == "needs.add_tag.result == 'success'"
    push = out["steps"][-1]
    assert push["name"] == "Push NuGet Package"
    assert "--api-key ${{ secrets.NUGET_ACCESS }}" in push["run"]
    assert "--skip-duplicate" in push["run"]


def test_full_release_pipeline_job_order():
    p = wf(
        "Build",
        push=["main"],
        pull_request=["main"],
        build=build_job("ubuntu-latest", "8.0.x"),
        add_tag=tag_job("ubuntu-latest", "build", "./Lib.csproj"),
        publish=publish_job("ubuntu-latest", "add_tag", "8.0.x"),
    )
    out = serialize(p)
    assert list(out) == ["name", "on", "jobs"]
    assert list(out["jobs"]) == ["build", "add_tag", "publish"]


def test_dsl_helpers_build_expected_types():
    step = sh("Lint", "ruff check .", shell="bash", working_directory="src")
    assert isinstance(step, RunTask)
    assert step.working_directory == "src"

    action = uses("Setup", "actions/setup-python@v5", python_version="3.12")
    assert isinstance(action, ActionTask)
    assert action.with_ == {"python-version": "3.12"}


def test_job_requires_steps():
    with pytest.raises(ValueError):
        job("ubuntu-latest")


def test_job_collects_positional_and_list_steps():
    j = job("ubuntu-latest", sh("b", "b"), steps_list=[sh("a", "a")], needs="lint")
    assert [s.name for s in j.steps] == ["a", "b"]
    assert j.needs == ("lint",)


def test_no_cross_job_validation():
    # unknown `needs` targets are left for the CI provider to reject
    p = wf("loose", push=["main"], deploy=job("ubuntu-latest", sh("d", "d"), needs="missing"))
    assert serialize(p)["jobs"]["deploy"]["needs"] == ["missing"]
