import textwrap

import pytest
import yaml
from click.testing import CliRunner

from typedci.cli import cli

WORKFLOW = """
from typedci import wf, job, sh, tag_job

def workflow():
    return wf(
        "CI",
        push=["main"],
        test=job("ubuntu-latest", sh("Test", "pytest -q")),
        add_tag=tag_job("windows-latest", "test", "./Lib.csproj"),
    )
"""


@pytest.fixture
def workflow_file(tmp_path):
    path = tmp_path / "typedci_workflow.py"
    path.write_text(textwrap.dedent(WORKFLOW), encoding="utf-8")
    return path


def test_render_to_file(tmp_path, workflow_file):
    out = tmp_path / ".github" / "workflows" / "ci.yml"
    result = CliRunner().invoke(cli, ["render", "--workflow", str(workflow_file), "--output", str(out)])

    assert result.exit_code == 0, result.output
    doc = yaml.safe_load(out.read_text(encoding="utf-8"))
    assert list(doc) == ["name", "on", "jobs"]
    assert doc["jobs"]["add_tag"]["steps"][1]["shell"] == "pwsh"
    assert "RENDERED" in result.output


def test_render_to_stdout(workflow_file):
    result = CliRunner().invoke(cli, ["render", "--workflow", str(workflow_file), "--output", "-"])
    assert result.exit_code == 0, result.output
    assert "name: CI\n" in result.output
    assert "run: pytest -q" in result.output


def test_render_json(tmp_path, workflow_file):
    out = tmp_path / "ci.json"
    result = CliRunner().invoke(
        cli, ["render", "--workflow", str(workflow_file), "--output", str(out), "--format", "json"]
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").startswith('{\n  "name": "CI"')


def test_check_up_to_date_and_drift(tmp_path, workflow_file):
    out = tmp_path / "ci.yml"
    runner = CliRunner()
    runner.invoke(cli, ["render", "--workflow", str(workflow_file), "--output", str(out)])

    ok = runner.invoke(cli, ["check", "--workflow", str(workflow_file), "--output", str(out)])
    assert ok.exit_code == 0, ok.output
    assert "up to date" in ok.output

    out.write_text(out.read_text(encoding="utf-8").replace("pytest -q", "pytest"), encoding="utf-8")
    drift = runner.invoke(cli, ["check", "--workflow", str(workflow_file), "--output", str(out)])
    assert drift.exit_code == 1
    assert "out of date" in drift.output
    assert any(
        line.startswith("+") and line.endswith("run: pytest -q")
        for line in drift.output.splitlines()
    )


def test_check_missing_output_is_drift(tmp_path, workflow_file):
    result = CliRunner().invoke(
        cli, ["check", "--workflow", str(workflow_file), "--output", str(tmp_path / "absent.yml")]
    )
    assert result.exit_code == 1


def test_discovers_default_workflow(tmp_path, workflow_file, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["render", "--output", "-"])
    assert result.exit_code == 0, result.output
    assert "name: CI" in result.output


def test_no_workflow_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["render"])
    assert result.exit_code == 1
    assert "No workflow file found" in result.output


def test_multiple_workflows_found(tmp_path, workflow_file, monkeypatch):
    (tmp_path / "other_workflow.py").write_text(textwrap.dedent(WORKFLOW), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    result = CliRunner().invoke(cli, ["render"])
    assert result.exit_code == 1
    assert "Multiple workflow files found" in result.output


def test_bad_workflow_reports_load_error(tmp_path):
    path = tmp_path / "bad_workflow.py"
    path.write_text("PIPELINE = 42\n", encoding="utf-8")
    result = CliRunner().invoke(cli, ["render", "--workflow", str(path)])
    assert result.exit_code == 1
    assert "Failed to load workflow" in result.output


def test_cyclic_model_reports_configuration_error(tmp_path):
    path = tmp_path / "loop_workflow.py"
    path.write_text(textwrap.dedent("""
        from typedci import Job, wf, sh

        def workflow():
            outer = Job(runs_on="ubuntu-latest")
            object.__setattr__(outer, "steps", (sh("x", "x"), outer))
            return wf("Loop", push=["main"], loop=outer)
    """), encoding="utf-8")
    result = CliRunner().invoke(cli, ["render", "--workflow", str(path)])
    assert result.exit_code == 1
    assert "Invalid pipeline model" in result.output
    assert "kind: cycle" in result.output
