"""Tests for the codebench CLI commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from codebench import __version__
from codebench.adapters.base import BaseAdapter
from codebench.cli.main import app
from codebench.evaluation.judge.auth import AuthStatus
from codebench.models.result import EvaluationResult
from codebench.models.scenario import Scenario
from codebench.storage.baseline_store import BaselineStore

runner = CliRunner()

SCENARIOS = """\
scenarios:
  - id: typescript-no-any
    category: typescript
    description: No any
    prompt: Write an interface
    validation_strategy:
      patterns:
        forbidden_patterns:
          - ':\\s*any\\b'
  - id: react-key-prop
    category: react
    description: Keys
    prompt: Write a list
    validation_strategy:
      patterns:
        required_patterns:
          - 'interface'
"""


class _WritingAdapter(BaseAdapter):
    """Writes a fixed file into the workspace instead of calling an agent."""

    name = "writer"
    content = "export interface User {\n  id: number;\n}\n"
    available = True

    async def check_availability(self) -> bool:
        return self.available

    async def generate(
        self,
        prompt: str,
        context_files: list[str] | None = None,
        timeout_ms: int | None = None,
    ) -> list[str]:
        (self.workspace_root / "user.ts").write_text(self.content, encoding="utf-8")
        return ["user.ts"]


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / "codebench.yaml").write_text("default_adapter: copilot\n", encoding="utf-8")
    scenarios_dir = tmp_path / "scenarios"
    scenarios_dir.mkdir()
    (scenarios_dir / "all.yaml").write_text(SCENARIOS, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return tmp_path


def _invoke_evaluate(project: Path, *args: str, adapter_cls: type = _WritingAdapter) -> Any:
    def factory(name: str, workspace_root: Path, model: str | None = None) -> BaseAdapter:
        return adapter_cls(workspace_root, model=model)

    with patch("codebench.cli.evaluate_cmd.get_adapter", side_effect=factory):
        return runner.invoke(app, ["evaluate", "--workspace-root", str(project), *args])


def _json_payload(output: str) -> dict[str, Any]:
    return json.loads(output[output.index("{") :])


class TestVersion:
    """Test --version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestEvaluateCommand:
    """Tests for codebench evaluate."""

    def test_all_pass_exits_zero(self, project: Path) -> None:
        result = _invoke_evaluate(project)
        assert result.exit_code == 0, result.output
        assert "typescript-no-any" in result.output
        assert "PASS" in result.output

    def test_json_report(self, project: Path) -> None:
        result = _invoke_evaluate(project, "--json")
        assert result.exit_code == 0, result.output
        payload = _json_payload(result.output)
        assert payload["adapter"] == "copilot"
        assert payload["summary"]["total"] == 2
        assert payload["summary"]["passed"] == 2

    def test_violation_exits_one(self, project: Path) -> None:
        class AnyAdapter(_WritingAdapter):
            content = "export interface User {\n  id: any;\n}\n"

        result = _invoke_evaluate(project, "--json", "--scenario", "typescript-*", adapter_cls=AnyAdapter)
        assert result.exit_code == 1
        payload = _json_payload(result.output)
        assert payload["summary"]["failed"] == 1
        violation = payload["results"][0]["violations"][0]
        assert violation["file"] == "user.ts"
        assert violation["line"] == 2

    def test_category_filter(self, project: Path) -> None:
        result = _invoke_evaluate(project, "--json", "--category", "react")
        payload = _json_payload(result.output)
        assert [r["scenario"]["id"] for r in payload["results"]] == ["react-key-prop"]

    def test_no_matching_scenarios_exits_zero(self, project: Path) -> None:
        result = _invoke_evaluate(project, "--scenario", "does-not-exist")
        assert result.exit_code == 0
        assert "No scenarios match" in result.output

    def test_unavailable_adapter_exits_one(self, project: Path) -> None:
        class MissingAdapter(_WritingAdapter):
            available = False

        result = _invoke_evaluate(project, adapter_cls=MissingAdapter)
        assert result.exit_code == 1
        assert "not available" in result.output
        assert not (project / "user.ts").exists()

    def test_output_writes_report(self, project: Path) -> None:
        out = project / "reports" / "run.json"
        result = _invoke_evaluate(project, "--output", str(out))
        assert result.exit_code == 0, result.output
        report = json.loads(out.read_text(encoding="utf-8"))
        assert report["summary"]["total"] == 2

    def test_report_uses_output_dir(self, project: Path) -> None:
        result = _invoke_evaluate(project, "--report")
        assert result.exit_code == 0, result.output
        reports = list((project / ".benchmarks" / "reports").glob("report-copilot-*.json"))
        assert len(reports) == 1

    def test_save_baseline(self, project: Path) -> None:
        result = _invoke_evaluate(project, "--save-baseline", "--adapter-model", "gpt-5")
        assert result.exit_code == 0, result.output
        records = BaselineStore(project).list_baselines("copilot", "gpt-5")
        assert sorted(r.scenario_id for r in records) == ["react-key-prop", "typescript-no-any"]

    def test_unknown_adapter_name(self, project: Path) -> None:
        result = runner.invoke(
            app, ["evaluate", "--workspace-root", str(project), "--adapter", "cursor"]
        )
        assert result.exit_code == 1
        assert "Unknown adapter" in result.output

    def test_missing_workspace_root(self, project: Path) -> None:
        result = runner.invoke(app, ["evaluate", "--workspace-root", str(project / "nope")])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_invalid_scenarios_exit_one(self, project: Path) -> None:
        (project / "scenarios" / "bad.yaml").write_text("id: broken\n", encoding="utf-8")
        result = _invoke_evaluate(project)
        assert result.exit_code == 1
        assert "Invalid scenario files" in result.output


class TestListCommand:
    """Tests for codebench list."""

    def test_lists_scenarios(self, project: Path) -> None:
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "typescript-no-any" in result.output
        assert "react-key-prop" in result.output

    def test_category_filter(self, project: Path) -> None:
        result = runner.invoke(app, ["list", "--category", "react"])
        assert "react-key-prop" in result.output
        assert "typescript-no-any" not in result.output


class TestValidateCommand:
    """Tests for codebench validate."""

    def test_valid_project(self, project: Path) -> None:
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 0
        assert "2 scenario(s) valid, 0 error(s)" in result.output

    def test_invalid_file(self, project: Path) -> None:
        bad = project / "bad.yaml"
        bad.write_text("id: x\ndescription: d\nprompt: p\nseverty: major\n", encoding="utf-8")
        result = runner.invoke(app, ["validate", str(bad)])
        assert result.exit_code == 1
        assert "severty" in result.output

    def test_missing_file(self, project: Path) -> None:
        result = runner.invoke(app, ["validate", "nope.yaml"])
        assert result.exit_code == 1
        assert "File not found" in result.output


class TestInitCommand:
    """Tests for codebench init."""

    def test_init_then_refuse(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init", str(tmp_path)])
        assert result.exit_code == 0
        assert (tmp_path / "codebench.yaml").exists()

        again = runner.invoke(app, ["init", str(tmp_path)])
        assert again.exit_code == 1
        assert "--force" in again.output


class TestCheckCommand:
    """Tests for codebench check."""

    def test_reports_adapters_and_token(self, project: Path) -> None:
        auth = AuthStatus(available=False, method=None, message="GitHub token not found")
        with patch("codebench.adapters.base.shutil.which", side_effect=lambda exe: "/bin/copilot" if exe == "copilot" else None), patch(
            "codebench.cli.check_cmd.check_github_auth", return_value=auth
        ), patch("codebench.cli.check_cmd.resolve_workspace_root", return_value=project):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == 0
        assert "copilot" in result.output
        assert "claude-code" in result.output
        assert "GitHub token not found" in result.output

    def test_no_adapters_exits_one(self, project: Path) -> None:
        auth = AuthStatus(available=True, method="env", message="ok")
        with patch("codebench.adapters.base.shutil.which", return_value=None), patch(
            "codebench.cli.check_cmd.check_github_auth", return_value=auth
        ), patch("codebench.cli.check_cmd.resolve_workspace_root", return_value=project):
            result = runner.invoke(app, ["check"])
        assert result.exit_code == 1


class TestBaselineCommand:
    """Tests for codebench baseline list/delete."""

    def _seed(self, project: Path) -> BaselineStore:
        store = BaselineStore(project)
        for scenario_id in ("a", "b"):
            store.save(
                EvaluationResult(
                    scenario=Scenario(id=scenario_id, description="d", prompt="p"),
                    passed=True,
                    score=1.0,
                    duration_ms=1,
                ),
                "copilot",
            )
        return store

    def test_list(self, project: Path) -> None:
        self._seed(project)
        result = runner.invoke(app, ["baseline", "list"])
        assert result.exit_code == 0
        assert "a" in result.output
        assert "1.00" in result.output

    def test_list_empty(self, project: Path) -> None:
        result = runner.invoke(app, ["baseline", "list", "--adapter", "claude-code"])
        assert result.exit_code == 0
        assert "No baselines stored" in result.output

    def test_delete_one(self, project: Path) -> None:
        store = self._seed(project)
        result = runner.invoke(app, ["baseline", "delete", "a"])
        assert result.exit_code == 0
        assert store.load("copilot", "default", "a") is None
        assert store.load("copilot", "default", "b") is not None

    def test_delete_missing(self, project: Path) -> None:
        result = runner.invoke(app, ["baseline", "delete", "nope"])
        assert result.exit_code == 1

    def test_delete_all(self, project: Path) -> None:
        store = self._seed(project)
        result = runner.invoke(app, ["baseline", "delete", "--all"])
        assert result.exit_code == 0
        assert "Deleted 2 baseline(s)" in result.output
        assert store.list_baselines("copilot") == []

    def test_delete_requires_target(self, project: Path) -> None:
        result = runner.invoke(app, ["baseline", "delete"])
        assert result.exit_code == 1
