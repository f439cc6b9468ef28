"""Tests for the LLM judge validator, its prompt builder and response parsing."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from codebench.evaluation.judge.auth import check_github_auth, get_github_token
from codebench.evaluation.judge.extraction import (
    JudgeParseError,
    extract_json_from_text,
    parse_judge_response,
)
from codebench.evaluation.judge.prompt import JUDGE_SYSTEM_PROMPT, build_judgment_prompt
from codebench.evaluation.validators.judge import JudgeValidator
from codebench.execution.workspace import ContextFile
from codebench.models.scenario import Scenario


def _make_scenario(judge: dict[str, Any] | None = None, **overrides: Any) -> Scenario:
    data: dict[str, Any] = {
        "id": "react-key-prop",
        "description": "Lists must use stable keys",
        "prompt": "Render a list of users",
        "severity": "major",
    }
    if judge is not None:
        data["validation_strategy"] = {"llm_judge": judge}
    data.update(overrides)
    return Scenario.model_validate(data)


def _judgment(**overrides: Any) -> str:
    payload: dict[str, Any] = {
        "evaluations": [
            {"criterion": "Uses stable keys", "result": "PASS", "explanation": "ids used"},
        ],
        "overallScore": 0.9,
        "summary": "Looks good",
    }
    payload.update(overrides)
    return json.dumps(payload)


def _mock_client(content: str | None) -> MagicMock:
    message = MagicMock()
    message.content = content
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


class TestExtraction:
    """Test JSON extraction and judge response validation."""

    def test_direct_json(self) -> None:
        assert extract_json_from_text('{"a": 1}') == {"a": 1}

    def test_fenced_block(self) -> None:
        text = 'Here you go:\n```json\n{"a": 1}\n```\nThanks'
        assert extract_json_from_text(text) == {"a": 1}

    def test_brace_fallback(self) -> None:
        assert extract_json_from_text('Result: {"a": 1} done') == {"a": 1}

    def test_no_json(self) -> None:
        assert extract_json_from_text("no json here") is None
        assert extract_json_from_text("") is None

    def test_parse_valid_response(self) -> None:
        response = parse_judge_response(_judgment())
        assert response.overall_score == 0.9
        assert response.summary == "Looks good"
        assert response.failed == []

    def test_parse_empty_content(self) -> None:
        with pytest.raises(JudgeParseError, match="No content"):
            parse_judge_response(None)

    def test_parse_missing_field(self) -> None:
        with pytest.raises(JudgeParseError, match="Invalid judgment structure"):
            parse_judge_response('{"evaluations": [], "summary": "x"}')

    def test_parse_invalid_result_value(self) -> None:
        bad = _judgment(evaluations=[{"criterion": "c", "result": "MAYBE", "explanation": ""}])
        with pytest.raises(JudgeParseError):
            parse_judge_response(bad)


class TestPrompt:
    """Test judgment prompt construction."""

    def test_includes_scenario_and_files(self) -> None:
        scenario = _make_scenario()
        prompt = build_judgment_prompt(
            scenario, [ContextFile(path="src/List.tsx", content="<li key={u.id} />")], None
        )
        assert "Lists must use stable keys" in prompt
        assert "Render a list of users" in prompt
        assert "src/List.tsx" in prompt
        assert "<li key={u.id} />" in prompt

    def test_custom_judgment_prompt(self) -> None:
        prompt = build_judgment_prompt(_make_scenario(), [], "Check that keys are not indices")
        assert "Check that keys are not indices" in prompt

    def test_system_prompt_fixes_json_contract(self) -> None:
        assert "overallScore" in JUDGE_SYSTEM_PROMPT


class TestAuth:
    """Test GitHub token discovery."""

    def test_env_token_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        with patch("codebench.evaluation.judge.auth.subprocess.run") as run:
            assert get_github_token() == "env-token"
        run.assert_not_called()
        status = check_github_auth()
        assert status.available is True
        assert status.method == "env"

    def test_gh_cli_fallback(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        completed = MagicMock(returncode=0, stdout="gho_abc123\n")
        with patch("codebench.evaluation.judge.auth.subprocess.run", return_value=completed):
            assert get_github_token() == "gho_abc123"
            assert check_github_auth().method == "gh-cli"

    def test_gh_output_without_prefix_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        completed = MagicMock(returncode=0, stdout="not logged in\n")
        with patch("codebench.evaluation.judge.auth.subprocess.run", return_value=completed):
            assert get_github_token() is None

    def test_gh_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        with patch("codebench.evaluation.judge.auth.subprocess.run", side_effect=FileNotFoundError()):
            assert get_github_token() is None
            status = check_github_auth()
        assert status.available is False
        assert status.method is None


class TestJudgeValidator:
    """Test JudgeValidator with an injected client."""

    @pytest.mark.asyncio
    async def test_not_enabled_skips(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client(_judgment()))
        result = await validator.validate([], _make_scenario())
        assert result.skipped
        assert result.kind == "llm-judge"

    @pytest.mark.asyncio
    async def test_disabled_config_skips(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client(_judgment()))
        result = await validator.validate([], _make_scenario(judge={"enabled": False}))
        assert result.skipped

    @pytest.mark.asyncio
    async def test_no_token_skips_without_error(self, tmp_path: Path) -> None:
        client = _mock_client(_judgment())
        validator = JudgeValidator(tmp_path, token=None, client=client)
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.skipped
        assert result.error is None
        client.chat.completions.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_passing_judgment(self, tmp_path: Path) -> None:
        (tmp_path / "List.tsx").write_text("<li key={u.id} />", encoding="utf-8")
        client = _mock_client(_judgment())
        validator = JudgeValidator(tmp_path, default_model="openai/gpt-4.1", token="t", client=client)
        result = await validator.validate(["List.tsx"], _make_scenario(judge={"enabled": True}))

        assert result.passed is True
        assert result.score == 0.9
        assert result.violations == []
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "openai/gpt-4.1"
        assert kwargs["temperature"] == 0
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["messages"][0] == {"role": "system", "content": JUDGE_SYSTEM_PROMPT}
        assert "<li key={u.id} />" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_scenario_model_overrides_default(self, tmp_path: Path) -> None:
        client = _mock_client(_judgment())
        validator = JudgeValidator(tmp_path, token="t", client=client)
        await validator.validate([], _make_scenario(judge={"enabled": True, "model": "openai/o3"}))
        assert client.chat.completions.create.call_args.kwargs["model"] == "openai/o3"

    @pytest.mark.asyncio
    async def test_failed_criteria_become_violations(self, tmp_path: Path) -> None:
        content = _judgment(
            evaluations=[
                {"criterion": "Uses stable keys", "result": "FAIL", "explanation": "uses index"},
                {"criterion": "Typed props", "result": "PASS", "explanation": "ok"},
                {"criterion": "Memoized", "result": "N/A", "explanation": "n/a"},
            ],
            overallScore=0.4,
            summary="Index keys used",
        )
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client(content))
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))

        assert result.passed is False
        assert result.score == 0.4
        assert len(result.violations) == 1
        violation = result.violations[0]
        assert violation.kind == "llm-judge"
        assert violation.message == "Uses stable keys: uses index"
        assert violation.details == "Index keys used"
        assert violation.severity == "major"

    @pytest.mark.asyncio
    async def test_low_score_without_failures_does_not_pass(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client(_judgment(overallScore=0.6)))
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.violations == []
        assert result.passed is False

    @pytest.mark.asyncio
    async def test_out_of_range_score_is_clamped(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client(_judgment(overallScore=1.5)))
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.score == 1.0

    @pytest.mark.asyncio
    async def test_unparsable_response_is_error(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t", client=_mock_client("I cannot help"))
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.passed is False
        assert result.score == 0.0
        assert result.error.startswith("LLM judge failed:")

    @pytest.mark.asyncio
    async def test_api_error_is_error(self, tmp_path: Path) -> None:
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=RuntimeError("rate limited"))
        validator = JudgeValidator(tmp_path, token="t", client=client)
        result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.error == "LLM judge failed: rate limited"

    @pytest.mark.asyncio
    async def test_missing_openai_package_skips(self, tmp_path: Path) -> None:
        validator = JudgeValidator(tmp_path, token="t")
        with patch.object(JudgeValidator, "_get_client", side_effect=ImportError("openai")):
            result = await validator.validate([], _make_scenario(judge={"enabled": True}))
        assert result.skipped
        assert "openai" in (result.skip_reason or "")
