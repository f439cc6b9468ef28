"""Judge prompt builders.

The system prompt fixes the JSON response contract; the user prompt
carries the scenario and the generated files.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codebench.execution.workspace import ContextFile
    from codebench.models.scenario import Scenario


JUDGE_SYSTEM_PROMPT = """You are a code review judge evaluating whether generated code follows specific coding guidelines.

Your task is to evaluate the provided code against a set of criteria and return a JSON assessment.

Be strict but fair. Only mark criteria as FAIL if there is a clear violation.

Respond ONLY with valid JSON in this exact format:
{
  "evaluations": [
    {
      "criterion": "criterion text",
      "result": "PASS" | "FAIL" | "N/A",
      "explanation": "brief explanation"
    }
  ],
  "overallScore": 0.0 to 1.0,
  "summary": "one sentence summary"
}"""


JUDGE_USER_TEMPLATE = """# Task Description
{description}

# Original Prompt Given to AI
{prompt}

# Generated Code
{files_block}

# Evaluation Criteria
Evaluate whether the generated code:
1. Correctly implements the requirements from the prompt
2. Follows best practices for {category}
3. Meets the quality standards for a {severity} severity scenario

Be strict but fair in your evaluation."""


def build_files_block(files: list[ContextFile]) -> str:
    """Render files as markdown sections with fenced contents."""
    return "\n\n".join(f"### {f.path}\n```\n{f.content}\n```" for f in files)


def build_judgment_prompt(
    scenario: Scenario,
    files: list[ContextFile],
    custom_prompt: str | None = None,
) -> str:
    """Build the user prompt sent to the judge model.

    Args:
        scenario: Scenario under evaluation.
        files: Generated files with paths relative to the workspace root.
        custom_prompt: Scenario-supplied prompt that replaces the default.

    Returns:
        Fully rendered user prompt string.
    """
    if custom_prompt:
        return custom_prompt
    return JUDGE_USER_TEMPLATE.format(
        description=scenario.description,
        prompt=scenario.prompt,
        files_block=build_files_block(files),
        category=scenario.category,
        severity=scenario.severity,
    )
