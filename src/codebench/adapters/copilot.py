"""GitHub Copilot CLI adapter."""

from __future__ import annotations

from codebench.adapters.base import CLIAdapter
from codebench.execution.workspace import ContextFile


class CopilotAdapter(CLIAdapter):
    """Drives ``copilot -p <prompt>``, with context files appended to the prompt."""

    name = "copilot"
    executable = "copilot"
    display_name = "Copilot CLI"

    def build_prompt(self, prompt: str, contexts: list[ContextFile]) -> str:
        if not contexts:
            return prompt
        section = "\n".join(
            f"\n\n### Context from {ctx.path}:\n```\n{ctx.content}\n```" for ctx in contexts
        )
        return f"{prompt}{section}"

    def build_command(self, full_prompt: str) -> tuple[list[str], str | None]:
        cmd = [self.executable, "-p", full_prompt]
        if self.model:
            cmd += ["--model", self.model]
        return (cmd, None)
