"""Claude Code CLI adapter.

The prompt is piped on stdin; destructive shell tools are disallowed so
the agent cannot delete files, commit or push.
"""

from __future__ import annotations

from pathlib import PurePosixPath

from codebench.adapters.base import CLIAdapter
from codebench.execution.workspace import ContextFile

DEFAULT_MODEL = "sonnet"

DISALLOWED_TOOLS = ("Bash(rm)", "Bash(git push)", "Bash(git commit)")

WRITE_INSTRUCTION = (
    "Create/update the necessary file(s). "
    "Do not output code to the terminal - write it to files instead."
)


class ClaudeCodeAdapter(CLIAdapter):
    """Drives ``claude`` in non-interactive mode."""

    name = "claude-code"
    executable = "claude"
    display_name = "Claude Code CLI"

    @property
    def effective_model(self) -> str:
        return self.model or DEFAULT_MODEL

    def build_prompt(self, prompt: str, contexts: list[ContextFile]) -> str:
        parts: list[str] = []
        if contexts:
            parts.append("# Reference Files\n")
            blocks = []
            for ctx in contexts:
                lang = PurePosixPath(ctx.path).suffix.lstrip(".") or "typescript"
                blocks.append(f"### {ctx.path}\n```{lang}\n{ctx.content}\n```")
            parts.append("\n\n".join(blocks))
            parts.append("\n---\n")
        parts.append("# Task\n")
        parts.append(prompt)
        parts.append(f"\n\n{WRITE_INSTRUCTION}")
        return "\n".join(parts)

    def build_command(self, full_prompt: str) -> tuple[list[str], str | None]:
        cmd = [
            self.executable,
            "--model",
            self.effective_model,
            "--dangerously-skip-permissions",
        ]
        for tool in DISALLOWED_TOOLS:
            cmd += ["--disallowed-tools", tool]
        return (cmd, full_prompt)
