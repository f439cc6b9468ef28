"""BaseAdapter ABC and the shared subprocess-driven CLI adapter.

All code-generation adapters subclass BaseAdapter. Adapters that drive
an external agent CLI subclass CLIAdapter, which owns process
execution, timeout handling and changed-file detection, and only need
to describe how the prompt and command line are built.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path

from codebench.errors import GenerationError, GenerationTimeoutError, WorkspaceError
from codebench.execution.git import diff_snapshots, take_snapshot
from codebench.execution.process import run_process
from codebench.execution.workspace import ContextFile, read_context_files

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """Abstract base class for all code-generation adapters.

    Subclasses must implement check_availability() and generate().
    generate() returns the workspace-relative paths changed by the run
    and raises GenerationTimeoutError when the deadline elapses,
    GenerationError on any other failure.
    """

    name: str = ""

    def __init__(self, workspace_root: Path, model: str | None = None) -> None:
        self.workspace_root = workspace_root
        self.model = model

    @abstractmethod
    async def check_availability(self) -> bool:
        """Return True if the underlying tool can be invoked."""
        ...

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        context_files: list[str] | None = None,
        timeout_ms: int | None = None,
    ) -> list[str]:
        """Run code generation for ``prompt`` in the workspace.

        Args:
            prompt: The task prompt handed to the agent.
            context_files: Reference files to include with the prompt.
            timeout_ms: Deadline in milliseconds; None means no timeout.

        Returns:
            Changed file paths, relative to the workspace root.
        """
        ...


class CLIAdapter(BaseAdapter):
    """Adapter that runs an agent CLI as a subprocess in the workspace.

    Changed files are the paths whose git status or content differs
    between snapshots taken before and after the run, so pre-existing
    uncommitted changes are not attributed to the agent.
    """

    executable: str = ""
    display_name: str = ""

    async def check_availability(self) -> bool:
        return shutil.which(self.executable) is not None

    @abstractmethod
    def build_prompt(self, prompt: str, contexts: list[ContextFile]) -> str:
        """Combine the task prompt with the loaded context files."""
        ...

    @abstractmethod
    def build_command(self, full_prompt: str) -> tuple[list[str], str | None]:
        """Return (argv, stdin text) for one generation run."""
        ...

    async def generate(
        self,
        prompt: str,
        context_files: list[str] | None = None,
        timeout_ms: int | None = None,
    ) -> list[str]:
        contexts = (
            read_context_files(self.workspace_root, context_files) if context_files else []
        )
        full_prompt = self.build_prompt(prompt, contexts)
        cmd, stdin = self.build_command(full_prompt)

        try:
            before = await asyncio.to_thread(take_snapshot, self.workspace_root)
        except WorkspaceError as exc:
            raise GenerationError(
                f"Failed to get changed files: {exc}", adapter=self.name
            ) from exc

        try:
            result = await run_process(
                cmd, cwd=self.workspace_root, stdin=stdin, timeout_ms=timeout_ms
            )
        except TimeoutError as exc:
            raise GenerationTimeoutError(
                f"{self.display_name} timed out after {timeout_ms}ms",
                adapter=self.name,
                timeout_ms=timeout_ms or 0,
            ) from exc
        except OSError as exc:
            raise GenerationError(
                f"Failed to spawn {self.display_name}: {exc}", adapter=self.name
            ) from exc

        if result.returncode != 0:
            raise GenerationError(
                f"{self.display_name} exited with code {result.returncode}\n"
                f"Stderr: {result.stderr}",
                adapter=self.name,
                stderr=result.stderr,
            )

        try:
            after = await asyncio.to_thread(take_snapshot, self.workspace_root)
        except WorkspaceError as exc:
            raise GenerationError(
                f"Failed to get changed files: {exc}", adapter=self.name
            ) from exc

        changed = diff_snapshots(before, after)
        logger.debug("%s changed %d file(s): %s", self.display_name, len(changed), changed)
        return changed
