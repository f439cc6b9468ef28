"""Exception hierarchy shared across codebench packages."""

from __future__ import annotations


class CodebenchError(Exception):
    """Base class for all codebench errors."""


class ConfigError(CodebenchError):
    """Raised when project configuration or scenarios cannot be loaded."""


class WorkspaceError(CodebenchError):
    """Raised when the workspace root or its git state cannot be resolved."""


class GenerationError(CodebenchError):
    """Raised when a code-generation CLI fails (nonzero exit, spawn failure).

    Attributes:
        adapter: Name of the adapter that failed.
        stderr: Captured stderr of the CLI process, if any.
    """

    def __init__(self, message: str, adapter: str = "", stderr: str = "") -> None:
        self.adapter = adapter
        self.stderr = stderr
        super().__init__(message)


class GenerationTimeoutError(GenerationError):
    """Raised when a code-generation CLI exceeds its resolved timeout.

    Attributes:
        timeout_ms: The deadline that elapsed, in milliseconds.
    """

    def __init__(self, message: str, adapter: str = "", timeout_ms: int = 0) -> None:
        self.timeout_ms = timeout_ms
        super().__init__(message, adapter=adapter)


class BaselineStoreError(CodebenchError):
    """Raised when a baseline record cannot be written or deleted."""
