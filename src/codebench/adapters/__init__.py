"""codebench adapters - drivers for external code-generation CLIs.

Re-exports the BaseAdapter ABC, the shared CLIAdapter, the builtin
adapters and the adapter registry function.
"""

from codebench.adapters.base import BaseAdapter, CLIAdapter
from codebench.adapters.claude_code import ClaudeCodeAdapter
from codebench.adapters.copilot import CopilotAdapter
from codebench.adapters.registry import BUILTIN_ADAPTERS, get_adapter

__all__ = [
    "BUILTIN_ADAPTERS",
    "BaseAdapter",
    "CLIAdapter",
    "ClaudeCodeAdapter",
    "CopilotAdapter",
    "get_adapter",
]
