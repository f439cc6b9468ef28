"""Adapter lookup by short name or ``module.ClassName`` path."""

from __future__ import annotations

import importlib
from pathlib import Path

from codebench.adapters.base import BaseAdapter
from codebench.adapters.claude_code import ClaudeCodeAdapter
from codebench.adapters.copilot import CopilotAdapter

BUILTIN_ADAPTERS: dict[str, type[BaseAdapter]] = {
    "copilot": CopilotAdapter,
    "claude-code": ClaudeCodeAdapter,
}


def _import_adapter_class(dotted_path: str) -> type:
    module_name, _, attr = dotted_path.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Adapter path '{dotted_path}' must look like 'package.module.ClassName'.")
    module = importlib.import_module(module_name)
    if not hasattr(module, attr):
        raise ImportError(f"'{attr}' not found in module '{module_name}'.")
    return getattr(module, attr)


def resolve_adapter_class(name: str) -> type[BaseAdapter]:
    """Map an adapter name to its class.

    Args:
        name: ``copilot``, ``claude-code``, or the dotted path of a
            BaseAdapter subclass in an importable module.

    Raises:
        ValueError: For an unknown short name or malformed path.
        ImportError: If the module or attribute cannot be found.
        TypeError: If the attribute is not a BaseAdapter subclass.
    """
    builtin = BUILTIN_ADAPTERS.get(name)
    if builtin is not None:
        return builtin
    if "." not in name:
        known = ", ".join(BUILTIN_ADAPTERS)
        raise ValueError(
            f"Unknown adapter '{name}' (builtin: {known}; "
            f"custom adapters are given as 'package.module.ClassName')."
        )

    cls = _import_adapter_class(name)
    if not (isinstance(cls, type) and issubclass(cls, BaseAdapter)):
        raise TypeError(f"'{name}' does not subclass codebench.adapters.base.BaseAdapter.")
    return cls


def get_adapter(name: str, workspace_root: Path, model: str | None = None) -> BaseAdapter:
    """Instantiate the adapter ``name`` for ``workspace_root``."""
    return resolve_adapter_class(name)(workspace_root, model=model)
