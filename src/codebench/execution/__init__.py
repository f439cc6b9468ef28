"""Execution package: evaluation engine, lifecycle events, git and workspace helpers."""
