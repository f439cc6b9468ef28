"""Storage package for baselines and exported reports."""

from codebench.storage.baseline_store import BaselineStore
from codebench.storage.reports import load_report, write_report

__all__ = ["BaselineStore", "load_report", "write_report"]
