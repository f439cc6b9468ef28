"""JSON export of evaluation reports."""

from __future__ import annotations

from pathlib import Path

from codebench.models.result import EvaluationReport


def write_report(report: EvaluationReport, path: Path) -> Path:
    """Write a report as indented JSON, atomically.

    Parent directories are created as needed.

    Returns:
        The path written to.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = path.with_name(f"{path.name}.tmp")
    tmp_file.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    tmp_file.replace(path)
    return path


def load_report(path: Path) -> EvaluationReport:
    """Load a report previously written by write_report().

    Raises:
        FileNotFoundError: If the file does not exist.
        pydantic.ValidationError: If the JSON does not match the schema.
    """
    return EvaluationReport.model_validate_json(path.read_text(encoding="utf-8"))


def default_report_path(project_root: Path, output_dir: str, report: EvaluationReport) -> Path:
    """Timestamped report path under the configured output directory."""
    stamp = report.timestamp.strftime("%Y%m%dT%H%M%SZ")
    return project_root / output_dir / f"report-{report.adapter}-{stamp}.json"
