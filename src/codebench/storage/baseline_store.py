"""JSON file storage for per-scenario baselines.

Stores one BaselineRecord per (adapter, model, scenario id) under
.benchmarks/baselines/ so later runs can be compared against the most
recent saved score. Uses atomic writes to prevent corruption.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from urllib.parse import quote

from pydantic import ValidationError

from codebench.errors import BaselineStoreError
from codebench.models.baseline import BaselineRecord
from codebench.models.result import BaselineComparison, EvaluationResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL_KEY = "default"


def safe_name(value: str) -> str:
    """Map an identifier to a single path component, one-to-one.

    Characters outside ``[A-Za-z0-9._~-]`` are percent-encoded, so
    ``openai/gpt-4.1`` becomes ``openai%2Fgpt-4.1`` and distinct ids
    never share a file. Dot-only names are encoded as well.
    """
    name = quote(value, safe="")
    if name in {"", ".", ".."}:
        name = name.replace(".", "%2E") or "%"
    return name


class BaselineStore:
    """Persist and compare BaselineRecord objects as JSON files.

    File layout:
        .benchmarks/
            baselines/
                {adapter}/
                    {model}/
                        {scenario-id}.json

    Each key has a single slot; the most recent save wins. Writes are
    atomic (write to .tmp, then replace).
    """

    def __init__(self, project_root: Path) -> None:
        self.baselines_dir = project_root / ".benchmarks" / "baselines"

    def baseline_path(self, adapter: str, model: str, scenario_id: str) -> Path:
        """Return the JSON file path for one baseline key."""
        return (
            self.baselines_dir
            / safe_name(adapter)
            / safe_name(model or DEFAULT_MODEL_KEY)
            / f"{safe_name(scenario_id)}.json"
        )

    def save(
        self, result: EvaluationResult, adapter: str, model: str = DEFAULT_MODEL_KEY
    ) -> BaselineRecord:
        """Save a scenario result as the baseline for its key.

        Args:
            result: The evaluated scenario result.
            adapter: Adapter name the result was produced with.
            model: Model identifier the result was produced with.

        Returns:
            The BaselineRecord that was written.

        Raises:
            BaselineStoreError: If the record cannot be written.
        """
        record = BaselineRecord(
            scenario_id=result.scenario.id,
            score=result.score,
            violations=result.violations,
            timestamp=datetime.now(timezone.utc),
            adapter=adapter,
            model=model or DEFAULT_MODEL_KEY,
        )
        path = self.baseline_path(adapter, record.model, record.scenario_id)
        tmp_file = path.with_name(f"{path.name}.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_file.write_text(record.model_dump_json(indent=2), encoding="utf-8")
            tmp_file.replace(path)
        except OSError as exc:
            raise BaselineStoreError(
                f"Failed to save baseline for {record.scenario_id}: {exc}"
            ) from exc
        return record

    def load(self, adapter: str, model: str, scenario_id: str) -> BaselineRecord | None:
        """Load the baseline for one key.

        Returns:
            The stored BaselineRecord, or None if it is missing or
            cannot be decoded and parsed (a warning is logged for the latter).

        Raises:
            BaselineStoreError: If the file exists but cannot be read.
        """
        path = self.baseline_path(adapter, model, scenario_id)
        if not path.exists():
            return None
        try:
            return self._read_record(path)
        except OSError as exc:
            raise BaselineStoreError(
                f"Failed to read baseline for {scenario_id}: {exc}"
            ) from exc

    def compare(
        self, result: EvaluationResult, adapter: str, model: str = DEFAULT_MODEL_KEY
    ) -> BaselineComparison | None:
        """Compare a result against its stored baseline.

        Returns:
            BaselineComparison with ``delta = current - baseline``, or
            None when no usable baseline exists.

        Raises:
            BaselineStoreError: If the stored baseline cannot be read.
        """
        baseline = self.load(adapter, model, result.scenario.id)
        if baseline is None:
            return None
        delta = result.score - baseline.score
        return BaselineComparison(
            baseline_score=baseline.score,
            delta=delta,
            is_improvement=delta > 0,
        )

    def list_baselines(self, adapter: str, model: str | None = None) -> list[BaselineRecord]:
        """List stored baselines for an adapter, optionally for one model.

        Unreadable or unparsable files are skipped with a warning.
        """
        records: list[BaselineRecord] = []
        for path in self._baseline_files(adapter, model):
            try:
                record = self._read_record(path)
            except OSError as exc:
                logger.warning("Failed to read baseline %s: %s", path, exc)
                continue
            if record is not None:
                records.append(record)
        return records

    def delete_baseline(self, adapter: str, model: str, scenario_id: str) -> bool:
        """Delete one baseline file.

        Returns:
            True if the file existed and was deleted, False otherwise.

        Raises:
            BaselineStoreError: If the file exists but cannot be removed.
        """
        path = self.baseline_path(adapter, model, scenario_id)
        if not path.exists():
            return False
        try:
            path.unlink()
        except OSError as exc:
            raise BaselineStoreError(
                f"Failed to delete baseline for {scenario_id}: {exc}"
            ) from exc
        return True

    def delete_all_baselines(self, adapter: str, model: str | None = None) -> int:
        """Delete every baseline for an adapter, optionally for one model.

        Returns:
            Number of baseline files deleted.

        Raises:
            BaselineStoreError: If a baseline file cannot be removed.
        """
        count = 0
        for path in self._baseline_files(adapter, model):
            try:
                path.unlink()
            except OSError as exc:
                raise BaselineStoreError(f"Failed to delete {path}: {exc}") from exc
            count += 1
        return count

    def _baseline_files(self, adapter: str, model: str | None) -> list[Path]:
        adapter_dir = self.baselines_dir / safe_name(adapter)
        if not adapter_dir.is_dir():
            return []
        if model is not None:
            model_dirs = [adapter_dir / safe_name(model)]
        else:
            model_dirs = sorted(p for p in adapter_dir.iterdir() if p.is_dir())
        files: list[Path] = []
        for model_dir in model_dirs:
            if model_dir.is_dir():
                files.extend(sorted(model_dir.glob("*.json")))
        return files

    def _read_record(self, path: Path) -> BaselineRecord | None:
        # OSError propagates; undecodable or invalid content counts as no record.
        try:
            return BaselineRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, ValidationError) as exc:
            logger.warning("Ignoring corrupt baseline %s: %s", path, exc)
            return None
