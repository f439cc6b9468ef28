"""EvaluationEngine: drive generation, validation and scoring per scenario.

Each scenario moves through pending -> generating -> validating ->
complete, or pending -> generating -> failed when generation raises.
Scenarios run strictly sequentially against a shared workspace.
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from codebench.adapters.base import BaseAdapter
from codebench.errors import BaselineStoreError, GenerationTimeoutError
from codebench.evaluation.aggregation import summarize_results
from codebench.evaluation.scorer import DEFAULT_PASS_THRESHOLD, aggregate_results
from codebench.evaluation.validators.base import BaseValidator
from codebench.execution.events import (
    EvaluationFinished,
    EvaluationStarted,
    EventBus,
    LogMessage,
    Phase,
    PhaseChanged,
    ScenarioCompleted,
    ScenarioStarted,
)
from codebench.execution.git import reset_working_directory
from codebench.models.result import (
    EvaluationReport,
    EvaluationResult,
    ValidationResult,
    Violation,
)
from codebench.models.scenario import UNSET, Scenario, TimeoutSetting
from codebench.storage.baseline_store import DEFAULT_MODEL_KEY, BaselineStore

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 120_000


def resolve_timeout(
    scenario_timeout: TimeoutSetting,
    default_timeout: TimeoutSetting = UNSET,
) -> int | None:
    """Pick the generation timeout for one scenario.

    Precedence: the scenario's own setting, then the batch default, then
    the built-in 120000 ms. An explicit ``None`` at either level means
    "no timeout" and stops the fall-through; only UNSET falls through.

    Returns:
        Timeout in milliseconds, or None for no timeout.
    """
    if scenario_timeout is not UNSET:
        return scenario_timeout
    if default_timeout is not UNSET:
        return default_timeout
    return DEFAULT_TIMEOUT_MS


def _id_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def filter_scenarios(
    scenarios: list[Scenario],
    pattern: str | None = None,
    categories: list[str] | None = None,
    tags: list[str] | None = None,
) -> list[Scenario]:
    """Filter scenarios by id pattern, category and tags, preserving order.

    Args:
        scenarios: Candidate scenarios.
        pattern: Id pattern where ``*`` matches any run of characters.
            Matches anywhere in the id, so ``no-any`` selects
            ``typescript-no-any``.
        categories: Keep scenarios whose category is in this list.
        tags: Keep scenarios carrying at least one of these tags.

    Returns:
        The matching scenarios.
    """
    filtered = scenarios
    if pattern:
        regex = _id_pattern(pattern)
        filtered = [s for s in filtered if regex.search(s.id)]
    if categories:
        filtered = [s for s in filtered if s.category in categories]
    if tags:
        filtered = [s for s in filtered if any(tag in s.tags for tag in tags)]
    return filtered


@dataclass
class EngineOptions:
    """Per-batch settings for the evaluation engine.

    ``model`` is the judge model override recorded on the report;
    ``adapter_model`` is the generation model and keys baselines.
    """

    adapter_name: str
    model: str | None = None
    adapter_model: str | None = None
    pass_threshold: float = DEFAULT_PASS_THRESHOLD
    default_timeout: TimeoutSetting = UNSET
    save_baseline: bool = False
    compare_baseline: bool = False
    reset_workspace: bool = False


class EvaluationEngine:
    """Runs scenarios through an adapter and an ordered set of validators.

    The engine publishes lifecycle events on ``events``; nothing about
    the results depends on who is subscribed.
    """

    def __init__(
        self,
        adapter: BaseAdapter,
        validators: list[BaseValidator],
        workspace_root: Path,
        options: EngineOptions,
        baseline_store: BaselineStore | None = None,
        events: EventBus | None = None,
    ) -> None:
        self.adapter = adapter
        self.validators = validators
        self.workspace_root = workspace_root
        self.options = options
        self.baseline_store = baseline_store or BaselineStore(workspace_root)
        self.events = events or EventBus()

    @property
    def baseline_model(self) -> str:
        return self.options.adapter_model or DEFAULT_MODEL_KEY

    async def check_adapter_availability(self) -> bool:
        return await self.adapter.check_availability()

    def _phase(self, scenario: Scenario, phase: Phase) -> None:
        self.events.publish(PhaseChanged(scenario_id=scenario.id, phase=phase))

    def _log(self, scenario: Scenario, message: str) -> None:
        logger.debug("[%s] %s", scenario.id, message)
        self.events.publish(LogMessage(message=message, scenario_id=scenario.id))

    async def evaluate_scenario(self, scenario: Scenario) -> EvaluationResult:
        """Evaluate one scenario end to end. Never raises.

        Generation failures produce a failed result with score 0 and no
        validator results; a timeout additionally records a single
        ``generation`` violation. Baseline write failures are recorded
        in ``error`` and force the result to fail.
        """
        start = time.perf_counter()
        self._phase(scenario, "pending")
        timeout_ms = resolve_timeout(scenario.timeout_setting, self.options.default_timeout)

        try:
            if self.options.reset_workspace:
                reset_working_directory(self.workspace_root)
            self._phase(scenario, "generating")
            self._log(scenario, f"Generating code (timeout: {timeout_ms if timeout_ms is not None else 'none'})")
            files = await self.adapter.generate(
                scenario.full_prompt,
                scenario.context_files or None,
                timeout_ms,
            )
        except Exception as exc:
            return self._failed_result(scenario, exc, start)

        self._log(scenario, f"Generated {len(files)} file(s)")
        self._phase(scenario, "validating")
        validation_results = await self._run_validators(files, scenario)
        score, violations, passed = aggregate_results(
            validation_results, self.options.pass_threshold
        )

        result = EvaluationResult(
            scenario=scenario,
            passed=passed,
            score=score,
            validation_results=validation_results,
            violations=violations,
            generated_files=files,
            duration_ms=0,
        )
        result = self._apply_baselines(result)

        self._phase(scenario, "complete")
        return result.model_copy(update={"duration_ms": _elapsed_ms(start)})

    async def _run_validators(
        self, files: list[str], scenario: Scenario
    ) -> list[ValidationResult]:
        results: list[ValidationResult] = []
        for validator in self.validators:
            try:
                result = await validator.validate(files, scenario)
            except Exception as exc:
                logger.warning(
                    "Validator %s raised on scenario %s: %s", validator.kind, scenario.id, exc
                )
                result = ValidationResult.failure(validator.kind, str(exc))
            if result.skipped:
                self._log(scenario, f"{result.kind}: skipped ({result.skip_reason or 'not applicable'})")
            else:
                self._log(scenario, f"{result.kind}: {result.score:.2f}")
            results.append(result)
        return results

    def _apply_baselines(self, result: EvaluationResult) -> EvaluationResult:
        adapter_name = self.options.adapter_name
        if self.options.compare_baseline:
            try:
                comparison = self.baseline_store.compare(result, adapter_name, self.baseline_model)
            except BaselineStoreError as exc:
                logger.error("%s", exc)
                result = result.model_copy(update={"error": str(exc), "passed": False})
            else:
                if comparison is not None:
                    result = result.model_copy(update={"baseline_comparison": comparison})

        if self.options.save_baseline:
            try:
                self.baseline_store.save(result, adapter_name, self.baseline_model)
            except BaselineStoreError as exc:
                logger.error("%s", exc)
                result = result.model_copy(update={"error": str(exc), "passed": False})
        return result

    def _failed_result(
        self, scenario: Scenario, exc: Exception, start: float
    ) -> EvaluationResult:
        message = str(exc)
        violations: list[Violation] = []
        if isinstance(exc, (GenerationTimeoutError, TimeoutError)):
            violations.append(
                Violation(
                    kind="generation",
                    message="Code generation timed out",
                    severity=scenario.severity,
                    details=message,
                )
            )
        logger.warning("Scenario %s failed: %s", scenario.id, message)
        self._phase(scenario, "failed")
        return EvaluationResult(
            scenario=scenario,
            passed=False,
            score=0.0,
            validation_results=[],
            violations=violations,
            duration_ms=_elapsed_ms(start),
            status="failed",
            error=f"Evaluation failed: {message}",
        )

    async def evaluate(self, scenarios: list[Scenario]) -> EvaluationReport:
        """Evaluate scenarios sequentially, in order, and build the report."""
        start = time.perf_counter()
        timestamp = datetime.now(timezone.utc)
        self.events.publish(EvaluationStarted(scenarios=list(scenarios)))

        results: list[EvaluationResult] = []
        total = len(scenarios)
        for index, scenario in enumerate(scenarios, start=1):
            self.events.publish(ScenarioStarted(scenario_id=scenario.id, index=index, total=total))
            result = await self.evaluate_scenario(scenario)
            results.append(result)
            self.events.publish(ScenarioCompleted(scenario_id=scenario.id, result=result))

        report = EvaluationReport(
            adapter=self.options.adapter_name,
            model=self.options.model,
            adapter_model=self.options.adapter_model,
            timestamp=timestamp,
            results=results,
            summary=summarize_results(results),
            total_duration_ms=_elapsed_ms(start),
        )
        self.events.publish(EvaluationFinished(report=report))
        return report


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
