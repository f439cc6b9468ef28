"""Lifecycle events published by the evaluation engine.

Events are plain dataclasses. Any number of callables can subscribe to
an EventBus; each receives every published event in order. A failing
subscriber is logged and never interrupts the evaluation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal, Union

from codebench.models.result import EvaluationReport, EvaluationResult
from codebench.models.scenario import Scenario

logger = logging.getLogger(__name__)

Phase = Literal["pending", "generating", "validating", "complete", "failed"]


@dataclass(frozen=True)
class EvaluationStarted:
    scenarios: list[Scenario]


@dataclass(frozen=True)
class ScenarioStarted:
    scenario_id: str
    index: int
    total: int


@dataclass(frozen=True)
class PhaseChanged:
    scenario_id: str
    phase: Phase


@dataclass(frozen=True)
class ScenarioCompleted:
    scenario_id: str
    result: EvaluationResult


@dataclass(frozen=True)
class EvaluationFinished:
    report: EvaluationReport


@dataclass(frozen=True)
class LogMessage:
    message: str
    scenario_id: str | None = None


Event = Union[
    EvaluationStarted,
    ScenarioStarted,
    PhaseChanged,
    ScenarioCompleted,
    EvaluationFinished,
    LogMessage,
]

Subscriber = Callable[[Event], None]


class EventBus:
    """Fan-out of engine events to subscribed callables."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    def subscribe(self, subscriber: Subscriber) -> Callable[[], None]:
        """Register a subscriber. Returns a callable that unsubscribes it."""
        self._subscribers.append(subscriber)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    def publish(self, event: Event) -> None:
        for subscriber in list(self._subscribers):
            try:
                subscriber(event)
            except Exception:
                logger.exception("Event subscriber %r failed on %s", subscriber, type(event).__name__)
