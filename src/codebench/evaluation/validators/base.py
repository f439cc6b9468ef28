"""Base validator abstract class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from codebench.models.result import ValidationResult
from codebench.models.scenario import Scenario


class BaseValidator(ABC):
    """Abstract base class for generated-code validators.

    Each validator receives the changed file paths reported by the
    adapter and the scenario under evaluation, and returns a
    ValidationResult. A validator that does not apply to the scenario
    returns a skipped result rather than raising.
    """

    kind: ClassVar[str]

    @abstractmethod
    async def validate(self, files: list[str], scenario: Scenario) -> ValidationResult:
        """Validate generated files against the scenario's rules.

        Args:
            files: Changed file paths, relative to the workspace root
                or absolute.
            scenario: The scenario being evaluated.

        Returns:
            ValidationResult with score, violations, and error details.
        """
