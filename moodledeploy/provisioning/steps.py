"""Sequential, fail-fast step execution."""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..utils.errors import MoodleDeployError, StepError

logger = logging.getLogger(__name__)

DONE = "done"
SKIPPED = "skipped"
PLANNED = "planned"


@dataclass
class Step:
    """One provisioning step with optional pre- and post-conditions."""

    name: str
    description: str
    action: Callable[[], None]
    skip_if: Optional[Callable[[], bool]] = None
    verify: Optional[Callable[[], bool]] = None


@dataclass
class StepResult:
    name: str
    status: str
    message: str = ""


class StepExecutor:
    """Runs steps in order and stops at the first failure; nothing is rolled back."""

    def __init__(self, steps: List[Step], dry_run: bool = False):
        self.steps = steps
        self.dry_run = dry_run
        self.results: List[StepResult] = []

    def plan(self) -> List[StepResult]:
        return [StepResult(step.name, PLANNED, step.description) for step in self.steps]

    def run(self) -> List[StepResult]:
        """
        Execute every step.

        Returns:
            List[StepResult]: One result per executed or skipped step

        Raises:
            StepError: For the first step that raises or fails verification
        """
        total = len(self.steps)
        self.results = []

        for index, step in enumerate(self.steps, 1):
            prefix = f"[{index}/{total}] {step.description}"

            if step.skip_if is not None and step.skip_if():
                logger.info("%s: skipped", prefix)
                self.results.append(StepResult(step.name, SKIPPED, "precondition already satisfied"))
                continue

            logger.info("%s...", prefix)

            try:
                step.action()
            except StepError:
                raise
            except MoodleDeployError as e:
                raise StepError(
                    step.name,
                    f"Step '{step.name}' failed: {e.message}",
                    details=e.details,
                    suggestions=e.suggestions,
                ) from e
            except Exception as e:
                raise StepError(step.name, f"Step '{step.name}' failed: {e}") from e

            if not self.dry_run and step.verify is not None and not step.verify():
                raise StepError(step.name, f"Step '{step.name}' did not reach its expected state")

            logger.info("%s: done", prefix)
            self.results.append(StepResult(step.name, DONE))

        return self.results
