# =============================================================================
# lib/saga.py - Compensating Step Runner
# =============================================================================
# Runs a fixed sequence of calls against services that share no transaction
# (Supabase tables, the object store). Each step can register an undo; when a
# later step fails, completed steps are undone newest-first.
#
# Usage:
#   saga = Saga("client 7")
#   saga.add_step("delete jobs", delete_jobs, compensate=restore_jobs)
#   saga.add_step("delete client", delete_client)
#   result = saga.run()
#   if not result.success:
#       ...  # result.failed_step, result.error, result.compensated
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class SagaStep:
    """One forward action and its optional undo."""
    name: str
    action: Callable[[], Any]
    compensate: Callable[[Any], Any] | None = None


@dataclass
class SagaResult:
    """
    Outcome of a saga run.

    `results` maps step name -> return value for every step that finished.
    `compensated` is True when every completed step was undone cleanly
    (vacuously True when the first step failed). A completed step without
    an undo makes it False.
    """
    success: bool
    results: dict[str, Any] = field(default_factory=dict)
    failed_step: str | None = None
    error: Exception | None = None
    compensated: bool = True
    compensation_errors: list[str] = field(default_factory=list)


class Saga:
    """
    Ordered steps with compensating actions.

    The compensation of a step receives that step's return value, so a
    delete step can return the rows it removed and its undo can re-insert
    exactly those.
    """

    def __init__(self, name: str):
        self.name = name
        self.steps: list[SagaStep] = []

    def add_step(
        self,
        name: str,
        action: Callable[[], Any],
        compensate: Callable[[Any], Any] | None = None,
    ) -> Saga:
        self.steps.append(SagaStep(name=name, action=action, compensate=compensate))
        return self

    def run(self) -> SagaResult:
        completed: list[tuple[SagaStep, Any]] = []
        results: dict[str, Any] = {}

        for step in self.steps:
            try:
                value = step.action()
            except Exception as e:
                logger.error(f"Saga '{self.name}' failed at '{step.name}': {e}")
                errors = self._compensate(completed)
                reversible = all(done.compensate is not None for done, _ in completed)
                return SagaResult(
                    success=False,
                    results=results,
                    failed_step=step.name,
                    error=e,
                    compensated=reversible and not errors,
                    compensation_errors=errors,
                )

            completed.append((step, value))
            results[step.name] = value

        logger.debug(f"Saga '{self.name}' completed {len(completed)} steps")
        return SagaResult(success=True, results=results)

    def _compensate(self, completed: list[tuple[SagaStep, Any]]) -> list[str]:
        errors: list[str] = []

        for step, value in reversed(completed):
            if step.compensate is None:
                continue
            try:
                step.compensate(value)
                logger.info(f"Saga '{self.name}' compensated '{step.name}'")
            except Exception as e:
                logger.error(f"Saga '{self.name}' could not compensate '{step.name}': {e}")
                errors.append(f"{step.name}: {e}")

        return errors
