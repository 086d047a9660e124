# =============================================================================
# tests/test_saga.py - Compensating Step Runner Tests
# =============================================================================

from unittest.mock import MagicMock

import pytest

from lib.saga import Saga


class TestSagaSuccess:
    """Runs where every step succeeds."""

    def test_runs_steps_in_order(self):
        calls = []
        saga = (
            Saga("test")
            .add_step("first", lambda: calls.append("first") or 1)
            .add_step("second", lambda: calls.append("second") or 2)
        )

        result = saga.run()

        assert result.success is True
        assert calls == ["first", "second"]
        assert result.results == {"first": 1, "second": 2}
        assert result.failed_step is None

    def test_no_compensation_on_success(self):
        undo = MagicMock()
        saga = Saga("test").add_step("only", lambda: "done", compensate=undo)

        saga.run()

        undo.assert_not_called()

    def test_empty_saga_succeeds(self):
        assert Saga("empty").run().success is True


class TestSagaFailure:
    """Runs where a step raises."""

    def test_stops_at_failed_step(self):
        third = MagicMock()
        saga = (
            Saga("test")
            .add_step("first", lambda: 1)
            .add_step("second", MagicMock(side_effect=RuntimeError("boom")))
            .add_step("third", third)
        )

        result = saga.run()

        assert result.success is False
        assert result.failed_step == "second"
        assert str(result.error) == "boom"
        third.assert_not_called()

    def test_compensates_newest_first_with_step_results(self):
        undone = []
        saga = (
            Saga("test")
            .add_step("first", lambda: "rows-1", compensate=lambda v: undone.append(("first", v)))
            .add_step("second", lambda: "rows-2", compensate=lambda v: undone.append(("second", v)))
            .add_step("third", MagicMock(side_effect=RuntimeError("boom")))
        )

        result = saga.run()

        assert undone == [("second", "rows-2"), ("first", "rows-1")]
        assert result.compensated is True

    def test_first_step_failure_is_vacuously_compensated(self):
        result = Saga("test").add_step("first", MagicMock(side_effect=ValueError("x"))).run()

        assert result.success is False
        assert result.compensated is True
        assert result.results == {}

    def test_step_without_undo_is_not_compensated(self):
        saga = (
            Saga("test")
            .add_step("irreversible", lambda: None)
            .add_step("second", MagicMock(side_effect=RuntimeError("boom")))
        )

        result = saga.run()

        assert result.compensated is False

    def test_failing_undo_is_reported(self):
        saga = (
            Saga("test")
            .add_step("first", lambda: 1, compensate=MagicMock(side_effect=RuntimeError("undo broke")))
            .add_step("second", MagicMock(side_effect=RuntimeError("boom")))
        )

        result = saga.run()

        assert result.compensated is False
        assert result.compensation_errors == ["first: undo broke"]

    @pytest.mark.parametrize("exc", [ValueError("v"), KeyError("k"), RuntimeError("r")])
    def test_any_exception_fails_the_step(self, exc):
        result = Saga("test").add_step("only", MagicMock(side_effect=exc)).run()

        assert result.error is exc
