"""Tests for core/pipeline.py module."""

from unittest.mock import MagicMock

import pytest

from minio_deploy.core.pipeline import Step, run_pipeline, run_step
from minio_deploy.exceptions import ConfigurationError, ReadinessError


class TestRunStep:
    """Tests for single step execution."""

    def test_success(self):
        """Test that a completing step is reported ok."""
        result = run_step(Step("noop", lambda: None))

        assert result.ok is True
        assert result.error is None
        assert result.name == "noop"

    def test_deploy_error_captured(self):
        """Test that a DeployError becomes a failed result."""
        err = ConfigurationError("bad .env")
        result = run_step(Step("set up environment", MagicMock(side_effect=err)))

        assert result.ok is False
        assert result.error is err

    def test_other_errors_propagate(self):
        """Test that unexpected exceptions are not swallowed."""
        with pytest.raises(ZeroDivisionError):
            run_step(Step("broken", lambda: 1 / 0))


class TestRunPipeline:
    """Tests for ordered pipeline execution."""

    def test_all_steps_run_in_order(self):
        """Test that every step runs once, in order."""
        calls = []
        steps = [Step(name, lambda name=name: calls.append(name)) for name in ("a", "b", "c")]

        result = run_pipeline(steps)

        assert result.ok is True
        assert calls == ["a", "b", "c"]
        assert result.failed_step is None
        assert result.error is None

    def test_stops_at_first_failure(self):
        """Test that steps after a failure never run."""
        err = ReadinessError("not ready")
        last = MagicMock()
        steps = [
            Step("deploy", MagicMock()),
            Step("wait for readiness", MagicMock(side_effect=err)),
            Step("display information", last),
        ]

        result = run_pipeline(steps)

        assert result.ok is False
        assert result.failed_step.name == "wait for readiness"
        assert result.error is err
        assert len(result.steps) == 2
        last.assert_not_called()

    def test_empty(self):
        """Test that an empty pipeline succeeds."""
        assert run_pipeline([]).ok is True
