"""Ordered execution of fallible deployment steps.

A pipeline is a plain list of steps. Each step either completes or raises
a DeployError; the first failure stops the run and is reported in the
returned PipelineResult instead of propagating.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from icecream import ic

from minio_deploy.exceptions import DeployError
from minio_deploy.models import PipelineResult, StepResult


@dataclass(frozen=True, slots=True)
class Step:
    """A named pipeline stage.

    Attributes:
        name: Human-readable name used in failure reports.
        action: Callable performing the stage, raising DeployError on failure.

    """

    name: str
    action: Callable[[], None]


def run_step(step: Step) -> StepResult:
    """Run one step and capture its outcome.

    Only DeployError is captured; anything else is a bug and propagates.
    """
    ic(step.name)
    try:
        step.action()
    except DeployError as err:
        return StepResult(name=step.name, ok=False, error=err)
    return StepResult(name=step.name, ok=True)


def run_pipeline(steps: Iterable[Step]) -> PipelineResult:
    """Run steps in order, stopping at the first failure.

    Args:
        steps: The steps to run.

    Returns:
        The results of every step that ran, the last one failed if any did.

    """
    result = PipelineResult()
    for step in steps:
        outcome = run_step(step)
        result.steps.append(outcome)
        if not outcome.ok:
            break
    return result
