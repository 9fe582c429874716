from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence

from .apt import PackageEnvironment
from .errors import StageError
from .phases import Phase
from .steps import AddKeysStep, AddReposStep, DownloadStep, InstallStep, SetupStep, UpdateStep

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single pipeline phase."""

    step_id: str
    phase: Phase

    def should_run(self, env: PackageEnvironment) -> bool:
        ...

    def run(self, env: PackageEnvironment) -> str:
        ...


@dataclass
class PipelineResult:
    phase: Phase = Phase.UNINITIALIZED
    ran_steps: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)
    failed_step: Optional[str] = None
    error: Optional[StageError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def output(self) -> str:
        """Captured output of the failing tool, or of the last step that ran."""
        if self.error is not None:
            return self.error.output
        if self.ran_steps:
            return self.outputs.get(self.ran_steps[-1], "")
        return ""


def build_steps() -> List[Step]:
    return [
        SetupStep(),
        AddKeysStep(),
        AddReposStep(),
        UpdateStep(),
        DownloadStep(),
        InstallStep(),
    ]


def run_pipeline(env: PackageEnvironment, steps: Optional[Sequence[Step]] = None) -> PipelineResult:
    """Run phases in order, stopping at the first failure.

    Skipped phases still advance the state; a failure moves it to FAILED
    and nothing after the failing phase runs.
    """

    result = PipelineResult()

    for step in steps if steps is not None else build_steps():
        try:
            if not step.should_run(env):
                logger.info("Skipping step %s (nothing to do)", step.step_id)
                result.skipped_steps.append(step.step_id)
                result.phase = step.phase
                continue

            logger.info("Running step %s", step.step_id)
            result.outputs[step.step_id] = step.run(env)
        except StageError as e:
            logger.error("Step %s failed: %s", step.step_id, e)
            if e.output:
                logger.error("Output of failed step %s:\n%s", step.step_id, e.output.rstrip())
            result.phase = Phase.FAILED
            result.failed_step = step.step_id
            result.error = e
            return result

        result.ran_steps.append(step.step_id)
        result.phase = step.phase

    return result
