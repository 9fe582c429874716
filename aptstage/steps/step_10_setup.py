from __future__ import annotations

import logging

from ..apt import PackageEnvironment
from ..phases import Phase

logger = logging.getLogger(__name__)


class SetupStep:
    step_id = "10_setup"
    phase = Phase.INITIALIZED

    def should_run(self, env: PackageEnvironment) -> bool:
        return True

    def run(self, env: PackageEnvironment) -> str:
        env.setup()
        logger.info("Private apt tree ready under %s", env.layout.apt_root)
        return ""
