from __future__ import annotations

import logging

from ..apt import PackageEnvironment
from ..phases import Phase

logger = logging.getLogger(__name__)


class DownloadStep:
    step_id = "50_download"
    phase = Phase.DOWNLOADED

    def should_run(self, env: PackageEnvironment) -> bool:
        return True

    def run(self, env: PackageEnvironment) -> str:
        req = env.packages
        logger.info(
            "Downloading packages (artifacts=%s named=%s)",
            ",".join(req.artifacts()),
            ",".join(req.named()),
        )
        return env.download()
