from __future__ import annotations

from ..apt import PackageEnvironment
from ..phases import Phase


class UpdateStep:
    step_id = "40_update"
    phase = Phase.UPDATED

    def should_run(self, env: PackageEnvironment) -> bool:
        return True

    def run(self, env: PackageEnvironment) -> str:
        # Must follow keys and repos so the refreshed lists see both.
        return env.update()
