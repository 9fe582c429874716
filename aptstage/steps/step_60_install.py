from __future__ import annotations

from ..apt import PackageEnvironment
from ..phases import Phase


class InstallStep:
    step_id = "60_install"
    phase = Phase.INSTALLED

    def should_run(self, env: PackageEnvironment) -> bool:
        return True

    def run(self, env: PackageEnvironment) -> str:
        return env.install()
