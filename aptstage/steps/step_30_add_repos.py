from __future__ import annotations

from ..apt import PackageEnvironment
from ..phases import Phase


class AddReposStep:
    step_id = "30_add_repos"
    phase = Phase.CONFIGURED

    def should_run(self, env: PackageEnvironment) -> bool:
        return env.has_repos()

    def run(self, env: PackageEnvironment) -> str:
        env.add_repos()
        return ""
