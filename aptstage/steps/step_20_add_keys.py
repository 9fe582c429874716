from __future__ import annotations

from ..apt import PackageEnvironment
from ..phases import Phase


class AddKeysStep:
    step_id = "20_add_keys"
    phase = Phase.TRUSTED

    def should_run(self, env: PackageEnvironment) -> bool:
        return env.has_keys()

    def run(self, env: PackageEnvironment) -> str:
        return env.add_keys()
