from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HostPaths:
    baseline_sources: str = "/etc/apt/sources.list"
    baseline_keyring: str = "/etc/apt/trusted.gpg"
    log_default: str = "/tmp/aptstage.log"


HOST = HostPaths()
