from __future__ import annotations

from enum import Enum


class Phase(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    TRUSTED = "trusted"
    CONFIGURED = "configured"
    UPDATED = "updated"
    DOWNLOADED = "downloaded"
    INSTALLED = "installed"
    FAILED = "failed"
