from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .lib.command import DEFAULT_TIMEOUT_S
from .lib.env import HOST


@dataclass(frozen=True)
class StageConfig:
    raw: Dict[str, Any]

    def _get(self, key: str) -> Optional[str]:
        value = self.raw.get(key)
        return None if value in (None, "") else str(value)

    @property
    def manifest(self) -> Optional[str]:
        return self._get("manifest")

    @property
    def cache_dir(self) -> Optional[str]:
        return self._get("cache_dir")

    @property
    def install_dir(self) -> Optional[str]:
        return self._get("install_dir")

    @property
    def baseline_sources(self) -> str:
        return str(((self.raw.get("baseline") or {}).get("sources")) or HOST.baseline_sources)

    @property
    def baseline_keyring(self) -> str:
        return str(((self.raw.get("baseline") or {}).get("keyring")) or HOST.baseline_keyring)

    @property
    def timeout(self) -> Optional[float]:
        value = self.raw.get("timeout", DEFAULT_TIMEOUT_S)
        if value is None or value == 0:
            return None
        return float(value)

    @property
    def log_path(self) -> str:
        return self._get("log_path") or HOST.log_default

    @property
    def report_path(self) -> Optional[str]:
        return self._get("report_path")

    @property
    def profile_script(self) -> Optional[str]:
        return self._get("profile_script")

    def with_overrides(self, **overrides: Any) -> "StageConfig":
        """Return a copy where non-None overrides replace file values.

        ``baseline_sources``/``baseline_keyring`` map onto the nested ``baseline`` mapping.
        """
        raw = dict(self.raw)
        baseline = dict(raw.get("baseline") or {})
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "baseline_sources":
                baseline["sources"] = value
            elif key == "baseline_keyring":
                baseline["keyring"] = value
            else:
                raw[key] = value
        raw["baseline"] = baseline
        return StageConfig(raw=raw)


def load_stage_config(path: Optional[str]) -> StageConfig:
    if path is None:
        return StageConfig(raw={})

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("stage config must be YAML")

    try:
        import yaml  # type: ignore
    except Exception as e:
        raise RuntimeError("PyYAML is required to read the stage config") from e

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Could not parse {p}: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    return StageConfig(raw=raw)
