from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Tuple

ARTIFACT_SUFFIX = ".deb"

_LIST_KEYS = ("keys", "gpg_advanced_options", "repos", "packages")


class ManifestError(ValueError):
    pass


@dataclass(frozen=True)
class PackageRequest:
    keys: Tuple[str, ...] = ()
    gpg_advanced_options: Tuple[str, ...] = ()
    repos: Tuple[str, ...] = ()
    packages: Tuple[str, ...] = ()

    def artifacts(self) -> list[str]:
        """Packages addressed directly by a .deb URL, in manifest order."""
        return [p for p in self.packages if p.endswith(ARTIFACT_SUFFIX)]

    def named(self) -> list[str]:
        """Packages resolved through repository metadata; empty entries dropped."""
        return [p for p in self.packages if p and not p.endswith(ARTIFACT_SUFFIX)]


def _string_list(data: Dict[str, Any], key: str, source: Path) -> Tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ManifestError(f"{source}: '{key}' must be a list, got {type(value).__name__}")

    out: list[str] = []
    for i, item in enumerate(value):
        if item is None:
            out.append("")
        elif isinstance(item, (str, int, float)) and not isinstance(item, bool):
            out.append(str(item).strip())
        else:
            raise ManifestError(f"{source}: '{key}[{i}]' must be a string, got {type(item).__name__}")
    return tuple(out)


def parse_package_request(data: Any, *, source: str | Path = "<manifest>") -> PackageRequest:
    src = Path(source)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest must be a mapping/dict: {src}")

    fields = {key: _string_list(data, key, src) for key in _LIST_KEYS}
    return PackageRequest(**fields)


def load_package_request(path: str | Path) -> PackageRequest:
    """Load the package manifest (YAML, or JSON which YAML accepts)."""
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("PyYAML required to load manifests") from e

    p = Path(path)
    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ManifestError(f"Manifest {p} is not valid UTF-8: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Could not parse manifest {p}: {e}") from e
    return parse_package_request(data, source=p)
