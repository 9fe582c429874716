from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from .pipeline import PipelineResult

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def result_to_dict(result: PipelineResult) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "phase": result.phase.value,
        "ok": result.ok,
        "ran_steps": list(result.ran_steps),
        "skipped_steps": list(result.skipped_steps),
        "failed_step": result.failed_step,
        "error": None,
        "output": result.output,
    }
    if result.error is not None:
        data["error"] = {"type": type(result.error).__name__, "message": str(result.error)}
    return data


def save_report(path: str, result: PipelineResult) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    data = result_to_dict(result)

    fmt = _detect_format(p)
    if fmt in {"yaml", "yml"}:
        try:
            import yaml  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError("YAML report requested but PyYAML is not available.") from e
        p.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Wrote run report %s", str(p))
