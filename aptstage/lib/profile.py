from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)

_MULTIARCH = "x86_64-linux-gnu"

# Relative to the install root, in lookup order.
_SEARCH_DIRS: Dict[str, List[str]] = {
    "PATH": ["usr/bin", "usr/sbin", "bin"],
    "LD_LIBRARY_PATH": ["usr/lib", f"usr/lib/{_MULTIARCH}", f"lib/{_MULTIARCH}", "lib"],
    "LIBRARY_PATH": ["usr/lib", f"usr/lib/{_MULTIARCH}", f"lib/{_MULTIARCH}", "lib"],
    "INCLUDE_PATH": ["usr/include", f"usr/include/{_MULTIARCH}"],
    "CPATH": ["usr/include", f"usr/include/{_MULTIARCH}"],
    "CPPPATH": ["usr/include", f"usr/include/{_MULTIARCH}"],
    "PKG_CONFIG_PATH": ["usr/lib/pkgconfig", f"usr/lib/{_MULTIARCH}/pkgconfig", "usr/share/pkgconfig"],
}


def environment_variables(install_dir: str | Path) -> Dict[str, str]:
    """Search-path variables that prepend the install root to the existing value."""
    root = Path(install_dir)
    env: Dict[str, str] = {}
    for var, rels in _SEARCH_DIRS.items():
        dirs = [str(root / rel) for rel in rels]
        env[var] = os.pathsep.join([*dirs, f"${var}"])
    return env


def render_profile_script(install_dir: str | Path) -> str:
    lines = [f'export {var}="{value}"' for var, value in environment_variables(install_dir).items()]
    return "\n".join(lines) + "\n"


def write_profile_script(install_dir: str | Path, dest: str | Path) -> Path:
    p = Path(dest)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(render_profile_script(install_dir), encoding="utf-8")
    logger.info("Wrote profile script %s for %s", str(p), str(install_dir))
    return p
