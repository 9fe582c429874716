from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def copy_file(src: str | Path, dst: str | Path) -> None:
    """Copy a single file, creating parent directories of ``dst``.

    An existing destination is overwritten.
    """
    s = Path(src)
    d = Path(dst)
    if not s.is_file():
        raise FileNotFoundError(str(s))

    d.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(s, d)
    logger.debug("Copied %s -> %s", str(s), str(d))
