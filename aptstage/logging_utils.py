from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Tuple

from .lib.env import HOST

DEFAULT_LOG_PATH = HOST.log_default
FALLBACK_LOG_NAME = "aptstage.log"

ROOT_LOGGER = "aptstage"

_FORMAT = logging.Formatter(
    fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S%z",
)


def _open_log_file(log_path: str) -> Tuple[logging.Handler, str]:
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_path), log_path
    except OSError:
        fallback = str(Path.cwd() / FALLBACK_LOG_NAME)
        return logging.FileHandler(fallback), fallback


def _owned_handlers(logger: logging.Logger) -> List[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_aptstage_handler", False)]


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    *,
    verbose: bool = False,
    also_console: bool = True,
) -> str:
    """Attach file and console handlers to the ``aptstage`` logger.

    The log file always records DEBUG, which is where run_cmd puts the
    captured output of every apt-get/apt-key/curl/dpkg call. The console
    shows INFO (the commands themselves) unless ``verbose`` is set.

    Calling it again replaces the handlers from the previous call.
    Returns the log file path actually in use.
    """

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)

    for h in _owned_handlers(logger):
        logger.removeHandler(h)
        h.close()

    file_handler, chosen_path = _open_log_file(log_path)
    file_handler.setLevel(logging.DEBUG)
    handlers: List[logging.Handler] = [file_handler]

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(logging.DEBUG if verbose else logging.INFO)
        handlers.append(console)

    for h in handlers:
        h.setFormatter(_FORMAT)
        setattr(h, "_aptstage_handler", True)
        logger.addHandler(h)

    logger.debug("Logging to %s (requested %s, verbose=%s)", chosen_path, log_path, verbose)
    return chosen_path
