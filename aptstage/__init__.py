"""aptstage: stage extra Debian packages into an application-private root.

Core design goals:
- All apt/dpkg state confined to a private tree (no host locking, no host database)
- Direct .deb URLs and repository package names in one manifest
- Phases run in order and stop at the first failure
- Centralized logging
"""

__all__ = []
