from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import (
    DownloadFailure,
    InstallFailure,
    MetadataRefreshFailure,
    RepoWriteFailure,
    SetupFailure,
    TrustFailure,
)
from .lib.command import Command, CommandError, Invocation
from .lib.env import HOST
from .lib.fs import copy_file, ensure_dir
from .lib.manifests import ARTIFACT_SUFFIX, ManifestError, PackageRequest, load_package_request

logger = logging.getLogger(__name__)

TOOL_CWD = "/"


@dataclass(frozen=True)
class AptLayout:
    """Private apt tree under a caller-supplied cache root.

    <cache_root>/apt/cache            downloaded archives (cache/archives)
    <cache_root>/apt/state            dpkg/apt working state
    <cache_root>/apt/sources/sources.list
    <cache_root>/apt/etc/trusted.gpg
    """

    cache_root: Path
    install_dir: Path

    @classmethod
    def from_paths(cls, cache_root: str | Path, install_dir: str | Path) -> "AptLayout":
        return cls(cache_root=Path(cache_root), install_dir=Path(install_dir))

    @property
    def apt_root(self) -> Path:
        return self.cache_root / "apt"

    @property
    def cache_dir(self) -> Path:
        return self.apt_root / "cache"

    @property
    def archives_dir(self) -> Path:
        return self.cache_dir / "archives"

    @property
    def state_dir(self) -> Path:
        return self.apt_root / "state"

    @property
    def source_list(self) -> Path:
        return self.apt_root / "sources" / "sources.list"

    @property
    def trusted_keys(self) -> Path:
        return self.apt_root / "etc" / "trusted.gpg"

    @property
    def options(self) -> tuple[str, ...]:
        # Every apt-get call goes through these so host state is never consulted.
        return (
            "-o", "debug::nolocking=true",
            "-o", f"dir::cache={self.cache_dir}",
            "-o", f"dir::state={self.state_dir}",
            "-o", f"dir::etc::sourcelist={self.source_list}",
            "-o", f"dir::etc::trusted={self.trusted_keys}",
        )


class PackageEnvironment:
    """Downloads and unpacks extra .deb packages into a private install root.

    Phases must be called in order: setup, add_keys, add_repos, update,
    download, install. Each raises a StageError subclass on its first
    failure and otherwise returns the captured tool output.
    """

    def __init__(
        self,
        command: Command,
        manifest_path: str | Path,
        cache_root: str | Path,
        install_dir: str | Path,
        *,
        baseline_sources: str | Path = HOST.baseline_sources,
        baseline_keyring: str | Path = HOST.baseline_keyring,
    ) -> None:
        self.command = command
        self.manifest_path = Path(manifest_path)
        self.layout = AptLayout.from_paths(cache_root, install_dir)
        self.baseline_sources = Path(baseline_sources)
        self.baseline_keyring = Path(baseline_keyring)
        self.request: Optional[PackageRequest] = None

        self._apt_get = Invocation("apt-get", self.layout.options, cwd=TOOL_CWD)
        self._apt_key = Invocation("apt-key", ("--keyring", str(self.layout.trusted_keys), "adv"), cwd=TOOL_CWD)

    @property
    def packages(self) -> PackageRequest:
        if self.request is None:
            raise RuntimeError("Package request not loaded; run setup() first")
        return self.request

    def setup(self) -> None:
        lay = self.layout
        try:
            for d in (lay.cache_dir, lay.archives_dir, lay.state_dir, lay.install_dir):
                ensure_dir(d)
        except OSError as e:
            raise SetupFailure(f"Could not create apt directories under {lay.cache_root}: {e}") from e

        for src, dst in ((self.baseline_sources, lay.source_list), (self.baseline_keyring, lay.trusted_keys)):
            try:
                copy_file(src, dst)
            except OSError as e:
                raise SetupFailure(f"Could not copy {src} to {dst}: {e}") from e

        try:
            self.request = load_package_request(self.manifest_path)
        except (OSError, ManifestError) as e:
            raise SetupFailure(f"Could not load package manifest {self.manifest_path}: {e}") from e

        logger.info(
            "Loaded %s: %d packages, %d keys, %d gpg options, %d repos",
            self.manifest_path,
            len(self.request.packages),
            len(self.request.keys),
            len(self.request.gpg_advanced_options),
            len(self.request.repos),
        )

    def has_keys(self) -> bool:
        req = self.packages
        return bool(req.keys) or bool(req.gpg_advanced_options)

    def has_repos(self) -> bool:
        return bool(self.packages.repos)

    def add_keys(self) -> str:
        req = self.packages
        out = ""
        # Advanced options first: they may change how the fetched keys are verified.
        for directive in req.gpg_advanced_options:
            try:
                # Passed through as a single argument, unsplit.
                out = self._apt_key.with_args(directive).run(self.command)
            except CommandError as e:
                raise TrustFailure(
                    f"Could not pass gpg advanced options `{directive}`: {e}",
                    directive=directive,
                    output=e.output,
                ) from e

        for key_url in req.keys:
            try:
                out = self._apt_key.with_args("--fetch-keys", key_url).run(self.command)
            except CommandError as e:
                raise TrustFailure(
                    f"Could not add apt key {key_url}: {e}",
                    directive=key_url,
                    output=e.output,
                ) from e
        return out

    def add_repos(self) -> None:
        path = self.layout.source_list
        try:
            # "r+" refuses to create the file; the seeded baseline must already exist.
            with path.open("r+", encoding="utf-8") as f:
                f.seek(0, os.SEEK_END)
                for repo in self.packages.repos:
                    f.write("\n" + repo)
        except OSError as e:
            raise RepoWriteFailure(f"Could not append repositories to {path}: {e}") from e
        logger.info("Appended %d repositories to %s", len(self.packages.repos), path)

    def update(self) -> str:
        try:
            return self._apt_get.with_args("update").run(self.command)
        except CommandError as e:
            raise MetadataRefreshFailure(f"apt-get update failed: {e}", output=e.output) from e

    def download(self) -> str:
        req = self.packages
        out = ""

        for url in req.artifacts():
            package_file = str(self.layout.archives_dir / os.path.basename(url))
            try:
                out = Invocation(
                    "curl", ("-s", "-L", "-z", package_file, "-o", package_file, url), cwd=TOOL_CWD
                ).run(self.command)
            except CommandError as e:
                raise DownloadFailure(
                    f"Could not download {url}: {e}",
                    kind=DownloadFailure.ARTIFACT,
                    target=url,
                    output=e.output,
                ) from e

        named = req.named()
        if not named:
            logger.info("No repository packages requested")
            return out

        try:
            out = self._apt_get.with_args(
                "-f", "-y", "--force-yes", "-d", "install", "--reinstall", *named
            ).run(self.command)
        except CommandError as e:
            raise DownloadFailure(
                f"Could not download packages {' '.join(named)}: {e}",
                kind=DownloadFailure.REPOSITORY,
                target=" ".join(named),
                output=e.output,
            ) from e
        return out

    def archives(self) -> list[Path]:
        return sorted(self.layout.archives_dir.glob(f"*{ARTIFACT_SUFFIX}"))

    def install(self) -> str:
        out = ""
        archives = self.archives()
        if not archives:
            logger.warning("No %s files found under %s", ARTIFACT_SUFFIX, self.layout.archives_dir)

        for archive in archives:
            try:
                out = Invocation(
                    "dpkg", ("-x", str(archive), str(self.layout.install_dir)), cwd=TOOL_CWD
                ).run(self.command)
            except CommandError as e:
                raise InstallFailure(
                    f"Could not extract {archive}: {e}",
                    artifact=str(archive),
                    output=e.output,
                ) from e
        logger.info("Extracted %d archives into %s", len(archives), self.layout.install_dir)
        return out
