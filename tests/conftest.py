from pathlib import Path
from typing import List, Optional, Tuple

import pytest

from aptstage.apt import PackageEnvironment
from aptstage.lib.command import CommandError


class FakeCommand:
    """Records every invocation; optionally fails on the N-th (1-based) call."""

    def __init__(self, fail_on: Optional[int] = None, output: str = "ok\n") -> None:
        self.fail_on = fail_on
        self.output_text = output
        self.calls: List[Tuple[str, ...]] = []
        self.cwds: List[str] = []

    def output(self, cwd: str, program: str, *args: str) -> str:
        self.calls.append((program, *args))
        self.cwds.append(cwd)
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise CommandError(
                f"{program} failed",
                argv=[program, *args],
                returncode=100,
                output=f"E: simulated failure of {program}\n",
            )
        return self.output_text

    @property
    def programs(self) -> List[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def baseline(tmp_path: Path) -> Tuple[Path, Path]:
    host = tmp_path / "host"
    host.mkdir()
    sources = host / "sources.list"
    sources.write_text("deb http://deb.debian.org/debian bookworm main", encoding="utf-8")
    keyring = host / "trusted.gpg"
    keyring.write_bytes(b"\x99\x01\x0dbaseline-key")
    return sources, keyring


@pytest.fixture()
def make_env(tmp_path: Path, baseline):
    """Build a PackageEnvironment over tmp_path from manifest text."""

    def _make(manifest: str, command: Optional[FakeCommand] = None) -> PackageEnvironment:
        manifest_path = tmp_path / "apt.yml"
        manifest_path.write_text(manifest, encoding="utf-8")
        sources, keyring = baseline
        return PackageEnvironment(
            command if command is not None else FakeCommand(),
            manifest_path,
            tmp_path / "cache",
            tmp_path / "install",
            baseline_sources=sources,
            baseline_keyring=keyring,
        )

    return _make


@pytest.fixture()
def ready_env(make_env):
    """Like make_env, but setup() has already run."""

    def _make(manifest: str, command: Optional[FakeCommand] = None) -> PackageEnvironment:
        env = make_env(manifest, command)
        env.setup()
        return env

    return _make
