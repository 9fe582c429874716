import textwrap
from pathlib import Path

import pytest

from aptstage.errors import DownloadFailure, InstallFailure, MetadataRefreshFailure
from tests.conftest import FakeCommand


def test_update_uses_private_options(ready_env) -> None:
    cmd = FakeCommand(output="Hit:1 http://deb.debian.org\n")
    env = ready_env("packages: [curl]\n", cmd)
    assert env.update() == "Hit:1 http://deb.debian.org\n"
    assert cmd.calls == [("apt-get", *env.layout.options, "update")]


def test_update_failure(ready_env) -> None:
    env = ready_env("packages: [curl]\n", FakeCommand(fail_on=1))
    with pytest.raises(MetadataRefreshFailure) as excinfo:
        env.update()
    assert "simulated failure of apt-get" in excinfo.value.output


def test_download_partitions_artifacts_and_named(ready_env) -> None:
    cmd = FakeCommand()
    env = ready_env(
        textwrap.dedent(
            """\
            packages:
              - http://example.com/foo.deb
              - bar
              - http://example.com/pool/baz.deb
              - ""
            """
        ),
        cmd,
    )
    env.download()

    archives = env.layout.archives_dir
    foo = str(archives / "foo.deb")
    baz = str(archives / "baz.deb")
    assert cmd.calls == [
        ("curl", "-s", "-L", "-z", foo, "-o", foo, "http://example.com/foo.deb"),
        ("curl", "-s", "-L", "-z", baz, "-o", baz, "http://example.com/pool/baz.deb"),
        ("apt-get", *env.layout.options, "-f", "-y", "--force-yes", "-d", "install", "--reinstall", "bar"),
    ]


def test_download_batches_named_packages(ready_env) -> None:
    cmd = FakeCommand()
    env = ready_env("packages: [libpq5, libxml2, libpq5]\n", cmd)
    env.download()
    assert len(cmd.calls) == 1
    assert cmd.calls[0][-3:] == ("libpq5", "libxml2", "libpq5")


def test_download_only_artifacts_skips_apt(ready_env) -> None:
    cmd = FakeCommand()
    env = ready_env("packages: ['http://example.com/foo.deb']\n", cmd)
    env.download()
    assert cmd.programs == ["curl"]


def test_download_artifact_failure_short_circuits(ready_env) -> None:
    cmd = FakeCommand(fail_on=1)
    env = ready_env("packages: ['http://a/one.deb', 'http://a/two.deb', named]\n", cmd)
    with pytest.raises(DownloadFailure) as excinfo:
        env.download()
    assert len(cmd.calls) == 1
    assert excinfo.value.kind == DownloadFailure.ARTIFACT
    assert excinfo.value.target == "http://a/one.deb"


def test_download_repository_failure(ready_env) -> None:
    cmd = FakeCommand(fail_on=2)
    env = ready_env("packages: ['http://a/one.deb', libfoo, libbar]\n", cmd)
    with pytest.raises(DownloadFailure) as excinfo:
        env.download()
    assert excinfo.value.kind == DownloadFailure.REPOSITORY
    assert excinfo.value.target == "libfoo libbar"
    assert excinfo.value.output


def _seed_archives(env, names) -> list:
    out = []
    for name in names:
        p = env.layout.archives_dir / name
        p.write_bytes(b"!<arch>\n")
        out.append(p)
    return out


def test_install_extracts_each_deb(ready_env) -> None:
    cmd = FakeCommand()
    env = ready_env("packages: []\n", cmd)
    debs = _seed_archives(env, ["b_1.0_amd64.deb", "a_2.0_amd64.deb"])
    (env.layout.archives_dir / "lock").write_text("")
    (env.layout.archives_dir / "partial").mkdir()

    env.install()

    install_dir = str(env.layout.install_dir)
    assert cmd.calls == [("dpkg", "-x", str(p), install_dir) for p in sorted(debs)]


def test_install_with_no_archives(ready_env) -> None:
    cmd = FakeCommand()
    env = ready_env("packages: []\n", cmd)
    assert env.install() == ""
    assert cmd.calls == []


def test_install_failure_names_artifact(ready_env) -> None:
    cmd = FakeCommand(fail_on=2)
    env = ready_env("packages: []\n", cmd)
    debs = sorted(_seed_archives(env, ["a.deb", "b.deb", "c.deb"]))
    with pytest.raises(InstallFailure) as excinfo:
        env.install()
    assert len(cmd.calls) == 2
    assert excinfo.value.artifact == str(debs[1])
