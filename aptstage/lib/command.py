from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 1800.0


class CommandError(RuntimeError):
    def __init__(self, message: str, *, argv: Sequence[str], returncode: int | None, output: str = "") -> None:
        super().__init__(message)
        self.argv = list(argv)
        self.returncode = returncode
        self.output = output


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    output: str


@dataclass(frozen=True)
class Invocation:
    """A program plus its ordered arguments and working directory."""

    program: str
    args: tuple[str, ...] = ()
    cwd: str = "/"

    @property
    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def with_args(self, *extra: str) -> "Invocation":
        return Invocation(program=self.program, args=(*self.args, *extra), cwd=self.cwd)

    def run(self, command: "Command") -> str:
        return command.output(self.cwd, self.program, *self.args)


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    cwd: str | None = None,
    timeout: float | None = DEFAULT_TIMEOUT_S,
    check: bool = True,
    env: Mapping[str, str] | None = None,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - stdout and stderr are merged into a single captured stream.
    - A program that cannot be started or exceeds ``timeout`` raises CommandError.
    """

    argv_list = list(argv)
    logger.info("CMD %s", _fmt_argv(argv_list))

    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.output or ""
        if isinstance(partial, bytes):
            partial = partial.decode("utf-8", errors="replace")
        raise CommandError(
            f"Command timed out after {timeout}s: {_fmt_argv(argv_list)}",
            argv=argv_list,
            returncode=None,
            output=partial,
        ) from e
    except OSError as e:
        raise CommandError(
            f"Command could not be started: {_fmt_argv(argv_list)}: {e}",
            argv=argv_list,
            returncode=None,
        ) from e

    if p.stdout:
        logger.debug("OUTPUT %s", p.stdout.strip())

    if check and p.returncode != 0:
        raise CommandError(
            f"Command failed ({p.returncode}): {_fmt_argv(argv_list)}",
            argv=argv_list,
            returncode=p.returncode,
            output=p.stdout,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, output=p.stdout)


class Command(Protocol):
    """Executes a program and returns its combined output.

    Implementations raise CommandError when the program exits non-zero
    or cannot be started.
    """

    def output(self, cwd: str, program: str, *args: str) -> str:
        ...


class SubprocessCommand:
    def __init__(self, *, timeout: float | None = DEFAULT_TIMEOUT_S) -> None:
        self.timeout = timeout

    def output(self, cwd: str, program: str, *args: str) -> str:
        return run_cmd([program, *args], cwd=cwd, timeout=self.timeout).output
