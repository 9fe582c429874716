from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .apt import PackageEnvironment
from .config import StageConfig, load_stage_config
from .lib.command import Command, SubprocessCommand
from .lib.profile import write_profile_script
from .logging_utils import configure_logging
from .pipeline import PipelineResult, run_pipeline
from .report import save_report

logger = logging.getLogger(__name__)


def run(cfg: StageConfig, *, command: Optional[Command] = None) -> PipelineResult:
    """Stage the packages described by cfg.manifest into cfg.install_dir."""

    missing = [k for k in ("manifest", "cache_dir", "install_dir") if getattr(cfg, k) is None]
    if missing:
        raise ValueError(f"Missing required settings: {', '.join(missing)}")

    env = PackageEnvironment(
        command if command is not None else SubprocessCommand(timeout=cfg.timeout),
        cfg.manifest,
        cfg.cache_dir,
        cfg.install_dir,
        baseline_sources=cfg.baseline_sources,
        baseline_keyring=cfg.baseline_keyring,
    )

    result = run_pipeline(env)
    try:
        if result.ok and cfg.profile_script:
            write_profile_script(cfg.install_dir, cfg.profile_script)
    finally:
        if cfg.report_path:
            save_report(cfg.report_path, result)

    if result.ok:
        logger.info("Packages staged into %s (ran=%s skipped=%s)",
                    cfg.install_dir, ",".join(result.ran_steps), ",".join(result.skipped_steps))
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="aptstage")
    p.add_argument("--config", default=None, help="YAML stage config; flags override its values")
    p.add_argument("--manifest", default=None, help="Package manifest (apt.yml)")
    p.add_argument("--cache-dir", default=None, help="Root of the private apt tree")
    p.add_argument("--install-dir", default=None, help="Directory packages are unpacked into")
    p.add_argument("--baseline-sources", default=None, help="sources.list to seed the private tree")
    p.add_argument("--baseline-keyring", default=None, help="trusted.gpg to seed the private tree")
    p.add_argument("--timeout", type=float, default=None, help="Per-command timeout in seconds (0 disables)")
    p.add_argument("--log", default=None, help="Path to log file")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument("--profile-script", default=None, help="Write shell exports for the install dir here")
    p.add_argument("-v", "--verbose", action="store_true")

    args = p.parse_args(argv)

    try:
        cfg = load_stage_config(args.config).with_overrides(
            manifest=args.manifest,
            cache_dir=args.cache_dir,
            install_dir=args.install_dir,
            baseline_sources=args.baseline_sources,
            baseline_keyring=args.baseline_keyring,
            timeout=args.timeout,
            log_path=args.log,
            report_path=args.report,
            profile_script=args.profile_script,
        )
    except FileNotFoundError as e:
        p.error(f"config file not found: {e}")
    except ValueError as e:
        p.error(f"invalid config {args.config}: {e}")

    configure_logging(log_path=cfg.log_path, verbose=bool(args.verbose))

    try:
        result = run(cfg)
    except ValueError as e:
        p.error(str(e))

    if not result.ok:
        if result.output:
            sys.stderr.write(result.output)
            if not result.output.endswith("\n"):
                sys.stderr.write("\n")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
