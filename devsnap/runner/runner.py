"""
Snapshot replay.

The runner walks a fixed sequence for an unpacked snapshot::

    secrets -> for each environment: preflight -> setup -> run -> done

Environments are processed one after another in metadata order. Failures
are split into two tiers:

- soft: a missing runtime skips that environment; a failing setup step is
  logged and the remaining steps still run
- fatal: a run command exiting nonzero stops the whole replay

Snapshots made by older releases may also carry global ``commands``; those
run last, and there any setup failure is fatal.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, MutableMapping, Optional

from ..config import DEFAULT_SECRETS_FILE
from ..errors import CommandFailedError, DevpackError, PreflightError
from ..metadata import EnvironmentConfig, SnapshotMetadata
from .execution import CommandExecutor, SubprocessExecutor, split_command
from .installers import devpack_target, install_from_devpack
from .preflight import require_runtime
from .prompts import ConsolePrompter, Prompter
from .secrets import prepare_secrets

logger = logging.getLogger(__name__)


@dataclass
class EnvironmentReport:
    """What happened to one environment during a replay"""
    type: str
    runtime_available: bool = True
    setup_failures: List[str] = field(default_factory=list)
    skipped_steps: List[str] = field(default_factory=list)
    ran: bool = False
    declined: bool = False


@dataclass
class RunReport:
    """Summary of a whole replay"""
    environments: List[EnvironmentReport] = field(default_factory=list)
    blank_secrets: List[str] = field(default_factory=list)
    legacy_ran: bool = False


class Runner:
    """
    Replays snapshot metadata inside a sandbox directory.

    Usage:
        meta = unpack_archive("api.devsnap", ".devsnap_sandbox")
        report = Runner(Path(".devsnap_sandbox"), meta).run()

    Args:
        sandbox: Directory the snapshot was unpacked into
        meta: Metadata recovered from the snapshot
        executor: Runs commands (defaults to ``SubprocessExecutor``)
        prompter: Asks confirmations and secret values (defaults to click)
        manual: Ask before every setup step as well as before run commands
        secrets_file: Name of the secrets file inside the sandbox
        environ: Environment mutated by the secrets phase and passed to
            every command (defaults to ``os.environ``)
    """

    def __init__(
        self,
        sandbox: Path,
        meta: SnapshotMetadata,
        *,
        executor: Optional[CommandExecutor] = None,
        prompter: Optional[Prompter] = None,
        manual: bool = False,
        secrets_file: str = DEFAULT_SECRETS_FILE,
        environ: Optional[MutableMapping[str, str]] = None,
    ):
        self.sandbox = Path(sandbox)
        self.meta = meta
        self.executor = executor or SubprocessExecutor()
        self.prompter = prompter or ConsolePrompter()
        self.manual = manual
        self.secrets_file = secrets_file
        self.environ = os.environ if environ is None else environ

    def run(self) -> RunReport:
        """
        Execute the full replay.

        Raises:
            CommandFailedError: If a run command (or a legacy setup step)
                exits nonzero
            DevpackError: If a legacy devpack cannot be parsed
        """
        types = ", ".join(env.type for env in self.meta.environments)
        logger.info("Starting sandbox for '%s' (%s)", self.meta.name, types)

        report = RunReport()
        report.blank_secrets = prepare_secrets(
            self.sandbox,
            self.meta.required_vars,
            self.prompter,
            self.environ,
            filename=self.secrets_file,
        )

        for env in self.meta.environments:
            report.environments.append(self._run_environment(env))

        if not self.meta.commands.is_empty():
            self._run_legacy()
            report.legacy_ran = True

        return report

    def _allowed(self, command: str, step: str) -> bool:
        if not self.manual:
            return True
        return self.prompter.confirm(f"{step}: '{command}'. Continue?")

    def _execute(self, command: str, *, phase: str) -> None:
        argv = split_command(command)
        if not argv:
            return
        logger.info("[$] %s", command)
        status = self.executor.run(argv, self.sandbox, env=self.environ)
        if status != 0:
            raise CommandFailedError(command, status, phase=phase)

    def _setup_step(self, env: EnvironmentConfig, command: str) -> None:
        target = devpack_target(command)
        if target is None:
            self._execute(command, phase="setup")
            return
        install_from_devpack(
            self.sandbox,
            target,
            self.executor,
            env_type=env.type,
            environ=self.environ,
        )

    def _run_environment(self, env: EnvironmentConfig) -> EnvironmentReport:
        report = EnvironmentReport(type=env.type)

        try:
            require_runtime(env, self.executor, self.sandbox, self.environ)
        except PreflightError as exc:
            logger.warning("Skipping '%s' environment: %s", env.type, exc)
            report.runtime_available = False
            return report

        if env.setup:
            logger.info("Setting up %s environment", env.type)
        for command in env.setup:
            if not self._allowed(command, "Setup step"):
                report.skipped_steps.append(command)
                continue
            try:
                self._setup_step(env, command)
            except (CommandFailedError, DevpackError) as exc:
                logger.warning("Setup step failed, continuing: %s", exc)
                report.setup_failures.append(command)

        if env.run:
            if not self.prompter.confirm(f"Run '{env.run}' for {env.type}?"):
                logger.info("Skipped run step for %s", env.type)
                report.declined = True
                return report
            self._execute(env.run, phase="run")
            report.ran = True

        return report

    def _run_legacy(self) -> None:
        commands = self.meta.commands
        for command in commands.setup:
            if not self._allowed(command, "Setup step"):
                continue
            target = devpack_target(command)
            if target is None:
                self._execute(command, phase="setup")
            else:
                install_from_devpack(self.sandbox, target, self.executor, environ=self.environ)

        if commands.run and self.prompter.confirm(f"Run '{commands.run}'?"):
            logger.info("Running: %s", commands.run)
            self._execute(commands.run, phase="run")


def run_snapshot(sandbox: Path, meta: SnapshotMetadata, **options) -> RunReport:
    """Convenience wrapper around ``Runner(sandbox, meta, **options).run()``."""
    return Runner(sandbox, meta, **options).run()


__all__ = ["EnvironmentReport", "RunReport", "Runner", "run_snapshot"]
