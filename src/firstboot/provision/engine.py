# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/provision/engine.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..config.models import ProvisionConfig
from ..errors import ProvisionError
from ..execution.runner import CommandRunner
from ..observers.dispatcher import EventBus
from ..observers.events import (
    new_ctx,
    AlreadyProvisioned,
    CommandCompleted,
    FileWritten,
    HostnameApplied,
    ProvisionStarted,
    ProvisionSummary,
    StepFailed,
    UserCreated,
)
from ..system.interface import System
from ..system.local import LocalSystem
from .files import FileWriter
from .gate import DEFAULT_MARKER_DIR, IdempotencyGate
from .hostname import DEFAULT_HOSTNAME_FILE, HostnameSetter
from .users import UserProvisioner

log = logging.getLogger("firstboot")


@dataclass(frozen=True)
class ProvisionOptions:
    marker_dir: str = DEFAULT_MARKER_DIR
    hostname_file: str = DEFAULT_HOSTNAME_FILE
    command_timeout: Optional[float] = None


@dataclass
class ApplyResult:
    status: str                 # "DONE" | "SKIPPED"
    users: int = 0
    files: int = 0
    commands: int = 0

    def summary(self) -> str:
        return f"{self.status} users={self.users} files={self.files} commands={self.commands}"


class Provisioner:
    """
    Applies a ProvisionConfig to the machine, in order:

        gate -> hostname -> users -> files -> runcmd

    The first failing step aborts the run and its exception propagates
    unchanged. Nothing already applied is undone.
    """

    def __init__(
        self,
        system: System,
        options: Optional[ProvisionOptions] = None,
        observers: Optional[List] = None,
        run_id: Optional[str] = None,
    ):
        self.system = system
        self.options = options or ProvisionOptions()
        self.bus = EventBus(observers or [])
        self.run_ctx = new_ctx(run_id)

        self.gate = IdempotencyGate(system, self.options.marker_dir)
        self.hostnames = HostnameSetter(system, self.options.hostname_file)
        self.users = UserProvisioner(system)
        self.files = FileWriter(system)

    def _ctx(self) -> dict:
        # fresh timestamp, same run id
        return new_ctx(self.run_ctx["run_id"])

    def apply(self, cfg: ProvisionConfig) -> ApplyResult:
        result = ApplyResult(status="DONE")
        step, target = "gate", cfg.instance_id

        try:
            if not self.gate.acquire(cfg.instance_id):
                log.info("already ran before for instance %s, no reason to run now", cfg.instance_id)
                self.bus.emit(AlreadyProvisioned(instance_id=cfg.instance_id, **self._ctx()))
                result.status = "SKIPPED"
                self._summary(cfg, result)
                return result

            self.bus.emit(ProvisionStarted(instance_id=cfg.instance_id, hostname=cfg.hostname, **self._ctx()))

            step, target = "hostname", cfg.hostname
            self.hostnames.set_hostname(cfg.hostname)
            self.bus.emit(HostnameApplied(hostname=cfg.hostname, **self._ctx()))

            for user in cfg.users:
                step, target = "mkuser", user.name
                strategy = self.users.apply(user)
                result.users += 1
                self.bus.emit(UserCreated(name=user.name, strategy=strategy, **self._ctx()))

            for f in cfg.files:
                step, target = "mkfile", f.path
                self.files.apply(f)
                result.files += 1
                self.bus.emit(FileWritten(path=f.path, **self._ctx()))

            for cmd in cfg.runcmd:
                step, target = "runcmd", cmd
                log.info("[runcmd] running %s", cmd)
                self.system.run("sh", "-c", cmd)
                result.commands += 1
                self.bus.emit(CommandCompleted(command=cmd, **self._ctx()))

        except ProvisionError as e:
            self.bus.emit(StepFailed(step=step, target=target, error=str(e), **self._ctx()))
            self.bus.emit(ProvisionSummary(
                instance_id=cfg.instance_id, status="FAILED",
                users=result.users, files=result.files, commands=result.commands,
                error=str(e), **self._ctx(),
            ))
            raise

        log.info("provisioning complete: %s", result.summary())
        self._summary(cfg, result)
        return result

    def _summary(self, cfg: ProvisionConfig, result: ApplyResult) -> None:
        self.bus.emit(ProvisionSummary(
            instance_id=cfg.instance_id, status=result.status,
            users=result.users, files=result.files, commands=result.commands,
            **self._ctx(),
        ))


def apply_config(
    cfg: ProvisionConfig,
    system: Optional[System] = None,
    options: Optional[ProvisionOptions] = None,
    observers: Optional[List] = None,
    run_id: Optional[str] = None,
) -> ApplyResult:
    """Apply *cfg* to this machine (or to *system*, if given)."""
    options = options or ProvisionOptions()
    if system is None:
        system = LocalSystem(CommandRunner(timeout=options.command_timeout))
    return Provisioner(system, options, observers, run_id).apply(cfg)
