# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime, timezone
import uuid


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    run_id: str       # correlates all events in a single apply invocation

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(run_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "run_id": run_id or str(uuid.uuid4()),
    }


# ---------------------------------------------------------------------
# Run lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ProvisionStarted(BaseEvent):
    instance_id: str
    hostname: str

@dataclass(frozen=True)
class AlreadyProvisioned(BaseEvent):
    instance_id: str

@dataclass(frozen=True)
class ProvisionSummary(BaseEvent):
    instance_id: str
    status: str       # "DONE" | "SKIPPED" | "FAILED"
    users: int = 0
    files: int = 0
    commands: int = 0
    error: Optional[str] = None


# ---------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class HostnameApplied(BaseEvent):
    hostname: str

@dataclass(frozen=True)
class UserCreated(BaseEvent):
    name: str
    strategy: str     # "useradd" | "adduser"

@dataclass(frozen=True)
class FileWritten(BaseEvent):
    path: str

@dataclass(frozen=True)
class CommandCompleted(BaseEvent):
    command: str

@dataclass(frozen=True)
class StepFailed(BaseEvent):
    step: str         # "gate" | "hostname" | "mkuser" | "mkfile" | "runcmd"
    target: str
    error: str
