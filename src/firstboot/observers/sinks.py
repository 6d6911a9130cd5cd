# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/observers/sinks.py

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from .events import BaseEvent, StepFailed


class Observer(Protocol):
    def notify(self, event: BaseEvent) -> None: ...


class LoggerObserver:
    """Mirrors events into the run log. Failures go out at WARNING, the rest at DEBUG."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def notify(self, event: BaseEvent) -> None:
        fields = {k: v for k, v in event.dict().items() if k not in ("ts", "run_id")}
        level = logging.WARNING if isinstance(event, StepFailed) else logging.DEBUG
        self.logger.log(
            level,
            "[event] %s %s",
            type(event).__name__,
            " ".join(f"{k}={v}" for k, v in fields.items()),
        )


class JsonFileObserver:
    """Appends one JSON object per event to *path* (JSON lines)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def notify(self, event: BaseEvent) -> None:
        record = {"type": type(event).__name__, **event.dict()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, sort_keys=True) + "\n")
