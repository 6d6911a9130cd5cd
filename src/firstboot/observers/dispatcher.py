# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/observers/dispatcher.py

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .events import BaseEvent
from .sinks import Observer

log = logging.getLogger("firstboot")


class EventBus:
    """Fans each event out to every observer, in registration order."""

    def __init__(self, observers: Optional[Iterable[Observer]] = None):
        self.observers = list(observers or [])

    def emit(self, event: BaseEvent) -> None:
        for observer in self.observers:
            try:
                observer.notify(event)
            except Exception as e:
                # a broken event sink must not abort provisioning
                log.debug(
                    "observer %s failed on %s: %s",
                    type(observer).__name__, type(event).__name__, e,
                )
