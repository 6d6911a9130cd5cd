# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/provision/gate.py

from __future__ import annotations

import logging
import posixpath

from ..errors import MarkerError
from ..system.interface import System

log = logging.getLogger("firstboot")

DEFAULT_MARKER_DIR = "/var/cloud"


class IdempotencyGate:
    """
    One marker file per instance id under ``marker_dir``. The marker is
    created with O_EXCL, so two concurrent runs can't both acquire it.
    """

    def __init__(self, system: System, marker_dir: str = DEFAULT_MARKER_DIR):
        self.system = system
        self.marker_dir = marker_dir

    def marker_path(self, instance_id: str) -> str:
        if not instance_id or "/" in instance_id or "\0" in instance_id or instance_id in (".", ".."):
            raise MarkerError(f"invalid instance id {instance_id!r}")
        return posixpath.join(self.marker_dir, instance_id)

    def exists(self, instance_id: str) -> bool:
        return self.system.exists(self.marker_path(instance_id))

    def acquire(self, instance_id: str) -> bool:
        """
        Returns True if this call created the marker, False if the instance
        was already provisioned.
        """
        sem = self.marker_path(instance_id)

        try:
            self.system.ensure_dir(self.marker_dir, 0o700)
        except OSError as e:
            raise MarkerError(f"can't make marker dir {self.marker_dir}: {e}") from e

        try:
            created = self.system.create_exclusive(sem, instance_id.encode("utf-8"), 0o644)
        except OSError as e:
            raise MarkerError(f"can't make {sem}: {e}") from e

        if created:
            log.debug("created instance marker %s", sem)
        return created
