# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/provision/hostname.py

from __future__ import annotations

import logging

from ..errors import HostnameError
from ..system.interface import System

log = logging.getLogger("firstboot")

DEFAULT_HOSTNAME_FILE = "/etc/hostname"


class HostnameSetter:
    def __init__(self, system: System, hostname_file: str = DEFAULT_HOSTNAME_FILE):
        self.system = system
        self.hostname_file = hostname_file

    def set_hostname(self, hostname: str) -> None:
        """
        Rewrite the hostname record, then the live kernel hostname.

        The record is rewritten even when it already matches. If setting the
        live hostname fails, the record has already changed.
        """
        try:
            current = self.system.get_hostname()
        except OSError as e:
            raise HostnameError(f"can't get current hostname: {e}") from e

        if hostname == current:
            log.info("[hostname] hostname already matches target, rewriting record anyway")

        log.info("[hostname] from=%s to=%s", current, hostname)

        try:
            mode = self.system.file_mode(self.hostname_file)
        except OSError as e:
            raise HostnameError(f"can't query old hostname setting: {e}") from e

        try:
            self.system.remove(self.hostname_file)
        except OSError as e:
            raise HostnameError(f"can't remove old hostname setting: {e}") from e

        try:
            with self.system.open_for_write(self.hostname_file, mode) as f:
                f.write(hostname.encode("utf-8"))
        except OSError as e:
            raise HostnameError(f"can't write new hostname: {e}") from e

        try:
            self.system.set_hostname(hostname)
        except (OSError, ValueError) as e:
            raise HostnameError(f"can't set hostname: {e}") from e
