# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/system/local.py

from __future__ import annotations

import grp
import os
import pwd
import socket
import stat
from typing import BinaryIO, Optional

from ..execution.runner import CommandRunner


class LocalSystem:
    """The machine we are running on."""

    def __init__(self, runner: Optional[CommandRunner] = None):
        self.runner = runner or CommandRunner()

    # ------------------ hostname ------------------

    def get_hostname(self) -> str:
        return socket.gethostname()

    def set_hostname(self, name: str) -> None:
        socket.sethostname(name)

    # ------------------ filesystem ------------------

    def file_mode(self, path: str) -> int:
        return stat.S_IMODE(os.stat(path).st_mode)

    def remove(self, path: str) -> None:
        os.remove(path)

    def exists(self, path: str) -> bool:
        return os.path.lexists(path)

    def ensure_dir(self, path: str, mode: int) -> None:
        os.makedirs(path, mode=mode, exist_ok=True)

    def create_exclusive(self, path: str, data: bytes, mode: int) -> bool:
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        except FileExistsError:
            return False
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except BaseException:
            # an empty marker would make every later boot skip provisioning
            os.unlink(path)
            raise
        return True

    def open_for_write(self, path: str, mode: int) -> BinaryIO:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
        try:
            # creation mode is filtered by the umask and ignored for existing files
            os.fchmod(fd, mode)
        except OSError:
            os.close(fd)
            raise
        return os.fdopen(fd, "wb")

    def chown(self, path: str, uid: int, gid: int) -> None:
        os.chown(path, uid, gid)

    # ------------------ accounts ------------------

    def lookup_uid(self, name: str) -> int:
        return pwd.getpwnam(name).pw_uid

    def lookup_gid(self, name: str) -> int:
        return grp.getgrnam(name).gr_gid

    # ------------------ processes ------------------

    def run(self, name: str, *args: str) -> None:
        self.runner.run(name, *args)
