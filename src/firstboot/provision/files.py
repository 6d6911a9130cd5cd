# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/provision/files.py

from __future__ import annotations

import logging

from ..config.models import FileSpec, parse_mode
from ..errors import FileApplyError, PermissionsError
from ..system.interface import System

log = logging.getLogger("firstboot")


class FileWriter:
    def __init__(self, system: System):
        self.system = system

    def apply(self, file: FileSpec) -> None:
        log.info(
            "[mkfile] making file path=%s perms=%s owner=%s group=%s",
            file.path, file.permissions, file.owner, file.group,
        )
        self.write_file(file.path, file.permissions, file.contents, file.owner, file.group)

    def write_file(self, path: str, permissions: str, contents: str, owner: str, group: str) -> None:
        """
        Write *contents* verbatim to *path* with mode *permissions*, then
        chown it to *owner*:*group*.

        Existing content is truncated. The handle stays open until the chown
        has been attempted and is closed on every path out.
        """
        try:
            mode = parse_mode(permissions)
        except ValueError as e:
            raise PermissionsError(f"can't read permissions {permissions} for {path}: {e}") from e

        try:
            handle = self.system.open_for_write(path, mode)
        except (OSError, ValueError) as e:
            raise FileApplyError(f"can't open {path!r}: {e}") from e

        with handle as f:
            try:
                f.write(contents.encode("utf-8"))
                f.flush()
            except OSError as e:
                raise FileApplyError(f"can't write {path}: {e}") from e

            # pwd/grp raise ValueError rather than KeyError for names with a NUL
            try:
                uid = self.system.lookup_uid(owner)
            except (KeyError, ValueError) as e:
                raise FileApplyError(f"can't find user {owner!r} for {path}") from e

            try:
                gid = self.system.lookup_gid(group)
            except (KeyError, ValueError) as e:
                raise FileApplyError(f"can't find group {group!r} for {path}") from e

            try:
                self.system.chown(path, uid, gid)
            except (OSError, ValueError) as e:
                raise FileApplyError(
                    f"can't chown {path} to {uid}:{gid} ({owner}:{group}): {e}"
                ) from e
