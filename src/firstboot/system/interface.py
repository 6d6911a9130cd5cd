# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/system/interface.py

from __future__ import annotations

from typing import BinaryIO, ContextManager, Protocol


class System(Protocol):
    """
    Every side effect on the machine goes through this contract, so the
    provisioning steps can run against a fake in tests.

    Methods raise OSError (or KeyError for unknown accounts) and leave
    wrapping to the caller.
    """

    # hostname
    def get_hostname(self) -> str: ...
    def set_hostname(self, name: str) -> None: ...

    # filesystem
    def file_mode(self, path: str) -> int: ...
    def remove(self, path: str) -> None: ...
    def exists(self, path: str) -> bool: ...
    def ensure_dir(self, path: str, mode: int) -> None: ...
    def create_exclusive(self, path: str, data: bytes, mode: int) -> bool:
        """Create *path* only if absent. Returns False when it already existed."""
        ...
    def open_for_write(self, path: str, mode: int) -> ContextManager[BinaryIO]:
        """Open *path* write-only, creating and truncating it, with exactly *mode*."""
        ...
    def chown(self, path: str, uid: int, gid: int) -> None: ...

    # accounts
    def lookup_uid(self, name: str) -> int: ...
    def lookup_gid(self, name: str) -> int: ...

    # processes
    def run(self, name: str, *args: str) -> None: ...
