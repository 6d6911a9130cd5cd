# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/provision/users.py

from __future__ import annotations

import logging
from typing import List, Sequence

from ..config.models import UserSpec
from ..errors import CommandError, CommandFailed, CommandNotFound, UserCreateError
from ..system.interface import System

log = logging.getLogger("firstboot")

PRIMARY = "useradd"
FALLBACK = "adduser"

# Failures that mean "this distro has no usable useradd" rather than a real error.
_FALLBACK_ON = (CommandNotFound, CommandFailed)


class UserProvisioner:
    """
    Creates accounts with shadow-utils ``useradd``. Minimal images (alpine,
    busybox) only ship ``adduser``, which is used when useradd is missing or
    fails.
    """

    def __init__(self, system: System):
        self.system = system

    def apply(self, user: UserSpec) -> str:
        home = user.resolved_home()
        shell = user.resolved_shell()
        log.info(
            "[mkuser] making user name=%s home=%s groups=%s shell=%s github=%s",
            user.name, home, ",".join(user.groups), shell, user.github,
        )
        return self.create_user(user.name, home, shell, user.groups)

    def create_user(self, name: str, home: str, shell: str, groups: Sequence[str]) -> str:
        """Returns the name of the tool that created the account."""
        try:
            self.system.run(PRIMARY, *self._useradd_args(name, home, shell, groups))
            return PRIMARY
        except _FALLBACK_ON as e:
            log.warning("[mkuser] error making user with %s, are you on alpine? %s", PRIMARY, e)
        except CommandError as e:
            raise UserCreateError(f"can't create user {name}: {e}") from e

        try:
            self.system.run(FALLBACK, "-h", home, "-s", shell, "-D", name)
            for g in groups:
                self.system.run(FALLBACK, name, g)
        except CommandError as e:
            raise UserCreateError(f"can't create user {name} with {FALLBACK}: {e}") from e

        return FALLBACK

    @staticmethod
    def _useradd_args(name: str, home: str, shell: str, groups: Sequence[str]) -> List[str]:
        args = ["-d", home, "-s", shell, "-m", "-U"]
        if groups:
            args += ["-G", ",".join(groups)]
        args.append(name)
        return args
