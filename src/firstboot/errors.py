# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/errors.py

from __future__ import annotations

from typing import Optional, Sequence


class ProvisionError(RuntimeError):
    """Base class for every failure that aborts a provisioning run."""


class ConfigError(ProvisionError):
    """Raised when the config file can't be read, parsed or validated."""


class MarkerError(ProvisionError):
    """Raised when the instance marker can't be checked or created."""


class HostnameError(ProvisionError):
    """Raised when the hostname record or live hostname can't be updated."""


class UserCreateError(ProvisionError):
    """Raised when neither account-creation strategy managed to create a user."""


class FileApplyError(ProvisionError):
    """Raised when a file directive can't be written or chowned."""


class PermissionsError(FileApplyError):
    """Raised when a file's permission string isn't valid octal."""


# ---------------------------------------------------------------------
# Command execution
# ---------------------------------------------------------------------

class CommandError(ProvisionError):
    """A command could not be spawned or did not complete cleanly."""

    def __init__(self, message: str, argv: Sequence[str] = ()):
        super().__init__(message)
        self.argv = list(argv)


class CommandNotFound(CommandError):
    """The executable does not exist on this machine."""


class CommandFailed(CommandError):
    """The command ran and exited non-zero."""

    def __init__(self, message: str, argv: Sequence[str] = (), returncode: Optional[int] = None):
        super().__init__(message, argv)
        self.returncode = returncode


class CommandTimeout(CommandError):
    """The command was killed after running past its timeout."""
