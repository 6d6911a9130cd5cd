# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/config/models.py

from __future__ import annotations

import posixpath
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_SHELL = "/bin/sh"


def parse_mode(permissions: str) -> int:
    """Parse an octal permission string like "0644". Raises ValueError if malformed."""
    # int(..., 8) alone would also accept "0o644", "+644" and "6_44"
    if not permissions or permissions.strip("01234567"):
        raise ValueError(f"invalid octal permissions {permissions!r}")
    mode = int(permissions, 8)
    if mode > 0o7777:
        raise ValueError(f"permissions {permissions!r} out of range")
    return mode


class _Directive(BaseModel):
    # Hyphenated YAML keys map onto snake_case fields; unknown keys are dropped.
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        # "users:" with nothing after it loads as None; treat as absent
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class UserSpec(_Directive):
    """
    An OS account to create.

    ``sudo``, ``ssh_authorized_keys`` and ``github`` are carried as data only;
    nothing applies them yet.
    """

    name: str
    home: str = ""
    groups: List[str] = Field(default_factory=list)
    sudo: List[str] = Field(default_factory=list)
    shell: str = ""
    ssh_authorized_keys: List[str] = Field(default_factory=list, alias="ssh-authorized-keys")
    github: str = ""

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("user name must not be empty")
        return v

    def resolved_home(self) -> str:
        return self.home or posixpath.join("/", "home", self.name)

    def resolved_shell(self) -> str:
        return self.shell or DEFAULT_SHELL


class FileSpec(_Directive):
    """
    A file to write verbatim, then chown.

    ``permissions`` stays a string here; it is parsed when the file is applied
    so that a bad value fails that step rather than the whole config load.
    """

    path: str = ""
    permissions: str = ""
    contents: str = ""
    owner: str = ""
    group: str = ""


class ProvisionConfig(_Directive):
    instance_id: str = Field(default="", alias="instance-id")
    hostname: str = ""
    users: List[UserSpec] = Field(default_factory=list)
    files: List[FileSpec] = Field(default_factory=list)
    runcmd: List[str] = Field(default_factory=list)

    def summary(self) -> str:
        return (
            f"instance-id={self.instance_id} hostname={self.hostname} "
            f"users={len(self.users)} files={len(self.files)} runcmd={len(self.runcmd)}"
        )
