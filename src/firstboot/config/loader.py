# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/config/loader.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .models import ProvisionConfig

log = logging.getLogger("firstboot")

_KEEP_TAGS = {"tag:yaml.org,2002:null", "tag:yaml.org,2002:merge"}


class _StringScalarLoader(yaml.SafeLoader):
    """
    SafeLoader that leaves plain scalars as strings.

    Every leaf in the config is a string, and YAML 1.1 would otherwise turn
    ``permissions: 0644`` into the int 420 and ``hostname: 1234`` into an int.
    """


_StringScalarLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag in _KEEP_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_config(stream: Union[str, bytes, IO]) -> ProvisionConfig:
    """
    Parse and validate a provisioning document.

    An empty document yields an all-default config. Unknown keys are ignored.
    """
    try:
        data = yaml.load(stream, Loader=_StringScalarLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"can't parse config: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"config must be a mapping at the top level, got {type(data).__name__}"
        )

    try:
        return ProvisionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config: {e}") from e


def load_config(path: str | Path) -> ProvisionConfig:
    """Load and validate the YAML config at *path*."""
    path = Path(path)
    log.debug("Loading config from %s", path)
    try:
        with path.open("r", encoding="utf-8") as f:
            return parse_config(f)
    except OSError as e:
        raise ConfigError(f"can't open config {path}: {e}") from e


def dump_yaml(model) -> str:
    """Serialize a config model using its YAML key names."""
    return yaml.safe_dump(
        model.model_dump(by_alias=True),
        sort_keys=False,
        allow_unicode=True,
    )
