# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/firstboot/__init__.py

from .config.loader import load_config, parse_config
from .config.models import FileSpec, ProvisionConfig, UserSpec
from .provision.engine import ApplyResult, ProvisionOptions, Provisioner, apply_config

__version__ = "0.1.0"

__all__ = [
    "ApplyResult",
    "FileSpec",
    "ProvisionConfig",
    "ProvisionOptions",
    "Provisioner",
    "UserSpec",
    "apply_config",
    "load_config",
    "parse_config",
]
