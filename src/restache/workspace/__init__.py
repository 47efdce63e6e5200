# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration for restache."""

from restache.workspace.config import CONFIG_FILE_NAME, Config, ConfigError, find_config, load_config

__all__ = [
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigError",
    "find_config",
    "load_config",
]
