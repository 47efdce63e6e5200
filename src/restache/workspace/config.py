# Copyright 2026 Restache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the restache project configuration file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = "restache.yaml"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class Config(BaseModel):
    """Project configuration.

    Attributes:
        extension: File extension of templates matched by directory builds.
        parallelism: Maximum number of files parsed at once; the host CPU
            count (capped) when unset.
        output_directory: Directory receiving generated ``.jsx`` files,
            relative to the configuration file. Output is written next to
            the templates when unset.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    extension: str = ".stache"
    parallelism: int | None = Field(default=None, ge=1)
    output_directory: str | None = Field(alias="output-directory", default=None)

    @field_validator("extension")
    @classmethod
    def _leading_dot(cls, value: str) -> str:
        if not value.startswith("."):
            return "." + value
        return value


def load_config(path: Path) -> Config:
    """Load and validate a configuration file.

    An empty file yields the default configuration.

    Args:
        path: Path to the ``restache.yaml`` file.

    Returns:
        A validated Config instance.

    Raises:
        ConfigError: If the file cannot be read, contains invalid YAML, or
            does not conform to the expected schema.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise ConfigError(f"Cannot read config file '{path}': {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file '{path}': {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: config must be a YAML mapping")

    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file '{path}': {exc}") from exc


def find_config(directory: Path) -> Path | None:
    """Return the configuration file in *directory*, or None if there is none."""
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None
