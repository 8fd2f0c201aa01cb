# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/termination_handler/config/loader.py

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import ValidationError

from ..errors import ConfigurationError
from .models import HandlerConfig

log = logging.getLogger("termination_handler")


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    data = yaml.safe_load(expanded) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path}: expected a mapping at the top level")
    return data


def build_config(
    path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> HandlerConfig:
    """
    Build a HandlerConfig from an optional YAML file plus overrides.

    Overrides (normally CLI flags) win over file values; ``None`` overrides are
    ignored so an unset flag never clears a value from the file.
    """
    data: dict = {}
    if path is not None:
        path = Path(path)
        log.debug("Loading handler config from %s", path)
        data = _load_yaml(path)

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return HandlerConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid handler configuration: {exc}") from exc


def load_config(path: str | Path) -> HandlerConfig:
    """Load and validate a handler config YAML file."""
    return build_config(path)
