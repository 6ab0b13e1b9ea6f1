#!/usr/bin/env python3
"""
ZONEGUARD SETTINGS
------------------
Layered configuration for a check run. Later sources override earlier ones:

  1. built-in defaults
  2. YAML config file (.zoneguard.yaml in the repository, or --config)
  3. CI environment (GitLab merge request / commit variables)
  4. command-line flags

Author: ZoneGuard Team
Date: 2026-10-19
"""

import os
import re
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ruamel.yaml import YAML, YAMLError

from zoneguard.core.errors import ConfigError

logger = logging.getLogger("zoneguard.settings")

DEFAULT_CONFIG_NAME = ".zoneguard.yaml"
DEFAULT_MAX_ROUNDS = 10
KNOWN_KEYS = {"filters", "max_rounds", "verbose", "base", "target"}


@dataclass
class Settings:
    filters: List[str] = field(default_factory=list)
    max_rounds: int = DEFAULT_MAX_ROUNDS
    verbose: bool = False
    base: Optional[str] = None      # baseline revision, defaults to <target>~
    target: str = "HEAD"

    @property
    def baseline(self) -> str:
        return self.base or f"{self.target}~"

    def update(self, values: Mapping[str, Any], source: str):
        """Applies known keys from `values`, validating their types."""
        unknown = set(values) - KNOWN_KEYS
        if unknown:
            raise ConfigError(f"{source}: unknown setting(s): {', '.join(sorted(unknown))}")

        if values.get("filters") is not None:
            filters = values["filters"]
            if isinstance(filters, str):
                filters = [filters]
            if not isinstance(filters, list) or not all(isinstance(f, str) for f in filters):
                raise ConfigError(f"{source}: 'filters' must be a list of regular expressions")
            self.filters = list(filters)

        if values.get("max_rounds") is not None:
            try:
                rounds = int(values["max_rounds"])
            except (TypeError, ValueError):
                raise ConfigError(f"{source}: 'max_rounds' must be an integer")
            if rounds < 1:
                raise ConfigError(f"{source}: 'max_rounds' must be at least 1")
            self.max_rounds = rounds

        if values.get("verbose") is not None:
            if not isinstance(values["verbose"], bool):
                raise ConfigError(f"{source}: 'verbose' must be true or false")
            self.verbose = values["verbose"]

        for key in ("base", "target"):
            if values.get(key) is not None:
                setattr(self, key, str(values[key]))


def load_config_file(path: Path) -> Dict[str, Any]:
    """Reads a YAML mapping from `path`; an empty file yields {}."""
    yaml = YAML(typ='safe')
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.load(f)
    except (OSError, YAMLError) as e:
        raise ConfigError(f"Failed to load config {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return data


def valid_hash(value: Optional[str]) -> bool:
    """
    GitLab sometimes sets commit variables to all zeroes instead of leaving
    them empty; those are not usable revisions.
    """
    if not value or not re.fullmatch(r"[0-9a-fA-F]+", value):
        return False
    return int(value, 16) != 0


def ci_overrides(environ: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    branch = environ.get("CI_MERGE_REQUEST_TARGET_BRANCH_NAME")
    if branch:
        values["base"] = f"origin/{branch}"
    if valid_hash(environ.get("CI_COMMIT_SHA")):
        values["target"] = environ["CI_COMMIT_SHA"]
    if environ.get("VERBOSE"):
        values["verbose"] = True
    return values


def load_settings(repo_path: str = ".", config_path: Optional[str] = None,
                  environ: Optional[Mapping[str, str]] = None,
                  overrides: Optional[Mapping[str, Any]] = None) -> Settings:
    settings = Settings()

    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = Path(repo_path) / DEFAULT_CONFIG_NAME

    if path.exists():
        logger.debug("loading config from %s", path)
        settings.update(load_config_file(path), str(path))

    env = os.environ if environ is None else environ
    settings.update(ci_overrides(env), "environment")

    if overrides:
        settings.update({k: v for k, v in overrides.items() if v is not None}, "command line")

    return settings
