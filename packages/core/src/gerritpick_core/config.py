from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from gerritpick_core.errors import ConfigError
from gerritpick_core.models import Action
from gerritpick_core.query import INTERACTIVE_LIMIT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: dict = {
    "url": None,  # None = GERRIT_URL, then the remote guessed from the workspace
    "project": None,  # None = project name discovered from the workspace
    "include_closed": False,
    "select_all": False,
    "debug": False,
    "limit": INTERACTIVE_LIMIT,  # result cap for interactive queries; 0 disables it
    "file": None,  # read change JSON from this path instead of querying Gerrit
}

_VERBS = {
    "checkout": Action.CHECKOUT,
    "co": Action.CHECKOUT,
    "cherry-pick": Action.CHERRY_PICK,
    "cp": Action.CHERRY_PICK,
}


@dataclass(frozen=True)
class Settings:
    """Immutable run configuration, built once by load_config()."""

    url: str | None = None
    project: str | None = None
    include_closed: bool = False
    select_all: bool = False
    debug: bool = False
    limit: int = INTERACTIVE_LIMIT
    file: str | None = None


def verbs() -> list[str]:
    return list(_VERBS)


def parse_action(verb: str) -> Action:
    try:
        return _VERBS[verb.lower()]
    except KeyError:
        raise ConfigError(f"Unsupported operation '{verb}'. Use one of: {', '.join(_VERBS)}.")


def load_config(config_path: str = ".gerritpick.yml", cli_overrides: Optional[dict] = None) -> Settings:
    """
    Build Settings by merging (in order of precedence):
      1. Built-in defaults
      2. .gerritpick.yml in the current directory
      3. GERRIT_URL from the environment
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ConfigError(f"{config_path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    env_url = os.environ.get("GERRIT_URL")
    if env_url:
        config["url"] = env_url

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    known = {f.name for f in fields(Settings)}
    for key in sorted(set(config) - known):
        logger.debug("Ignoring unknown configuration key %r", key)

    return Settings(**{k: v for k, v in config.items() if k in known})
