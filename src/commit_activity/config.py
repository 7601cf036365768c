"""Configuration loading and management for Commit Activity.

Collector settings are merged in priority order (lowest to highest):
    1. Defaults (defined in CollectorConfig)
    2. Global config (~/.commit-activity.toml)
    3. Project config (./commit-activity.toml)
    4. Explicit config file
    5. Environment (``.env`` file first, then the real process environment)
    6. CLI overrides (passed as kwargs)

Both TOML files share one layout::

    [collector]
    gitlab_url = "https://gitlab.example.com"
    page_size = 100
    output_dir = "data"

    [authors]
    groups = [["Alice", "alice.smith"]]
    excludes = ["ci-bot"]

Example:
    >>> config = load_config(output_dir="/tmp/stats")
    >>> config.page_size
    100
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, get_type_hints

from dotenv import dotenv_values

from .exceptions import ConfigurationError, InvalidConfigError

ENV_PREFIX = "COMMIT_ACTIVITY_"
CONFIG_FILENAME = "commit-activity.toml"

# Variable names understood before the prefixed ones existed.
LEGACY_ENV_VARS = {
    "GITLAB_TOKEN": "token",
    "OUTPUT_DIR": "output_dir",
}


@dataclass(frozen=True)
class CollectorConfig:
    """Settings for one collection run.

    Attributes:
        gitlab_url: Base URL of the GitLab instance (scheme and host)
        token: Personal access token sent as ``PRIVATE-TOKEN``
        page_size: Commits requested per page (GitLab caps this at 100)
        page_delay_seconds: Pause between page requests
        timeout_seconds: Per-request HTTP timeout
        output_dir: Directory artifacts are written to and served from
    """

    gitlab_url: str = "https://gitlab.com"
    token: Optional[str] = field(default=None, repr=False)
    page_size: int = 100
    page_delay_seconds: float = 0.5
    timeout_seconds: float = 30.0
    output_dir: str = "data"

    def __post_init__(self) -> None:
        if not self.gitlab_url.startswith(("http://", "https://")):
            raise InvalidConfigError("gitlab_url", self.gitlab_url, "must be an http(s) URL")
        if not 1 <= self.page_size <= 100:
            raise InvalidConfigError("page_size", self.page_size, "must be between 1 and 100")
        if self.page_delay_seconds < 0:
            raise InvalidConfigError(
                "page_delay_seconds", self.page_delay_seconds, "must be non-negative"
            )
        if self.timeout_seconds <= 0:
            raise InvalidConfigError("timeout_seconds", self.timeout_seconds, "must be positive")
        if not self.output_dir:
            raise InvalidConfigError("output_dir", self.output_dir, "must not be empty")

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)


@dataclass(frozen=True)
class AuthorSettings:
    """Saved identity-merge configuration.

    The first name of each group is the canonical identity.
    """

    groups: tuple[tuple[str, ...], ...] = ()
    excludes: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuthorSettings:
        groups = data.get("groups", [])
        excludes = data.get("excludes", [])
        if not isinstance(groups, list) or not all(
            isinstance(g, list) and all(isinstance(n, str) for n in g) for g in groups
        ):
            raise InvalidConfigError("authors.groups", groups, "must be a list of name lists")
        if not isinstance(excludes, list) or not all(isinstance(n, str) for n in excludes):
            raise InvalidConfigError("authors.excludes", excludes, "must be a list of names")
        return cls(groups=tuple(tuple(g) for g in groups), excludes=frozenset(excludes))


def load_config(
    config_file: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[Path] = None,
    **overrides: Any,
) -> CollectorConfig:
    """Load collector configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        env: Environment mapping (defaults to ``os.environ``)
        dotenv_path: ``.env`` file to read (defaults to ``./.env``); values
            in it never override variables already present in *env*
        **overrides: Direct overrides, typically from CLI flags. ``None``
            values are ignored.

    Returns:
        Validated CollectorConfig instance

    Raises:
        ConfigurationError: If a config file or environment value is invalid
    """
    merged: dict[str, Any] = {}

    for path in _discover_config_files(config_file):
        merged.update(_collector_section(_load_toml_file(path), path))

    environ = _merged_environment(env, dotenv_path)
    merged.update(_load_env_vars(environ))

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return CollectorConfig(**merged)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_author_settings(path: Path) -> AuthorSettings:
    """Read the ``[authors]`` table of a TOML file."""
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    data = _load_toml_file(path)
    section = data.get("authors", {})
    if not isinstance(section, dict):
        raise InvalidConfigError("authors", section, "must be a table")
    return AuthorSettings.from_dict(section)


def _discover_config_files(config_file: Optional[Path]) -> list[Path]:
    paths = []
    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        paths.append(global_config)

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        paths.append(project_config)

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        paths.append(config_file)
    return paths


def _collector_section(data: dict, path: Path) -> dict[str, Any]:
    section = data.get("collector", {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid config file '{path}': [collector] must be a table")
    return section


def _merged_environment(
    env: Optional[Mapping[str, str]], dotenv_path: Optional[Path]
) -> dict[str, str]:
    if env is None:
        env = os.environ
    if dotenv_path is None:
        dotenv_path = Path.cwd() / ".env"

    merged: dict[str, str] = {}
    if dotenv_path.exists():
        merged.update({k: v for k, v in dotenv_values(dotenv_path).items() if v is not None})
    merged.update(env)
    return merged


def _load_env_vars(environ: Mapping[str, str]) -> dict[str, Any]:
    """Load configuration from environment variables.

    Supported variables:
        COMMIT_ACTIVITY_GITLAB_URL: str
        COMMIT_ACTIVITY_TOKEN: str (legacy: GITLAB_TOKEN)
        COMMIT_ACTIVITY_PAGE_SIZE: int
        COMMIT_ACTIVITY_PAGE_DELAY_SECONDS: float
        COMMIT_ACTIVITY_TIMEOUT_SECONDS: float
        COMMIT_ACTIVITY_OUTPUT_DIR: str (legacy: OUTPUT_DIR)

    Prefixed variables win over the legacy names.
    """
    type_hints = get_type_hints(CollectorConfig)
    result: dict[str, Any] = {}

    for env_key, field_name in LEGACY_ENV_VARS.items():
        value = environ.get(env_key)
        if value:
            result[field_name] = value

    for field_name in CollectorConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        value = environ.get(env_key)
        if value is None:
            continue
        try:
            result[field_name] = _parse_env_value(value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(env_key, value, str(e))

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment string to the field's type."""
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]

    if type_hint is int:
        return int(value)
    if type_hint is float:
        return float(value)
    return value


def _load_toml_file(path: Path) -> dict:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")
