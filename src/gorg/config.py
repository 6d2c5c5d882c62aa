"""Configuration loading and deterministic merge order."""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "GORG_CONFIG"
CONFIG_DIR_NAME = "gorg"
CONFIG_FILE_NAME = "config.toml"
DEFAULT_PROJECTS_DIR_NAME = "Projects"
DEFAULT_INDEX_FILE_NAME = ".gorg-db"

DEFAULT_MAX_FIND_ITEMS = 50
MAX_FIND_ITEMS_CAP = 1000
DEFAULT_GIT_COMMAND = "git"
DEFAULT_GIT_REMOTE_NAME = "origin"


@dataclass(slots=True, frozen=True)
class GitConfig:
    """Git executable and remote naming."""

    command: str
    remote_name: str


@dataclass(slots=True, frozen=True)
class Config:
    """Fully merged configuration."""

    projects_path: Path
    index_file_path: Path
    max_find_items: int
    git: GitConfig
    audit_log_path: Path | None = None

    def to_public_dict(self) -> dict[str, object]:
        """Return a serializable snapshot for diagnostics."""
        return {
            "projects_path": str(self.projects_path),
            "index_file_path": str(self.index_file_path),
            "max_find_items": self.max_find_items,
            "git": {
                "command": self.git.command,
                "remote_name": self.git.remote_name,
            },
            "audit_log_path": str(self.audit_log_path) if self.audit_log_path else None,
        }


@dataclass(slots=True, frozen=True)
class CliOverrides:
    """Optional command-line overrides applied at highest precedence."""

    projects_path: Path | None = None
    index_file_path: Path | None = None
    max_find_items: int | None = None


def default_config(home: Path) -> Config:
    """Build default config rooted at the user's home directory."""
    projects_path = home / DEFAULT_PROJECTS_DIR_NAME
    return Config(
        projects_path=projects_path,
        index_file_path=projects_path / DEFAULT_INDEX_FILE_NAME,
        max_find_items=DEFAULT_MAX_FIND_ITEMS,
        git=GitConfig(command=DEFAULT_GIT_COMMAND, remote_name=DEFAULT_GIT_REMOTE_NAME),
    )


def config_file_path(environ: Mapping[str, str], home: Path) -> Path:
    """Return the implicit config file location."""
    explicit = environ.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()
    xdg_config_home = environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else home / ".config"
    return base / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config_file(path: Path, required: bool) -> dict[str, object]:
    """Load a TOML config file; a missing optional file yields an empty payload."""
    if not path.exists():
        if required:
            raise ValueError(f"Config file not found: {path}")
        LOGGER.debug("Config not found at %s, using defaults", path)
        return {}
    LOGGER.debug("Reading config from %s", path)
    with path.open("rb") as handle:
        payload = tomllib.load(handle)
    if not isinstance(payload, dict):
        raise ValueError(f"{path.name} must contain a top-level table.")
    return payload


def _get_table(payload: Mapping[str, object], key: str) -> dict[str, object]:
    value = payload.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{key}' must be a table.")
    return value


def _optional_path(value: object, name: str, default: Path | None) -> Path | None:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string path.")
    return Path(value).expanduser()


def _optional_str(value: object, name: str, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Config field '{name}' must be a non-empty string.")
    return value


def _optional_positive_int_with_cap(value: object, name: str, default: int, cap: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"Config field '{name}' must be a positive integer.")
    if value > cap:
        raise ValueError(f"Config field '{name}' must be <= {cap}.")
    return value


def merge_config(base: Config, payload: Mapping[str, object], overrides: CliOverrides) -> Config:
    """Merge defaults, config file, then command-line overrides."""
    projects_payload = _get_table(payload, "projects")
    index_payload = _get_table(payload, "index")
    find_payload = _get_table(payload, "find")
    git_payload = _get_table(payload, "git")
    logging_payload = _get_table(payload, "logging")

    projects_path = (
        _optional_path(projects_payload.get("path"), "projects.path", None) or base.projects_path
    )
    index_file_path = _optional_path(index_payload.get("path"), "index.path", None)
    if index_file_path is None:
        index_file_path = projects_path / DEFAULT_INDEX_FILE_NAME

    merged = Config(
        projects_path=projects_path,
        index_file_path=index_file_path,
        max_find_items=_optional_positive_int_with_cap(
            find_payload.get("max_items"),
            "find.max_items",
            base.max_find_items,
            MAX_FIND_ITEMS_CAP,
        ),
        git=GitConfig(
            command=_optional_str(git_payload.get("command"), "git.command", base.git.command),
            remote_name=_optional_str(
                git_payload.get("remote_name"), "git.remote_name", base.git.remote_name
            ),
        ),
        audit_log_path=_optional_path(
            logging_payload.get("audit_log"), "logging.audit_log", base.audit_log_path
        ),
    )
    return apply_cli_overrides(merged, overrides)


def apply_cli_overrides(config: Config, overrides: CliOverrides) -> Config:
    """Apply command-line overrides at highest precedence."""
    projects_path = overrides.projects_path or config.projects_path
    index_file_path = overrides.index_file_path
    if index_file_path is None:
        if overrides.projects_path is not None and config.index_file_path == (
            config.projects_path / DEFAULT_INDEX_FILE_NAME
        ):
            index_file_path = projects_path / DEFAULT_INDEX_FILE_NAME
        else:
            index_file_path = config.index_file_path
    max_find_items = _optional_positive_int_with_cap(
        overrides.max_find_items,
        "overrides.max_find_items",
        config.max_find_items,
        MAX_FIND_ITEMS_CAP,
    )
    return Config(
        projects_path=projects_path.expanduser(),
        index_file_path=index_file_path.expanduser(),
        max_find_items=max_find_items,
        git=config.git,
        audit_log_path=config.audit_log_path,
    )


def load_effective_config(
    config_path: Path | None = None,
    overrides: CliOverrides | None = None,
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
) -> Config:
    """Load effective config using merge order defaults -> config file -> overrides."""
    env = os.environ if environ is None else environ
    home_dir = home if home is not None else Path.home()
    base = default_config(home_dir)
    if config_path is not None:
        payload = load_config_file(config_path.expanduser(), required=True)
    else:
        payload = load_config_file(config_file_path(env, home_dir), required=False)
    return merge_config(base, payload, overrides or CliOverrides())
