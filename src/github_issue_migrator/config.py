"""
Configuration loading for the GitHub issue migration tool.

The configuration is a YAML file describing the source and destination
repositories and, optionally, per-user tokens so that migrated issues and
comments can be posted under their original author's account::

    source:
      owner: acme
      name: old-repo
      token_env: SOURCE_GITHUB_TOKEN
    destination:
      owner: acme
      name: new-repo
      token_pass: github/migration-bot
    users:
      - username: alice
        token_env: ALICE_GITHUB_TOKEN

Tokens are resolved in this order: inline ``token``, ``token_pass`` (read with
the ``pass`` password manager), ``token_env`` (environment variable) and, for
repositories only, the ``GITHUB_TOKEN`` environment variable.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

import yaml

from . import utils
from .exceptions import ConfigError

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: Final[str] = "migration.yaml"
DEFAULT_API_URL: Final[str] = "https://api.github.com"
DEFAULT_WEB_URL: Final[str] = "https://github.com"
DEFAULT_PER_PAGE: Final[int] = 100
_TOKEN_ENV_VAR: Final[str] = "GITHUB_TOKEN"  # noqa: S105


@dataclass(frozen=True)
class RepoConfig:
    """A GitHub repository together with the credential used to access it."""

    owner: str
    name: str
    token: str = field(repr=False)
    api_url: str = DEFAULT_API_URL
    web_url: str = DEFAULT_WEB_URL

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def issues_url(self) -> str:
        """Base web URL of the repository's issues, without trailing slash."""
        return f"{self.web_url.rstrip('/')}/{self.full_name}/issues"


@dataclass(frozen=True)
class UserToken:
    """Credential of a known source author."""

    username: str
    token: str = field(repr=False)


@dataclass(frozen=True)
class MigrationConfig:
    source: RepoConfig
    destination: RepoConfig
    users: tuple[UserToken, ...] = ()
    per_page: int = DEFAULT_PER_PAGE


def resolve_token(entry: dict[str, Any], *, fallback_env: str | None = None) -> str | None:
    """Resolve a token from a config entry, returning None if none is configured."""
    token = entry.get("token")
    if token:
        return str(token)

    pass_path = entry.get("token_pass")
    if pass_path:
        try:
            return utils.get_pass_value(str(pass_path))
        except (utils.PassError, ValueError) as e:
            msg = f"Could not read token from pass at '{pass_path}': {e}"
            raise ConfigError(msg) from e

    env_var = entry.get("token_env") or fallback_env
    if env_var:
        value = os.environ.get(str(env_var))
        if value:
            return value
        logger.debug(f"Environment variable {env_var} is not set")

    return None


def _parse_repo(data: Any, section: str) -> RepoConfig:
    if not isinstance(data, dict):
        msg = f"Missing or invalid '{section}' section"
        raise ConfigError(msg)

    owner = data.get("owner")
    name = data.get("name")
    if not owner or not name:
        msg = f"Section '{section}' needs both 'owner' and 'name'"
        raise ConfigError(msg)

    token = resolve_token(data, fallback_env=_TOKEN_ENV_VAR)
    if not token:
        msg = f"No token configured for {section} repository {owner}/{name}"
        raise ConfigError(msg)

    return RepoConfig(
        owner=str(owner),
        name=str(name),
        token=token,
        api_url=str(data.get("api_url") or DEFAULT_API_URL),
        web_url=str(data.get("web_url") or DEFAULT_WEB_URL),
    )


def _parse_users(data: Any) -> tuple[UserToken, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        msg = "'users' must be a list of {username, token} entries"
        raise ConfigError(msg)

    users: list[UserToken] = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("username"):
            msg = f"Invalid user entry: {entry!r}"
            raise ConfigError(msg)
        token = resolve_token(entry)
        if not token:
            msg = f"No token configured for user {entry['username']}"
            raise ConfigError(msg)
        users.append(UserToken(username=str(entry["username"]), token=token))
    return tuple(users)


def parse_config(data: Any) -> MigrationConfig:
    """Build a MigrationConfig from already-parsed YAML data."""
    if not isinstance(data, dict):
        msg = "Configuration must be a mapping"
        raise ConfigError(msg)

    per_page = data.get("per_page", DEFAULT_PER_PAGE)
    if not isinstance(per_page, int) or not 1 <= per_page <= 100:  # noqa: PLR2004
        msg = f"'per_page' must be an integer between 1 and 100, got {per_page!r}"
        raise ConfigError(msg)

    return MigrationConfig(
        source=_parse_repo(data.get("source"), "source"),
        destination=_parse_repo(data.get("destination"), "destination"),
        users=_parse_users(data.get("users")),
        per_page=per_page,
    )


def load_config(path: str | Path = DEFAULT_CONFIG_PATH) -> MigrationConfig:
    """Load the migration configuration from a YAML file."""
    config_file = Path(path)
    try:
        with config_file.open() as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        msg = f"Configuration file not found: {config_file}"
        raise ConfigError(msg) from e
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in {config_file}: {e}"
        raise ConfigError(msg) from e

    config = parse_config(data)
    logger.info(
        f"Loaded configuration from {config_file}: {config.source.full_name} -> {config.destination.full_name}, "
        f"{len(config.users)} user token(s)"
    )
    return config
