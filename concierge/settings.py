# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Load repository settings from a JSON config file.

Example ``config.json``::

    {
      "botLogin": "cesium-concierge",
      "gitHubToken": "ghp_...",
      "repositories": {
        "CesiumGS/cesium": {
          "maxDaysSinceUpdate": 30,
          "stalePullRequestTemplatePath": "templates/stalePullRequest.md",
          "thirdPartyFolders": ["ThirdParty/"],
          "checkChangesMd": true
        }
      }
    }

The token falls back to the ``GITHUB_TOKEN`` environment variable.
"""

import json
import os
from dataclasses import dataclass, field
from numbers import Number
from pathlib import Path
from typing import Any, Dict, Optional, Union

from concierge.classes import RepositorySettings, StaleTemplate
from concierge.constants import (
    DEFAULT_BOT_LOGIN,
    DEFAULT_BRANCH,
    DEFAULT_MAX_DAYS_SINCE_UPDATE,
    GITHUB_TOKEN_ENV_VAR,
)
from concierge.errors import ConfigurationError
from concierge.utils.github_api_tools import make_headers


@dataclass
class Settings:
    """Parsed configuration file"""

    bot_login: str = DEFAULT_BOT_LOGIN
    repositories: Dict[str, RepositorySettings] = field(default_factory=dict)
    path: Optional[Path] = None


def build_template(text: str) -> StaleTemplate:
    """Turn template text with ``{placeholder}`` fields into a ``template(context)`` callable."""

    def template(context: Dict[str, Any]) -> str:
        try:
            return text.format_map(context)
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(f"Invalid stale pull request template: {e}") from e

    return template


def _load_template(repository_name: str, raw: Dict[str, Any], base_dir: Path) -> Optional[StaleTemplate]:
    inline = raw.get('stalePullRequestTemplate')
    template_path = raw.get('stalePullRequestTemplatePath')

    if inline is not None and template_path is not None:
        raise ConfigurationError(
            f"{repository_name}: set only one of stalePullRequestTemplate and stalePullRequestTemplatePath"
        )
    if inline is not None:
        if not isinstance(inline, str):
            raise ConfigurationError(f"{repository_name}: stalePullRequestTemplate must be a string")
        return build_template(inline)
    if template_path is not None:
        resolved = base_dir / template_path
        try:
            return build_template(resolved.read_text())
        except OSError as e:
            raise ConfigurationError(f"{repository_name}: cannot read template {resolved}: {e}") from e
    return None


def _parse_repository(repository_name: str, raw: Any, default_token: Optional[str], base_dir: Path) -> RepositorySettings:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"{repository_name}: settings must be an object")

    parts = repository_name.split('/')
    if len(parts) != 2 or not all(parts):
        raise ConfigurationError(f"Repository name must be in 'owner/name' form, got '{repository_name}'")

    token = raw.get('gitHubToken') or default_token
    if not token:
        raise ConfigurationError(f"{repository_name}: no gitHubToken configured and {GITHUB_TOKEN_ENV_VAR} is unset")

    max_days = raw.get('maxDaysSinceUpdate', DEFAULT_MAX_DAYS_SINCE_UPDATE)
    if isinstance(max_days, bool) or not isinstance(max_days, Number) or max_days <= 0:
        raise ConfigurationError(f"{repository_name}: maxDaysSinceUpdate must be a positive number")

    folders = raw.get('thirdPartyFolders', [])
    if not isinstance(folders, list) or not all(isinstance(folder, str) for folder in folders):
        raise ConfigurationError(f"{repository_name}: thirdPartyFolders must be a list of strings")

    check_changes_md = raw.get('checkChangesMd', False)
    if not isinstance(check_changes_md, bool):
        raise ConfigurationError(f"{repository_name}: checkChangesMd must be true or false")

    default_branch = raw.get('defaultBranch', DEFAULT_BRANCH)
    if not isinstance(default_branch, str) or not default_branch:
        raise ConfigurationError(f"{repository_name}: defaultBranch must be a non-empty string")

    return RepositorySettings(
        headers=make_headers(token),
        max_days_since_update=max_days,
        stale_pull_request_template=_load_template(repository_name, raw, base_dir),
        third_party_folders=list(folders),
        check_changes_md=check_changes_md,
        default_branch=default_branch,
    )


def load_repositories_settings(path: Union[str, Path]) -> Settings:
    """Read and validate a config file.

    Raises:
        ConfigurationError: if the file is unreadable or any setting is malformed.
    """
    path = Path(path)
    try:
        config = json.loads(path.read_text())
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in config file {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"Config file {path} must contain an object")

    repositories = config.get('repositories')
    if not isinstance(repositories, dict) or not repositories:
        raise ConfigurationError(f"Config file {path} has no repositories")

    bot_login = config.get('botLogin', DEFAULT_BOT_LOGIN)
    if not isinstance(bot_login, str) or not bot_login:
        raise ConfigurationError("botLogin must be a non-empty string")

    default_token = config.get('gitHubToken') or os.getenv(GITHUB_TOKEN_ENV_VAR)
    base_dir = path.parent

    return Settings(
        bot_login=bot_login,
        repositories={
            name: _parse_repository(name, raw, default_token, base_dir) for name, raw in repositories.items()
        },
        path=path,
    )
