# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Comment bodies posted by the policies.

All functions here are pure string builders.
"""

from typing import Optional, Sequence

from concierge.classes import StaleTemplate
from concierge.constants import DEFAULT_BRANCH, GITHUB_DOMAIN
from concierge.errors import ConfigurationError

DEFAULT_REPOSITORY_NAME = "CesiumGS/cesium"

THANK_YOU_MESSAGE = " thanks for the pull request!\n\n"
CHANGES_MESSAGE = (
    "I noticed that [`CHANGES.md`]({changes_url}) has not been updated. "
    "If this change updates the public API in any way, fixes a bug, or makes any non-trivial update, "
    "please add a bullet point to `CHANGES.md` and bump this pull request so we know it was updated. "
    "For more info, see the [Pull Request Guidelines]({contributing_url}).\n\n"
)
RESTRICTED_FOLDER_MESSAGE = (
    "I noticed that a file in {folders} has been added or modified. "
    "Third-party code needs a manual license review: please verify that it has a section in "
    "[LICENSE.md]({license_url}) and that its license information is up to date with this new version. "
    "Once you do, please confirm by commenting on this pull request.\n\n"
)
SIGN_OFF = "__I am a bot who helps you keep this project awesome!__ Thanks again."


def _blob_url(repository_name: str, branch: str, path: str) -> str:
    return f"{GITHUB_DOMAIN}/{repository_name}/blob/{branch}/{path}"


def _greeting(author_login: str) -> str:
    return f"@{author_login}{THANK_YOU_MESSAGE}"


def format_folder_list(folders: Sequence[str]) -> str:
    """Enumerate folders in backticks: `a`; `a` or `b`; `a`, `b`, or `c`."""
    quoted = [f"`{folder}`" for folder in folders]
    if len(quoted) <= 1:
        return ''.join(quoted)
    if len(quoted) == 2:
        return f"{quoted[0]} or {quoted[1]}"
    return ', '.join(quoted[:-1]) + f", or {quoted[-1]}"


def render_stale_message(template: Optional[StaleTemplate], max_days_since_update: float) -> str:
    """Render the repository's stale reminder.

    Raises:
        ConfigurationError: if the repository has no stale template configured.
    """
    if template is None:
        raise ConfigurationError("stalePullRequestTemplate is not configured for this repository")
    return template({'maxDaysSinceUpdate': max_days_since_update})


def render_changelog_reminder(
    author_login: str,
    repository_name: str = DEFAULT_REPOSITORY_NAME,
    branch: str = DEFAULT_BRANCH,
) -> str:
    """Ask ``author_login`` to add a ``CHANGES.md`` entry."""
    message = _greeting(author_login)
    message += CHANGES_MESSAGE.format(
        changes_url=_blob_url(repository_name, branch, 'CHANGES.md'),
        contributing_url=_blob_url(repository_name, branch, 'CONTRIBUTING.md') + '#pull-request-guidelines',
    )
    message += SIGN_OFF
    return message


def render_restricted_folder_reminder(
    author_login: str,
    folders: Sequence[str],
    repository_name: str = DEFAULT_REPOSITORY_NAME,
    branch: str = DEFAULT_BRANCH,
) -> str:
    """Ask ``author_login`` to verify license information for touched third-party folders."""
    message = _greeting(author_login)
    message += RESTRICTED_FOLDER_MESSAGE.format(
        folders=format_folder_list(folders),
        license_url=_blob_url(repository_name, branch, 'LICENSE.md'),
    )
    message += SIGN_OFF
    return message
