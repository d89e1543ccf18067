# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Annotate newly opened pull requests.

Two independent reminders may be decided for one pull request, in this order:
1. ``CHANGES.md`` was not updated (only when the repository opts in)
2. a file under a restricted third-party folder was added or modified
"""

from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

import bittensor as bt

from concierge.classes import ChangedFile, CommentPostIntent, PullRequest
from concierge.errors import ValidationError
from concierge.policy.messages import (
    DEFAULT_REPOSITORY_NAME,
    render_changelog_reminder,
    render_restricted_folder_reminder,
)
from concierge.policy.paths import is_changelog_file, matches_any_restricted_folder
from concierge.utils import github_api_tools


def evaluate(
    pull_request: PullRequest,
    changed_files: Sequence[ChangedFile],
    check_changes_md: bool,
    third_party_folders: Optional[Sequence[str]],
    repository_name: Optional[str] = None,
) -> List[CommentPostIntent]:
    """Decide the comments for one opened pull request.

    Args:
        pull_request (PullRequest): The opened pull request.
        changed_files (Sequence[ChangedFile]): Files changed by the pull request.
        check_changes_md (bool): Whether a missing ``CHANGES.md`` entry is flagged.
        third_party_folders (Optional[Sequence[str]]): Restricted path prefixes.
        repository_name (Optional[str]): ``owner/name`` used for links in the messages.

    Returns:
        List[CommentPostIntent]: Zero, one or two intents, changelog reminder first.
    """
    changed_paths = [changed_file.path for changed_file in changed_files]
    bt.logging.debug(f"These files changed in PR #{pull_request.number}: {changed_paths}")
    bt.logging.debug(f"checkChangesMd is set to: {check_changes_md}")

    repository_name = repository_name or DEFAULT_REPOSITORY_NAME
    intents: List[CommentPostIntent] = []

    needs_changelog_reminder = check_changes_md and not any(is_changelog_file(path) for path in changed_paths)
    if needs_changelog_reminder:
        bt.logging.info(f"CHANGES.md was not updated in PR #{pull_request.number}")
        intents.append(
            CommentPostIntent(
                target_url=pull_request.comments_url,
                body=render_changelog_reminder(pull_request.author_login, repository_name, pull_request.base_branch),
            )
        )

    if matches_any_restricted_folder(changed_paths, third_party_folders):
        bt.logging.info(f"A third-party file changed in PR #{pull_request.number}")
        intents.append(
            CommentPostIntent(
                target_url=pull_request.comments_url,
                body=render_restricted_folder_reminder(
                    pull_request.author_login, third_party_folders, repository_name, pull_request.base_branch
                ),
            )
        )

    return intents


def opened_pull_request_handler(
    webhook_event: Any,
    headers: Any,
    third_party_folders: Optional[Sequence[str]],
    check_changes_md: bool,
) -> List[CommentPostIntent]:
    """Evaluate a ``pull_request`` webhook event.

    Raises:
        ValidationError: if the event has no ``pull_request`` object or ``headers`` is not a mapping.
            Nothing is fetched in that case.
        TransportError: if the changed-file list cannot be fetched. No intents are returned.
    """
    if not isinstance(webhook_event, Mapping):
        raise ValidationError("webhook event must be an object")
    if not isinstance(headers, Mapping):
        raise ValidationError("headers must be an object")
    raw_pull_request = webhook_event.get('pull_request')
    if not isinstance(raw_pull_request, Mapping):
        raise ValidationError("webhook event is not a pull request event")

    try:
        pull_request = PullRequest.from_github_response(raw_pull_request)
    except (KeyError, TypeError, ValueError) as e:
        raise ValidationError(f"malformed pull_request object: {e}") from e

    repository = webhook_event.get('repository')
    repository_name = repository.get('full_name') if isinstance(repository, Mapping) else None

    raw_files = github_api_tools.get_all_pages(pull_request.files_url, dict(headers))
    changed_files = [ChangedFile.from_github_response(raw_file) for raw_file in raw_files]

    return evaluate(pull_request, changed_files, check_changes_md, third_party_folders, repository_name)
