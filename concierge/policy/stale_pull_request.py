# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Bump stale pull requests.

Repositories and their pull requests are processed strictly one after the
other. A pull request is stale when the newest comment on the last comment
page is at least ``maxDaysSinceUpdate`` days old, unless someone other than
the bot posted the stop command on that page. A pull request with no comments
at all is measured from its creation time.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

import bittensor as bt

from concierge.classes import CommentPostIntent, PullRequest, RepositorySettings
from concierge.constants import DEFAULT_BOT_LOGIN
from concierge.errors import TransportError
from concierge.policy.messages import render_stale_message
from concierge.policy.staleness import days_since, is_stale
from concierge.policy.stop_command import contains_stop_command
from concierge.utils import github_api_tools
from concierge.utils.logging import log_comment_intents
from concierge.utils.utils import to_utc


def evaluate_pull_request(
    pull_request: PullRequest,
    settings: RepositorySettings,
    now: datetime,
    bot_login: str = DEFAULT_BOT_LOGIN,
) -> Optional[CommentPostIntent]:
    """Decide whether ``pull_request`` gets a stale reminder.

    Raises:
        TransportError: if the comment thread cannot be fetched.
        ConfigurationError: if the pull request is stale but no template is configured.
    """
    comments = github_api_tools.fetch_last_comment_page(pull_request.comments_url, settings.headers)

    if contains_stop_command(comments, bot_login):
        bt.logging.debug(f"PR #{pull_request.number}: stop command found, skipping")
        return None

    anchor = comments[-1].created_at if comments else pull_request.created_at
    if not is_stale(anchor, now, settings.max_days_since_update):
        return None

    bt.logging.info(
        f"PR #{pull_request.number} is stale: {days_since(anchor, now):.1f} days "
        f"(threshold {settings.max_days_since_update})"
    )
    return CommentPostIntent(
        target_url=pull_request.comments_url,
        body=render_stale_message(settings.stale_pull_request_template, settings.max_days_since_update),
    )


def evaluate_repository(
    repository_name: str,
    settings: RepositorySettings,
    now: Optional[datetime] = None,
    bot_login: str = DEFAULT_BOT_LOGIN,
) -> List[CommentPostIntent]:
    """Evaluate every open pull request of ``repository_name`` targeting its default branch.

    A transport failure on one pull request is logged and that pull request is
    skipped. A failure to list the pull requests propagates.
    """
    now = to_utc(now) if now else datetime.now(timezone.utc)
    bt.logging.info(f"Checking {repository_name}")

    pull_requests = github_api_tools.list_open_pull_requests(
        repository_name, settings.default_branch, settings.headers
    )

    intents: List[CommentPostIntent] = []
    for pull_request in pull_requests:
        try:
            intent = evaluate_pull_request(pull_request, settings, now, bot_login)
        except TransportError as e:
            bt.logging.error(f"Skipping PR #{pull_request.number} in {repository_name}: {e}")
            continue
        if intent is not None:
            intents.append(intent)
    return intents


def stale_pull_request_job(
    repositories: Dict[str, RepositorySettings],
    now: Optional[datetime] = None,
    bot_login: str = DEFAULT_BOT_LOGIN,
    dry_run: bool = False,
    events_logger=None,
) -> List[CommentPostIntent]:
    """Bump stale pull requests for all configured repositories.

    Each repository is an independent unit of failure: a ``TransportError`` is
    logged and the next repository is processed. A failed post only loses that
    one reminder.

    Args:
        repositories (Dict[str, RepositorySettings]): Settings keyed by ``owner/name``.
        now (Optional[datetime]): Evaluation time, defaults to the current UTC time.
            Naive values are read as local time.
        bot_login (str): Login of the bot account, used for the stop command.
        dry_run (bool): Decide intents without posting them.
        events_logger: Optional logger from ``setup_events_logger`` recording each post.

    Returns:
        List[CommentPostIntent]: Intents posted, or every intent decided when ``dry_run``.
    """
    bt.logging.info("Initiating stale pull request job")
    now = to_utc(now) if now else datetime.now(timezone.utc)
    reported: List[CommentPostIntent] = []

    for repository_name, settings in repositories.items():
        try:
            intents = evaluate_repository(repository_name, settings, now, bot_login)
        except TransportError as e:
            # Keep going so every repository is processed
            bt.logging.error(f"Stale pull request check failed for {repository_name}: {e}")
            continue

        log_comment_intents(repository_name, intents)
        for intent in intents:
            if dry_run:
                reported.append(intent)
                continue
            try:
                github_api_tools.post_comment(intent, settings.headers)
            except TransportError as e:
                bt.logging.error(f"Could not post stale reminder to {intent.target_url}: {e}")
                continue
            reported.append(intent)
            if events_logger is not None:
                events_logger.event(f"stale reminder posted to {intent.target_url}")

    return reported
