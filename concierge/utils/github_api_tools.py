# The MIT License (MIT)
# Copyright © 2025 Entrius

"""GitHub REST capabilities used by the policies.

Every call is a single synchronous request. Non-2xx answers raise
``TransportError``; retry and backoff are left to the caller.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import bittensor as bt
import requests

from concierge.classes import Comment, CommentPostIntent, PullRequest
from concierge.constants import (
    BASE_GITHUB_API_URL,
    GITHUB_ACCEPT_HEADER,
    GITHUB_USER_AGENT,
    PULL_REQUESTS_PER_PAGE,
    REQUEST_TIMEOUT_SECONDS,
)
from concierge.errors import TransportError

RATE_LIMIT_MIN_REMAINING = 10  # Warn once fewer requests than this remain


def make_headers(token: str) -> Dict[str, str]:
    """Build standard GitHub HTTP headers for a PAT.

    Args:
        token (str): Github pat
    Returns:
        Dict[str, str]: Mapping of HTTP header names to values.
    """
    return {
        "Authorization": f"token {token}",
        "Accept": GITHUB_ACCEPT_HEADER,
        "User-Agent": GITHUB_USER_AGENT,
    }


def _check_status(response: requests.Response, url: str) -> requests.Response:
    if not 200 <= response.status_code < 300:
        raise TransportError(response.status_code, url)
    return response


def log_rate_limit_status(response: requests.Response) -> None:
    """Warn when the remaining GitHub quota reported by ``response`` runs low."""
    remaining = response.headers.get('X-RateLimit-Remaining')
    if remaining is None:
        return
    try:
        remaining = int(remaining)
    except (TypeError, ValueError):
        return
    if remaining <= RATE_LIMIT_MIN_REMAINING:
        bt.logging.warning(f"Approaching GitHub API rate limit: {remaining} requests remaining")


def http_get(url: str, headers: Dict[str, str], params: Optional[Dict[str, Any]] = None) -> requests.Response:
    """GET ``url`` and return the response.

    Raises:
        TransportError: if the status code is not 2xx.
    """
    response = requests.get(url, headers=headers, params=params, timeout=REQUEST_TIMEOUT_SECONDS)
    _check_status(response, url)
    log_rate_limit_status(response)
    return response


def http_post(url: str, headers: Dict[str, str], body: Dict[str, Any]) -> requests.Response:
    """POST ``body`` as JSON to ``url`` and return the response.

    Raises:
        TransportError: if the status code is not 2xx.
    """
    response = requests.post(url, headers=headers, json=body, timeout=REQUEST_TIMEOUT_SECONDS)
    return _check_status(response, url)


def parse_pagination_last_page(link_header: Optional[str]) -> Optional[int]:
    """Extract the page number of the ``rel="last"`` entry of a Link header.

    Returns None for single-page responses (no header, or no ``last`` relation).
    """
    if not link_header:
        return None

    for link in requests.utils.parse_header_links(link_header):
        if link.get('rel') != 'last':
            continue
        page = parse_qs(urlparse(link.get('url', '')).query).get('page')
        if not page:
            return None
        try:
            return int(page[0])
        except ValueError:
            bt.logging.debug(f"Unparsable last page in Link header: {link_header}")
            return None
    return None


def get_all_pages(url: str, headers: Dict[str, str], params: Optional[Dict[str, Any]] = None) -> List[Any]:
    """Collect a paginated JSON list endpoint by following ``rel="next"`` links."""
    items: List[Any] = []
    response = http_get(url, headers, params=params)
    items.extend(response.json())

    next_link = response.links.get('next')
    while next_link:
        # next links already carry the query string
        response = http_get(next_link['url'], headers)
        items.extend(response.json())
        next_link = response.links.get('next')
    return items


def fetch_last_comment_page(comments_url: str, headers: Dict[str, str]) -> List[Comment]:
    """Fetch only the most recent page of a pull request's comment thread.

    The first request reads the pagination metadata, the second fetches the
    last page. A thread without pagination metadata is a single page, so the
    first response is used as-is.
    """
    first_response = http_get(comments_url, headers)
    last_page = parse_pagination_last_page(first_response.headers.get('Link'))

    if last_page is None:
        page = first_response.json()
    else:
        page = http_get(comments_url, headers, params={'page': last_page}).json()

    return [Comment.from_github_response(comment) for comment in page]


def list_open_pull_requests(repository_name: str, base_branch: str, headers: Dict[str, str]) -> List[PullRequest]:
    """List open pull requests of ``owner/name`` targeting ``base_branch``."""
    raw_pull_requests = get_all_pages(
        f"{BASE_GITHUB_API_URL}/repos/{repository_name}/pulls",
        headers,
        params={'state': 'open', 'base': base_branch, 'per_page': PULL_REQUESTS_PER_PAGE},
    )
    return [PullRequest.from_github_response(pr) for pr in raw_pull_requests]


def post_comment(intent: CommentPostIntent, headers: Dict[str, str]) -> requests.Response:
    """Publish a decided comment."""
    return http_post(intent.target_url, headers, {'body': intent.body})
