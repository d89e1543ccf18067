# The MIT License (MIT)
# Copyright © 2025 Entrius

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from concierge.constants import DEFAULT_BRANCH
from concierge.utils.utils import parse_github_timestamp

StaleTemplate = Callable[[Dict[str, Any]], str]


class PRState(Enum):
    """Pull request state as reported by the REST API"""

    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class RepositorySettings:
    """Per-repository policy settings, immutable for one run"""

    headers: Dict[str, str]
    max_days_since_update: float
    stale_pull_request_template: Optional[StaleTemplate] = None
    third_party_folders: List[str] = field(default_factory=list)
    check_changes_md: bool = False
    default_branch: str = DEFAULT_BRANCH


@dataclass
class PullRequest:
    """Pull request metadata needed by the policies"""

    number: int
    url: str
    comments_url: str
    author_login: str
    state: PRState
    base_branch: str
    created_at: datetime
    html_url: Optional[str] = None

    @property
    def files_url(self) -> str:
        return f"{self.url}/files"

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'PullRequest':
        """Build from a REST pull request object (list endpoint or webhook payload)."""
        return cls(
            number=data['number'],
            url=data['url'],
            comments_url=data['comments_url'],
            author_login=data['user']['login'],
            state=PRState(data.get('state', PRState.OPEN.value)),
            base_branch=data['base']['ref'],
            created_at=parse_github_timestamp(data['created_at']),
            html_url=data.get('html_url'),
        )


@dataclass
class Comment:
    """A single issue comment on a pull request"""

    author_login: str
    body: str
    created_at: datetime

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'Comment':
        return cls(
            author_login=data['user']['login'],
            body=data.get('body') or '',
            created_at=parse_github_timestamp(data['created_at']),
        )


@dataclass
class ChangedFile:
    """A file touched by a pull request"""

    path: str

    @classmethod
    def from_github_response(cls, data: Dict[str, Any]) -> 'ChangedFile':
        return cls(path=data['filename'])


@dataclass(frozen=True)
class CommentPostIntent:
    """A decided comment: post ``body`` to ``target_url``. Never posted by the policies themselves."""

    target_url: str
    body: str
