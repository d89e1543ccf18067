# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures: GitHub payloads and mocked HTTP responses."""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)
PR_URL = 'https://api.github.com/repos/baxterthehacker/public-repo/pulls/1'
COMMENTS_URL = 'https://api.github.com/repos/baxterthehacker/public-repo/issues/1/comments'


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def pull_request_json():
    """Pull request object as found in the list endpoint and in webhook payloads."""
    return {
        'number': 1,
        'url': PR_URL,
        'html_url': 'https://github.com/baxterthehacker/public-repo/pull/1',
        'comments_url': COMMENTS_URL,
        'user': {'login': 'baxterthehacker'},
        'state': 'open',
        'base': {'ref': 'master'},
        'created_at': '2024-01-01T00:00:00Z',
    }


@pytest.fixture
def pull_request_event(pull_request_json):
    return {
        'action': 'opened',
        'number': 1,
        'pull_request': pull_request_json,
        'repository': {'full_name': 'baxterthehacker/public-repo'},
    }


@pytest.fixture
def make_comment_json():
    """Factory for REST comment objects created ``days_ago`` days before NOW."""

    def _make(login, body='Looks good', days_ago=1.0):
        created_at = NOW - timedelta(days=days_ago)
        return {
            'user': {'login': login},
            'body': body,
            'created_at': created_at.strftime('%Y-%m-%dT%H:%M:%SZ'),
        }

    return _make


@pytest.fixture
def make_response():
    """Factory for ``requests.Response`` mocks."""

    def _make(status_code=200, json_data=None, headers=None, links=None):
        response = Mock()
        response.status_code = status_code
        response.json.return_value = json_data if json_data is not None else []
        response.headers = headers or {}
        response.links = links or {}
        return response

    return _make
