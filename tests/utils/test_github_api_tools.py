#!/usr/bin/env python3
# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Unit tests for github_api_tools module.

Tests the GitHub capability layer:
- Link header pagination parsing
- Non-2xx responses surfacing as TransportError
- Last-page comment fetching (one or two requests)
- Comment posting
"""

from unittest.mock import patch

import pytest

from concierge.classes import CommentPostIntent
from concierge.errors import TransportError
from concierge.utils import github_api_tools
from concierge.utils.github_api_tools import (
    fetch_last_comment_page,
    get_all_pages,
    http_get,
    http_post,
    list_open_pull_requests,
    make_headers,
    parse_pagination_last_page,
    post_comment,
)

COMMENTS_URL = 'https://api.github.com/repos/owner/repo/issues/7/comments'


# ============================================================================
# Pagination
# ============================================================================


class TestParsePaginationLastPage:
    def test_missing_header(self):
        assert parse_pagination_last_page(None) is None
        assert parse_pagination_last_page('') is None

    def test_last_relation(self):
        link = (
            '<https://api.github.com/repositories/1/issues/7/comments?page=2>; rel="next", '
            '<https://api.github.com/repositories/1/issues/7/comments?page=34>; rel="last"'
        )
        assert parse_pagination_last_page(link) == 34

    def test_last_relation_with_other_params(self):
        link = '<https://api.github.com/repos/o/r/pulls?state=open&page=4&per_page=100>; rel="last"'
        assert parse_pagination_last_page(link) == 4

    def test_no_last_relation(self):
        # GitHub omits "last" when already on the last page
        link = '<https://api.github.com/repositories/1/issues/7/comments?page=1>; rel="prev"'
        assert parse_pagination_last_page(link) is None

    @patch('concierge.utils.github_api_tools.bt.logging')
    def test_unparsable_page(self, mock_logging):
        link = '<https://api.github.com/repositories/1/issues/7/comments?page=abc>; rel="last"'
        assert parse_pagination_last_page(link) is None


# ============================================================================
# HTTP capabilities
# ============================================================================


class TestHttpCapabilities:
    def test_make_headers(self):
        headers = make_headers('fake_github_token')
        assert headers['Authorization'] == 'token fake_github_token'
        assert headers['Accept'] == 'application/vnd.github.v3+json'
        assert 'User-Agent' in headers

    @patch('concierge.utils.github_api_tools.requests.get')
    def test_get_success(self, mock_get, make_response):
        mock_get.return_value = make_response(json_data=[1])

        response = http_get('https://api.github.com/x', {'a': 'b'}, params={'page': 2})

        assert response.json() == [1]
        mock_get.assert_called_once_with(
            'https://api.github.com/x', headers={'a': 'b'}, params={'page': 2}, timeout=30
        )

    @pytest.mark.parametrize('status', [301, 401, 404, 500, 502])
    @patch('concierge.utils.github_api_tools.requests.get')
    def test_get_non_2xx_raises(self, mock_get, status, make_response):
        mock_get.return_value = make_response(status_code=status)

        with pytest.raises(TransportError) as exc_info:
            http_get('https://api.github.com/x', {})

        assert exc_info.value.status == status
        assert exc_info.value.url == 'https://api.github.com/x'

    @patch('concierge.utils.github_api_tools.requests.post')
    def test_post_sends_json(self, mock_post, make_response):
        mock_post.return_value = make_response(status_code=201)

        http_post(COMMENTS_URL, {'a': 'b'}, {'body': 'hi'})

        mock_post.assert_called_once_with(COMMENTS_URL, headers={'a': 'b'}, json={'body': 'hi'}, timeout=30)

    @patch('concierge.utils.github_api_tools.requests.post')
    def test_post_failure_raises(self, mock_post, make_response):
        mock_post.return_value = make_response(status_code=403)

        with pytest.raises(TransportError):
            post_comment(CommentPostIntent(target_url=COMMENTS_URL, body='hi'), {})

    @patch('concierge.utils.github_api_tools.bt.logging')
    @patch('concierge.utils.github_api_tools.requests.get')
    def test_low_rate_limit_warns(self, mock_get, mock_logging, make_response):
        mock_get.return_value = make_response(headers={'X-RateLimit-Remaining': '3'})

        http_get('https://api.github.com/x', {})

        mock_logging.warning.assert_called_once()


# ============================================================================
# Comment thread and listing
# ============================================================================


class TestFetchLastCommentPage:
    @patch('concierge.utils.github_api_tools.requests.get')
    def test_single_page_uses_first_response(self, mock_get, make_response, make_comment_json):
        mock_get.return_value = make_response(json_data=[make_comment_json('alice'), make_comment_json('bob')])

        comments = fetch_last_comment_page(COMMENTS_URL, {})

        assert [c.author_login for c in comments] == ['alice', 'bob']
        assert mock_get.call_count == 1

    @patch('concierge.utils.github_api_tools.requests.get')
    def test_requests_last_page(self, mock_get, make_response, make_comment_json):
        link = f'<{COMMENTS_URL}?page=2>; rel="next", <{COMMENTS_URL}?page=5>; rel="last"'
        mock_get.side_effect = [
            make_response(json_data=[make_comment_json('first')], headers={'Link': link}),
            make_response(json_data=[make_comment_json('latest', 'newest comment')]),
        ]

        comments = fetch_last_comment_page(COMMENTS_URL, {'h': 'v'})

        assert [c.body for c in comments] == ['newest comment']
        second_call = mock_get.call_args_list[1]
        assert second_call.args[0] == COMMENTS_URL
        assert second_call.kwargs['params'] == {'page': 5}
        assert second_call.kwargs['headers'] == {'h': 'v'}

    @patch('concierge.utils.github_api_tools.requests.get')
    def test_second_call_failure_propagates(self, mock_get, make_response):
        link = f'<{COMMENTS_URL}?page=2>; rel="last"'
        mock_get.side_effect = [
            make_response(json_data=[], headers={'Link': link}),
            make_response(status_code=500),
        ]

        with pytest.raises(TransportError) as exc_info:
            fetch_last_comment_page(COMMENTS_URL, {})
        assert exc_info.value.status == 500

    @patch('concierge.utils.github_api_tools.requests.get')
    def test_empty_thread(self, mock_get, make_response):
        mock_get.return_value = make_response(json_data=[])
        assert fetch_last_comment_page(COMMENTS_URL, {}) == []


class TestListing:
    @patch('concierge.utils.github_api_tools.requests.get')
    def test_get_all_pages_follows_next(self, mock_get, make_response):
        mock_get.side_effect = [
            make_response(json_data=[1, 2], links={'next': {'url': 'https://api.github.com/x?page=2'}}),
            make_response(json_data=[3]),
        ]

        assert get_all_pages('https://api.github.com/x', {}) == [1, 2, 3]
        assert mock_get.call_args_list[1].args[0] == 'https://api.github.com/x?page=2'

    @patch.object(github_api_tools, 'get_all_pages')
    def test_list_open_pull_requests(self, mock_pages, pull_request_json):
        mock_pages.return_value = [pull_request_json]

        pull_requests = list_open_pull_requests('baxterthehacker/public-repo', 'master', {})

        assert pull_requests[0].author_login == 'baxterthehacker'
        assert pull_requests[0].files_url.endswith('/pulls/1/files')
        _, kwargs = mock_pages.call_args
        assert kwargs['params']['state'] == 'open'
        assert kwargs['params']['base'] == 'master'
