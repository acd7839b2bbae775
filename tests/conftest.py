# The MIT License (MIT)
# Copyright © 2025 Entrius

"""Shared fixtures: a fixed clock, a run config and an in-memory GraphQL client."""

from datetime import datetime, timedelta, timezone

import pytest

from cardarchiver.config import ArchiverConfig
from cardarchiver.errors import TransportError
from cardarchiver.utils.github_api_tools import (
    ARCHIVE_CARD_MUTATION,
    CLOSE_ISSUE_MUTATION,
    FETCH_CARDS_QUERY,
)

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def iso_days_ago(days: float) -> str:
    """GitHub-style timestamp `days` before NOW."""
    return (NOW - timedelta(days=days)).strftime('%Y-%m-%dT%H:%M:%SZ')


def card_node(card_id, days_ago, issue_id=None, number=None):
    node = {'id': card_id, 'updatedAt': iso_days_ago(days_ago), 'content': None}
    if issue_id:
        node['content'] = {
            'id': issue_id,
            'number': number,
            'title': f'Issue {number}',
            'url': f'https://github.com/acme/widgets/issues/{number}',
        }
    return node


def project_data(columns):
    """GraphQL `data` for one page. `columns` is a list of (name, nodes, end_cursor, has_next_page)."""
    return {
        'repository': {
            'projects': {
                'edges': [
                    {
                        'node': {
                            'name': 'Roadmap',
                            'columns': {
                                'edges': [
                                    {
                                        'node': {
                                            'name': name,
                                            'cards': {
                                                'pageInfo': {'endCursor': end_cursor, 'hasNextPage': has_next},
                                                'edges': [{'cursor': f'c-{n["id"]}', 'node': n} for n in nodes],
                                            },
                                        }
                                    }
                                    for name, nodes, end_cursor, has_next in columns
                                ]
                            },
                        }
                    }
                ]
            }
        }
    }


def paged_column(nodes, page_size, column_name='Done', other_columns=('To Do', 'In Progress')):
    """Split `nodes` into successive page payloads for `column_name`."""
    chunks = [nodes[i:i + page_size] for i in range(0, len(nodes), page_size)] or [[]]
    pages = []
    for index, chunk in enumerate(chunks):
        has_next = index < len(chunks) - 1
        columns = [(name, [], None, False) for name in other_columns]
        columns.append((column_name, chunk, f'cursor-{index + 1}', has_next))
        pages.append(project_data(columns))
    return pages


class FakeGraphQLClient:
    """Stands in for GitHubGraphQLClient: serves canned pages and records every call."""

    def __init__(self, pages=None, fetch_error=None, fail_archive=(), fail_close=()):
        self.pages = list(pages or [])
        self.fetch_error = fetch_error
        self.fail_archive = set(fail_archive)
        self.fail_close = set(fail_close)
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, query, variables=None):
        variables = dict(variables or {})
        self.calls.append((query, variables))

        if query == FETCH_CARDS_QUERY:
            if self.fetch_error is not None:
                raise self.fetch_error
            return self.pages[len(self.fetch_calls) - 1]

        if query == ARCHIVE_CARD_MUTATION:
            if variables['cardId'] in self.fail_archive:
                raise TransportError(f"archive failed for {variables['cardId']}")
            return {'updateProjectCard': {'projectCard': {'id': variables['cardId']}}}

        if query == CLOSE_ISSUE_MUTATION:
            if variables['issueId'] in self.fail_close:
                raise TransportError(f"close failed for {variables['issueId']}")
            return {'addComment': {'subject': {'id': variables['issueId']}}, 'closeIssue': {'issue': {'id': variables['issueId']}}}

        raise AssertionError(f'Unexpected query: {query}')

    def _variables_for(self, query):
        return [variables for q, variables in self.calls if q == query]

    @property
    def fetch_calls(self):
        return self._variables_for(FETCH_CARDS_QUERY)

    @property
    def archive_calls(self):
        return [v['cardId'] for v in self._variables_for(ARCHIVE_CARD_MUTATION)]

    @property
    def close_calls(self):
        return self._variables_for(CLOSE_ISSUE_MUTATION)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    return ArchiverConfig(
        access_token='fake_github_token',
        column_to_archive='Done',
        repository_owner='acme',
        repository='widgets',
        project_name='Roadmap',
        days_old=30,
    )


@pytest.fixture
def gql():
    """Namespace of payload builders and the fake client class."""

    class _Builders:
        FakeGraphQLClient = FakeGraphQLClient
        card_node = staticmethod(card_node)
        project_data = staticmethod(project_data)
        paged_column = staticmethod(paged_column)
        iso_days_ago = staticmethod(iso_days_ago)

    return _Builders
