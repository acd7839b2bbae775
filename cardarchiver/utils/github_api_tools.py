# Entrius 2025
import asyncio
from typing import Any, Dict, Optional

import aiohttp
import bittensor as bt
import requests

from cardarchiver.constants import (
    BASE_GITHUB_API_URL,
    GRAPHQL_TIMEOUT_SECONDS,
    PROJECT_CARDS_PAGE_SIZE,
    PROJECT_COLUMNS_PAGE_SIZE,
    TOKEN_CHECK_TIMEOUT_SECONDS,
)
from cardarchiver.errors import APIError, ProjectNotFound, TransportError

# =============================================================================
# GraphQL documents
# =============================================================================
FETCH_CARDS_QUERY = f"""
    query projectCards($owner: String!, $repo: String!, $projectName: String!, $cursor: String) {{
      repository(owner: $owner, name: $repo) {{
        projects(search: $projectName, last: 1) {{
          edges {{
            node {{
              name
              columns(first: {PROJECT_COLUMNS_PAGE_SIZE}) {{
                edges {{
                  node {{
                    name
                    cards(first: {PROJECT_CARDS_PAGE_SIZE}, after: $cursor, archivedStates: NOT_ARCHIVED) {{
                      pageInfo {{
                        endCursor
                        hasNextPage
                      }}
                      edges {{
                        cursor
                        node {{
                          id
                          updatedAt
                          content {{
                            ... on Issue {{
                              id
                              number
                              title
                              url
                            }}
                          }}
                        }}
                      }}
                    }}
                  }}
                }}
              }}
            }}
          }}
        }}
      }}
    }}
    """

ARCHIVE_CARD_MUTATION = """
    mutation archiveCard($cardId: ID!) {
      updateProjectCard(input: {projectCardId: $cardId, isArchived: true}) {
        projectCard {
          id
        }
      }
    }
    """

CLOSE_ISSUE_MUTATION = """
    mutation closeIssueFromCard($issueId: ID!, $closeMessage: String!) {
      addComment(input: {subjectId: $issueId, body: $closeMessage}) {
        subject {
          id
        }
      }
      closeIssue(input: {issueId: $issueId}) {
        issue {
          id
        }
      }
    }
    """


def make_headers(token: str) -> Dict[str, str]:
    """Build the request headers for an authenticated GitHub API call."""
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}


class GitHubGraphQLClient:
    """Async GitHub GraphQL client.

    One `execute` call is one round trip: there is no retry, and every request
    is bounded by `timeout` seconds. Use as an async context manager so the
    underlying aiohttp session is closed when the run ends; pass `session` to
    share an existing one.
    """

    def __init__(
        self,
        token: str,
        session: Optional[aiohttp.ClientSession] = None,
        timeout: float = GRAPHQL_TIMEOUT_SECONDS,
        url: str = f'{BASE_GITHUB_API_URL}/graphql',
    ):
        self.url = url
        self._headers = make_headers(token)
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> 'GitHubGraphQLClient':
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def execute(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run one GraphQL query or mutation.

        Returns:
            The `data` member of the GraphQL response.

        Raises:
            TransportError: network failure, timeout, non-200 status or a body that is not JSON
            APIError: the response carried GraphQL `errors`
        """
        if self._session is None:
            raise TransportError("GraphQL client used outside of its session context")

        try:
            async with self._session.post(
                self.url,
                headers=self._headers,
                json={"query": query, "variables": variables or {}},
                timeout=self._timeout,
            ) as response:
                if response.status != 200:
                    body = await response.text(errors='replace')
                    raise TransportError(f"GraphQL request failed with status {response.status}: {body[:200]}")
                try:
                    payload = await response.json()
                except (aiohttp.ContentTypeError, ValueError) as e:
                    raise TransportError(f"GraphQL response was not valid JSON: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError, UnicodeDecodeError) as e:
            raise TransportError(f"GraphQL request error: {e!r}") from e

        if not isinstance(payload, dict):
            raise TransportError(f"Unexpected GraphQL response: {payload!r}")

        errors = payload.get("errors")
        if errors:
            messages = "; ".join(err.get("message", str(err)) if isinstance(err, dict) else str(err) for err in errors)
            raise APIError(f"GraphQL errors: {messages}", errors)

        data = payload.get("data")
        if data is None:
            raise TransportError("GraphQL response contained no data")
        return data


# =============================================================================
# Project board operations
# =============================================================================


async def fetch_project_page(
    client: GitHubGraphQLClient, owner: str, repo: str, project_name: str, cursor: str
) -> Dict[str, Any]:
    """
    Fetch the project board with one page of cards for every column.

    Args:
        client: GraphQL client
        owner: Repository owner (user or organization)
        repo: Repository name
        project_name: Project name, matched with GitHub's project search
        cursor: Card pagination cursor, empty string for the first page

    Returns:
        The matched project node (`name`, `columns`)

    Raises:
        ProjectNotFound: the repository is missing or has no matching project
    """
    data = await client.execute(
        FETCH_CARDS_QUERY,
        {
            "owner": owner,
            "repo": repo,
            "projectName": project_name,
            "cursor": cursor or None,
        },
    )

    repository = data.get("repository")
    if not repository:
        raise ProjectNotFound(f"Repository {owner}/{repo} not found")

    edges = (repository.get("projects") or {}).get("edges") or []
    if not edges:
        raise ProjectNotFound(f"No project matching '{project_name}' in {owner}/{repo}")

    return edges[0]["node"]


async def archive_card(client: GitHubGraphQLClient, card_id: str) -> None:
    """Mark a project card as archived."""
    await client.execute(ARCHIVE_CARD_MUTATION, {"cardId": card_id})


async def close_issue_with_comment(client: GitHubGraphQLClient, issue_id: str, message: str) -> None:
    """Comment on an issue, then close it, in a single mutation request."""
    await client.execute(CLOSE_ISSUE_MUTATION, {"issueId": issue_id, "closeMessage": message})


# =============================================================================
# Token preflight
# =============================================================================


def is_token_valid(token: str) -> bool:
    """
    Test if a GitHub token is valid by making a simple API call.
    Returns:
        True if valid token, False otherwise
    """
    try:
        response = requests.get(
            f'{BASE_GITHUB_API_URL}/user', headers=make_headers(token), timeout=TOKEN_CHECK_TIMEOUT_SECONDS
        )
    except requests.exceptions.RequestException as e:
        bt.logging.warning(f"Error validating GitHub token: {e}")
        return False

    if response.status_code != 200:
        bt.logging.warning(f"GitHub token check returned status {response.status_code}")
        return False
    return True
