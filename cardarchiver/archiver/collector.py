# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Collects every card of the target column, following card pagination until
GitHub reports no further pages.
"""

from typing import Any, Dict, List, Optional

import bittensor as bt

from cardarchiver.classes import CollectionResult, ColumnCardsPage, LinkedIssueRef, PageCursor, ProjectCard
from cardarchiver.config import ArchiverConfig
from cardarchiver.errors import APIError, ColumnNotFound
from cardarchiver.utils.github_api_tools import GitHubGraphQLClient, fetch_project_page
from cardarchiver.utils.utils import parse_github_timestamp


def resolve_column(project: Dict[str, Any], column_name: str) -> Dict[str, Any]:
    """
    Find the column whose name matches `column_name`, ignoring case.

    The first match in listed order wins when several columns share a name.

    Raises:
        ColumnNotFound: no column matches
    """
    target = column_name.casefold()
    columns = [edge["node"] for edge in (project.get("columns") or {}).get("edges") or []]
    for column in columns:
        if (column.get("name") or "").casefold() == target:
            return column
    raise ColumnNotFound(column_name, [column.get("name") or "" for column in columns])


def parse_card(node: Dict[str, Any]) -> ProjectCard:
    """Build a ProjectCard from a raw card node. Non-issue content (notes, PRs) leaves `issue` empty."""
    content = node.get("content") or {}
    issue = None
    if content.get("id"):
        issue = LinkedIssueRef(
            id=content["id"],
            number=content.get("number"),
            title=content.get("title"),
            url=content.get("url"),
        )
    return ProjectCard(id=node["id"], updated_at=parse_github_timestamp(node["updatedAt"]), issue=issue)


async def fetch_column_page(
    client: GitHubGraphQLClient, config: ArchiverConfig, cursor: PageCursor
) -> ColumnCardsPage:
    """Fetch one page of the project and return the target column's slice of it."""
    project = await fetch_project_page(
        client,
        config.repository_owner,
        config.repository,
        config.project_name,
        cursor.end_cursor,
    )
    column = resolve_column(project, config.column_to_archive)
    cards = column.get("cards") or {}

    next_cursor = PageCursor(cursor.end_cursor, cursor.has_next_page)
    next_cursor.advance(cards.get("pageInfo") or {})
    if next_cursor.has_next_page and not next_cursor.end_cursor:
        raise APIError(f"Column '{column.get('name')}' reported more cards without an end cursor")
    nodes = [edge["node"] for edge in cards.get("edges") or [] if edge.get("node")]
    return ColumnCardsPage(column_name=column.get("name", config.column_to_archive), nodes=nodes, cursor=next_cursor)


async def collect_cards(client: GitHubGraphQLClient, config: ArchiverConfig) -> CollectionResult:
    """
    Collect every non-archived card of the configured column.

    Pages are fetched strictly one after another, since each request needs the
    previous page's end cursor. Any failure (transport, GraphQL errors, missing
    project or column, unparseable card) stops collection and is returned in
    the result instead of raised, with no cards.

    Returns:
        CollectionResult: cards in API order, or the error that stopped collection
    """
    cards: List[ProjectCard] = []
    cursor = PageCursor()
    pages = 0

    try:
        while cursor.has_next_page:
            page = await fetch_column_page(client, config, cursor)
            cards.extend(parse_card(node) for node in page.nodes)
            cursor = page.cursor
            pages += 1
            bt.logging.debug(
                f"Fetched page {pages} of column '{page.column_name}': {len(page.nodes)} cards "
                f"(total {len(cards)}, more: {cursor.has_next_page})"
            )
    except Exception as e:
        bt.logging.error(f"Error collecting cards from column '{config.column_to_archive}': {e}")
        return CollectionResult(cards=[], error=e)

    bt.logging.info(f"Collected {len(cards)} cards from column '{config.column_to_archive}' in {pages} page(s)")
    return CollectionResult(cards=cards)


def describe_card(card: ProjectCard) -> str:
    issue: Optional[LinkedIssueRef] = card.issue
    suffix = f" -> issue {issue}" if issue else ""
    return f"{card.id} (updated {card.updated_at.isoformat()}){suffix}"
