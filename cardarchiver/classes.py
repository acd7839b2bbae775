from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class LinkedIssueRef:
    """Issue attached to a project card"""

    id: str
    number: Optional[int] = None
    title: Optional[str] = None
    url: Optional[str] = None

    def __str__(self) -> str:
        if self.number is not None:
            return f"#{self.number}"
        return self.id


@dataclass(frozen=True)
class ProjectCard:
    """A card fetched from the target column"""

    id: str
    updated_at: datetime  # timezone-aware, UTC
    issue: Optional[LinkedIssueRef] = None


@dataclass
class PageCursor:
    """Pagination position within one column's card list. Empty end_cursor means first page."""

    end_cursor: str = ""
    has_next_page: bool = True

    def advance(self, page_info: dict) -> None:
        self.end_cursor = page_info.get("endCursor") or ""
        self.has_next_page = bool(page_info.get("hasNextPage"))


@dataclass
class ColumnCardsPage:
    """One page of cards from the resolved column"""

    column_name: str
    nodes: List[dict]
    cursor: PageCursor


@dataclass(frozen=True)
class ArchiveCandidate:
    """Reduced projection of a stale card"""

    card_id: str
    issue_id: Optional[str] = None


@dataclass
class CollectionResult:
    """Cards collected from the column, or the error that stopped collection.

    A failed collection carries no cards, so callers that only look at
    `cards` keep the lenient "nothing to archive" behavior.
    """

    cards: List[ProjectCard] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class ArchiveOutcome:
    """Result of the archive and close mutations for one candidate"""

    candidate: ArchiveCandidate
    archived: bool = False
    issue_closed: bool = False
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunSummary:
    """Totals for one archiving run"""

    fetched: int = 0
    outcomes: List[ArchiveOutcome] = field(default_factory=list)
    collection_error: Optional[Exception] = None
    dry_run: bool = False

    @property
    def candidates(self) -> int:
        return len(self.outcomes)

    @property
    def archived(self) -> int:
        return sum(1 for o in self.outcomes if o.archived)

    @property
    def issues_closed(self) -> int:
        return sum(1 for o in self.outcomes if o.issue_closed)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.failed)
