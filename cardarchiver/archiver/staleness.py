# The MIT License (MIT)
# Copyright © 2025 Entrius

from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from cardarchiver.classes import ArchiveCandidate, ProjectCard


def compute_cutoff(days_old: int, now: Optional[datetime] = None) -> datetime:
    """Return the instant `days_old` whole days before `now` (defaults to the current UTC time)."""
    if now is None:
        now = datetime.now(timezone.utc)
    return now - timedelta(days=days_old)


def is_stale(card: ProjectCard, cutoff: datetime) -> bool:
    """A card is stale only if it was last updated strictly before the cutoff."""
    return card.updated_at < cutoff


def select_stale(cards: Iterable[ProjectCard], cutoff: datetime) -> List[ArchiveCandidate]:
    """Reduce cards to archive candidates, keeping API order."""
    return [
        ArchiveCandidate(card_id=card.id, issue_id=card.issue.id if card.issue else None)
        for card in cards
        if is_stale(card, cutoff)
    ]
