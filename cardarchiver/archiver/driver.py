# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Archive-and-close driver.

Each candidate gets two sequential mutations: archive the card, then (only
when the card links an issue) comment on and close the issue. Candidates run
concurrently and independently: one candidate's failure is logged and
recorded in its outcome, never raised to its siblings. There is no rollback,
so a card whose close step failed stays archived with its issue open.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

import bittensor as bt

from cardarchiver.classes import ArchiveCandidate, ArchiveOutcome
from cardarchiver.utils.github_api_tools import GitHubGraphQLClient, archive_card, close_issue_with_comment
from cardarchiver.utils.logging import log_card_event


async def process_candidate(
    client: GitHubGraphQLClient,
    candidate: ArchiveCandidate,
    closing_message: str,
    dry_run: bool = False,
    events_logger: Optional[logging.Logger] = None,
) -> ArchiveOutcome:
    """Archive one card and close its linked issue. Never raises."""
    outcome = ArchiveOutcome(candidate=candidate)

    if dry_run:
        issue_note = f" and close issue {candidate.issue_id}" if candidate.issue_id else ""
        bt.logging.info(f"[DRY RUN] Would archive card {candidate.card_id}{issue_note}")
        log_card_event(events_logger, outcome, dry_run=True)
        return outcome

    try:
        await archive_card(client, candidate.card_id)
        outcome.archived = True
        bt.logging.info(f"Archived card {candidate.card_id}")

        if candidate.issue_id:
            await close_issue_with_comment(client, candidate.issue_id, closing_message)
            outcome.issue_closed = True
            bt.logging.info(f"Closed issue {candidate.issue_id} linked to card {candidate.card_id}")
    except Exception as e:
        outcome.error = e
        stage = "closing issue for" if outcome.archived else "archiving"
        bt.logging.error(f"Error {stage} card {candidate.card_id}: {e}")

    log_card_event(events_logger, outcome)
    return outcome


async def archive_candidates(
    client: GitHubGraphQLClient,
    candidates: Sequence[ArchiveCandidate],
    closing_message: str,
    dry_run: bool = False,
    events_logger: Optional[logging.Logger] = None,
) -> List[ArchiveOutcome]:
    """
    Dispatch every candidate concurrently and wait for all of them to settle.

    Returns:
        List[ArchiveOutcome]: one outcome per candidate, in candidate order
    """
    if not candidates:
        return []

    tasks = [
        asyncio.ensure_future(process_candidate(client, candidate, closing_message, dry_run, events_logger))
        for candidate in candidates
    ]
    results = await asyncio.gather(*tasks, return_exceptions=True)

    outcomes = []
    for candidate, result in zip(candidates, results):
        if isinstance(result, BaseException):
            bt.logging.error(f"Unexpected error processing card {candidate.card_id}: {result}")
            result = ArchiveOutcome(candidate=candidate, error=result)
        outcomes.append(result)

    failed = sum(1 for outcome in outcomes if outcome.failed)
    if failed:
        bt.logging.warning(f"{failed} of {len(outcomes)} cards failed to archive or close")
    return outcomes
