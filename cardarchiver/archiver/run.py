# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
One archiving run: collect the column's cards, select the stale ones, then
archive them and close their issues.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

import bittensor as bt

from cardarchiver.archiver.collector import collect_cards, describe_card
from cardarchiver.archiver.driver import archive_candidates
from cardarchiver.archiver.staleness import compute_cutoff, select_stale
from cardarchiver.classes import RunSummary
from cardarchiver.config import ArchiverConfig
from cardarchiver.utils.github_api_tools import GitHubGraphQLClient
from cardarchiver.utils.logging import log_run_summary


async def archive_stale_cards(
    config: ArchiverConfig,
    client: Optional[GitHubGraphQLClient] = None,
    now: Optional[datetime] = None,
    events_logger: Optional[logging.Logger] = None,
) -> RunSummary:
    """
    Run the archiver once.

    Args:
        config: Run configuration
        client: GraphQL client to use; a new one (with its own session) is opened when omitted
        now: Reference time for the staleness cutoff, defaults to the current UTC time
        events_logger: Optional per-card events logger

    Returns:
        RunSummary: totals and per-candidate outcomes

    Raises:
        Exception: only when `config.strict` is set and card collection failed
    """
    if client is None:
        async with GitHubGraphQLClient(config.access_token, timeout=config.timeout) as client:
            return await _run(config, client, now, events_logger)
    return await _run(config, client, now, events_logger)


async def _run(
    config: ArchiverConfig,
    client: GitHubGraphQLClient,
    now: Optional[datetime],
    events_logger: Optional[logging.Logger],
) -> RunSummary:
    cutoff = compute_cutoff(config.days_old, now)
    bt.logging.info(
        f"Archiving all cards that have been untouched for {config.days_old} days "
        f"from column {config.column_to_archive} (cutoff {cutoff.isoformat()})"
    )

    collection = await collect_cards(client, config)
    if not collection.ok and config.strict:
        raise collection.error

    for card in collection.cards:
        bt.logging.debug(f"Project card: {describe_card(card)}")

    candidates = select_stale(collection.cards, cutoff)
    bt.logging.info(f"Archiving {len(candidates)} cards")

    outcomes = await archive_candidates(
        client,
        candidates,
        config.closing_message,
        dry_run=config.dry_run,
        events_logger=events_logger,
    )

    summary = RunSummary(
        fetched=len(collection.cards),
        outcomes=outcomes,
        collection_error=collection.error,
        dry_run=config.dry_run,
    )
    log_run_summary(summary)
    return summary


def run(config: ArchiverConfig, events_logger: Optional[logging.Logger] = None) -> RunSummary:
    """Synchronous entry point: run the archiver on a fresh event loop."""
    return asyncio.run(archive_stale_cards(config, events_logger=events_logger))
