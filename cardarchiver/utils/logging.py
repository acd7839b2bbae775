import logging
import os
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Optional

import bittensor as bt

from cardarchiver.constants import EVENTS_LOG_RETENTION_BYTES

if TYPE_CHECKING:
    from cardarchiver.classes import ArchiveOutcome, RunSummary

EVENTS_LEVEL_NUM = 38
DEFAULT_LOG_BACKUP_COUNT = 10
EVENTS_LOGGER_NAME = 'cardarchiver.events'


def setup_events_logger(full_path: str, events_retention_size: int = EVENTS_LOG_RETENTION_BYTES) -> logging.Logger:
    """Create the logger that records one line per archived card in `<full_path>/events.log`."""
    logging.addLevelName(EVENTS_LEVEL_NUM, 'EVENT')

    logger = logging.getLogger(EVENTS_LOGGER_NAME)
    logger.setLevel(EVENTS_LEVEL_NUM)
    logger.propagate = False

    os.makedirs(full_path, exist_ok=True)
    formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )

    file_handler = RotatingFileHandler(
        os.path.join(full_path, 'events.log'),
        maxBytes=events_retention_size,
        backupCount=DEFAULT_LOG_BACKUP_COUNT,
    )
    file_handler.setFormatter(formatter)
    file_handler.setLevel(EVENTS_LEVEL_NUM)
    logger.addHandler(file_handler)

    return logger


def log_card_event(
    events_logger: Optional[logging.Logger], outcome: 'ArchiveOutcome', dry_run: bool = False
) -> None:
    """Write a single outcome to the events log, if one is configured."""
    if events_logger is None:
        return

    candidate = outcome.candidate
    status = 'failed' if outcome.failed else 'ok'
    if dry_run:
        status = 'dry_run'
    message = (
        f'card={candidate.card_id} issue={candidate.issue_id or "-"} '
        f'archived={outcome.archived} issue_closed={outcome.issue_closed} status={status}'
    )
    if outcome.failed:
        message += f' error={outcome.error}'
    events_logger.log(EVENTS_LEVEL_NUM, message)


def log_run_summary(summary: 'RunSummary') -> None:
    """Log the end-of-run totals and every failed candidate."""
    prefix = '[DRY RUN] ' if summary.dry_run else ''

    if summary.collection_error is not None:
        bt.logging.warning(f'{prefix}Card collection failed: {summary.collection_error}')

    bt.logging.info(f'{prefix}Run summary:')
    bt.logging.info(f'  ├─ Cards fetched: {summary.fetched}')
    bt.logging.info(f'  ├─ Stale candidates: {summary.candidates}')
    bt.logging.info(f'  ├─ Archived: {summary.archived} | Issues closed: {summary.issues_closed}')
    bt.logging.info(f'  └─ Failed: {summary.failed}')

    failures = [o for o in summary.outcomes if o.failed]
    if failures:
        bt.logging.warning(f'{prefix}{len(failures)} of {summary.candidates} candidates failed:')
        for outcome in failures:
            stage = 'close' if outcome.archived else 'archive'
            bt.logging.warning(f'  │   {outcome.candidate.card_id} ({stage}): {outcome.error}')
