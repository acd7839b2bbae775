# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Card Archiver CLI - Main entry point

Archives project board cards that have not been touched for a number of days
and closes the issues linked to them. Meant to be run on a schedule (cron,
CI schedule or a GitHub Actions workflow).

Usage:
    cardarchiver --column-to-archive Done --days-old 30 ...
    cardarchiver --dry-run                  - Only log what would be archived

Every option can also be provided as an action input through the environment,
e.g. INPUT_COLUMN-TO-ARCHIVE or INPUT_COLUMN_TO_ARCHIVE (a `.env` file is read too).
"""

import sys
from typing import Optional

import bittensor as bt
import click
from rich.console import Console
from rich.table import Table

from cardarchiver import __version__
from cardarchiver.archiver.run import run
from cardarchiver.classes import RunSummary
from cardarchiver.config import load_config
from cardarchiver.constants import (
    GRAPHQL_TIMEOUT_SECONDS,
    INPUT_ACCESS_TOKEN,
    INPUT_CLOSING_MESSAGE,
    INPUT_COLUMN_TO_ARCHIVE,
    INPUT_DAYS_OLD,
    INPUT_PROJECT_NAME,
    INPUT_REPOSITORY,
    INPUT_REPOSITORY_OWNER,
)
from cardarchiver.utils.github_api_tools import is_token_valid
from cardarchiver.utils.logging import setup_events_logger

console = Console()


def report_failure(message: str) -> None:
    """Record a fatal run failure and exit non-zero.

    The `::error::` line is the GitHub Actions workflow command that marks the
    step as failed with `message`.
    """
    bt.logging.error(message)
    click.echo(f'::error::{message}')
    sys.exit(1)


def print_summary(summary: RunSummary) -> None:
    """Print the end-of-run totals as a table."""
    title = 'Archive Run (dry run)' if summary.dry_run else 'Archive Run'
    table = Table(title=title, show_header=True, header_style='bold magenta')
    table.add_column('Metric', style='cyan')
    table.add_column('Count', style='green', justify='right')

    table.add_row('Cards fetched', str(summary.fetched))
    table.add_row('Stale candidates', str(summary.candidates))
    table.add_row('Cards archived', str(summary.archived))
    table.add_row('Issues closed', str(summary.issues_closed))
    table.add_row('Failures', f'[red]{summary.failed}[/red]' if summary.failed else '0')

    console.print(table)
    if summary.collection_error is not None:
        console.print(f'[yellow]Card collection failed: {summary.collection_error}[/yellow]')


@click.command(name='cardarchiver')
@click.version_option(version=__version__, prog_name='cardarchiver')
@click.option('--access-token', help='GitHub token used as the bearer credential')
@click.option('--column-to-archive', '-c', help='Column to archive cards from (case-insensitive)')
@click.option('--repository-owner', help='Owner (user or organization) of the repository')
@click.option('--repository', help='Repository name')
@click.option('--project-name', help='Project board name')
@click.option('--days-old', help='Archive cards untouched for more than this many days')
@click.option('--closing-message', help='Comment posted on each issue closed with its card')
@click.option(
    '--timeout',
    type=float,
    default=GRAPHQL_TIMEOUT_SECONDS,
    show_default=True,
    help='Timeout in seconds for each GitHub request',
)
@click.option('--dry-run', is_flag=True, help='Log what would be archived without changing anything')
@click.option('--strict', is_flag=True, help='Fail the run when the cards cannot be collected')
@click.option('--check-token', is_flag=True, help='Verify the access token against the GitHub API first')
@click.option('--events-log-dir', type=click.Path(file_okay=False), help='Write one line per card to events.log here')
@click.option('--env-file', type=click.Path(dir_okay=False), help='Read inputs from this .env file')
def cli(
    access_token: Optional[str],
    column_to_archive: Optional[str],
    repository_owner: Optional[str],
    repository: Optional[str],
    project_name: Optional[str],
    days_old: Optional[str],
    closing_message: Optional[str],
    timeout: float,
    dry_run: bool,
    strict: bool,
    check_token: bool,
    events_log_dir: Optional[str],
    env_file: Optional[str],
):
    """Archive stale project board cards and close their linked issues.

    \b
    Examples:
        cardarchiver -c Done --days-old 30 --repository-owner acme \\
            --repository widgets --project-name Roadmap
        cardarchiver --dry-run      # inputs from INPUT_* environment variables
    """
    overrides = {
        INPUT_ACCESS_TOKEN: access_token,
        INPUT_COLUMN_TO_ARCHIVE: column_to_archive,
        INPUT_REPOSITORY_OWNER: repository_owner,
        INPUT_REPOSITORY: repository,
        INPUT_PROJECT_NAME: project_name,
        INPUT_DAYS_OLD: days_old,
        INPUT_CLOSING_MESSAGE: closing_message,
    }

    try:
        config = load_config(overrides, dotenv_path=env_file, timeout=timeout, dry_run=dry_run, strict=strict)

        if check_token and not is_token_valid(config.access_token):
            report_failure('GitHub token is invalid or expired.')

        events_logger = setup_events_logger(events_log_dir) if events_log_dir else None
        summary = run(config, events_logger=events_logger)
    except Exception as e:
        report_failure(str(e))
        return

    print_summary(summary)


def main():
    """Main entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
