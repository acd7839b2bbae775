# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Run configuration for the stale card archiver.

Inputs are named the way the GitHub Action declares them (`column-to-archive`,
`days-old`, ...). Each input is resolved once at start-up, in this order:

1) An explicit value (CLI option)
2) $INPUT_<NAME>, the variable GitHub Actions sets for `with:` inputs
   (e.g. INPUT_COLUMN-TO-ARCHIVE), or its underscore form
   (INPUT_COLUMN_TO_ARCHIVE), which is easier to set from a shell or `.env`
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

import bittensor as bt
from dotenv import load_dotenv

from cardarchiver.constants import (
    DEFAULT_CLOSING_MESSAGE,
    GRAPHQL_TIMEOUT_SECONDS,
    INPUT_ACCESS_TOKEN,
    INPUT_CLOSING_MESSAGE,
    INPUT_COLUMN_TO_ARCHIVE,
    INPUT_DAYS_OLD,
    INPUT_PROJECT_NAME,
    INPUT_REPOSITORY,
    INPUT_REPOSITORY_OWNER,
    REQUIRED_INPUTS,
)
from cardarchiver.errors import ConfigurationError
from cardarchiver.utils.utils import mask_secret

ALL_INPUTS = REQUIRED_INPUTS + (INPUT_CLOSING_MESSAGE,)


@dataclass(frozen=True)
class ArchiverConfig:
    """Everything one run needs, built once and passed to each component."""

    access_token: str = field(repr=False)
    column_to_archive: str
    repository_owner: str
    repository: str
    project_name: str
    days_old: int
    closing_message: str = DEFAULT_CLOSING_MESSAGE
    timeout: float = GRAPHQL_TIMEOUT_SECONDS
    dry_run: bool = False
    strict: bool = False

    @property
    def repository_full_name(self) -> str:
        return f"{self.repository_owner}/{self.repository}"


def get_input(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Read an action-style input from the environment. Missing inputs read as ''."""
    environ = os.environ if environ is None else environ
    key = f"INPUT_{name.upper()}"
    for candidate in (key, key.replace('-', '_')):
        value = environ.get(candidate)
        if value is not None and value.strip():
            return value.strip()
    return ''


def parse_days_old(raw: str) -> int:
    """Parse the days-old input. Only plain ASCII digit strings are accepted."""
    value = str(raw).strip()
    if value.startswith('-') and value[1:].isascii() and value[1:].isdigit():
        raise ConfigurationError(f"Input '{INPUT_DAYS_OLD}' cannot be negative (got {value})")
    if not (value.isascii() and value.isdigit()):
        raise ConfigurationError(f"Input '{INPUT_DAYS_OLD}' must be a whole number of days (got {raw!r})")
    return int(value)


def build_config(
    inputs: Mapping[str, Optional[str]],
    timeout: float = GRAPHQL_TIMEOUT_SECONDS,
    dry_run: bool = False,
    strict: bool = False,
) -> ArchiverConfig:
    """
    Validate raw string inputs and build the run configuration.

    Args:
        inputs: Input name -> raw value; blank or missing values count as absent
        timeout: Per-request timeout in seconds
        dry_run: Log what would be archived without issuing mutations
        strict: Treat a failed card collection as a fatal run failure

    Raises:
        ConfigurationError: a required input is missing, or a value is malformed
    """
    values = {name: (inputs.get(name) or '').strip() for name in ALL_INPUTS}

    missing = [name for name in REQUIRED_INPUTS if not values[name]]
    if missing:
        raise ConfigurationError(f"Input required and not supplied: {', '.join(missing)}")

    if timeout is None or timeout <= 0:
        raise ConfigurationError(f"Request timeout must be positive (got {timeout})")

    return ArchiverConfig(
        access_token=values[INPUT_ACCESS_TOKEN],
        column_to_archive=values[INPUT_COLUMN_TO_ARCHIVE],
        repository_owner=values[INPUT_REPOSITORY_OWNER],
        repository=values[INPUT_REPOSITORY],
        project_name=values[INPUT_PROJECT_NAME],
        days_old=parse_days_old(values[INPUT_DAYS_OLD]),
        closing_message=values[INPUT_CLOSING_MESSAGE] or DEFAULT_CLOSING_MESSAGE,
        timeout=timeout,
        dry_run=dry_run,
        strict=strict,
    )


def load_config(
    overrides: Optional[Mapping[str, Optional[str]]] = None,
    environ: Optional[Mapping[str, str]] = None,
    dotenv_path: Optional[str] = None,
    **options,
) -> ArchiverConfig:
    """Resolve every input from `overrides` and the environment, then build the config."""
    if environ is None:
        load_dotenv(dotenv_path)
    overrides = overrides or {}

    inputs = {}
    for name in ALL_INPUTS:
        value = overrides.get(name)
        inputs[name] = value if value is not None else get_input(name, environ)

    config = build_config(inputs, **options)
    log_config(config)
    return config


def log_config(config: ArchiverConfig) -> None:
    bt.logging.info(f"ACCESS_TOKEN: {mask_secret(config.access_token)}")
    bt.logging.info(f"REPOSITORY: {config.repository_full_name}")
    bt.logging.info(f"PROJECT_NAME: {config.project_name}")
    bt.logging.info(f"COLUMN_TO_ARCHIVE: {config.column_to_archive}")
    bt.logging.info(f"DAYS_OLD: {config.days_old}")
    bt.logging.info(f"REQUEST_TIMEOUT: {config.timeout}s")
