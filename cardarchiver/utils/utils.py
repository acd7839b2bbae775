"""
Card Archiver Utilities
"""

import hashlib
from datetime import datetime, timezone


def mask_secret(secret: str, length: int = 5) -> str:
    """Return a short SHA-256 hash of a secret for logging."""
    h = hashlib.sha256(str(secret).encode("utf-8")).hexdigest()
    return f"<masked:{h[:length]}>"


def parse_github_timestamp(timestamp: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp (e.g. 2024-01-15T10:30:00Z) into an aware UTC datetime."""
    parsed = datetime.fromisoformat(timestamp.rstrip("Z"))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
