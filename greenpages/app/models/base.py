"""
Shared column helpers for finance models.
"""

import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """Generate a primary key for a new row."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
