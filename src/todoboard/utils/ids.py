"""Document id generation."""

import uuid

PROVISIONAL_PREFIX = "tmp-"


def new_id() -> str:
    """Generate a durable document id (20 hex characters)."""
    return uuid.uuid4().hex[:20]


def provisional_id() -> str:
    """Generate a local placeholder id used until the store assigns one."""
    return f"{PROVISIONAL_PREFIX}{uuid.uuid4().hex[:12]}"


def is_provisional(item_id: str) -> bool:
    """Check whether an id is a local placeholder."""
    return item_id.startswith(PROVISIONAL_PREFIX)
