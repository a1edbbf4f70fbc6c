"""Identifier checks shared by the store, the API and the CLI."""

import re

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_valid_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.match(value))


def normalize_id(value: str) -> str:
    """Canonical (lower-case) form of a UUID string.

    Ids are stored lower-case, so lookups compare case-insensitively once
    both sides are normalized.
    """
    return value.strip().lower()
