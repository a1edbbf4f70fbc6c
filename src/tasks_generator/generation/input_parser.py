"""Input parsing for backlog generation.

Normalizes the free-text "users" field into role tokens and splits the
goal into an action verb and an outcome phrase.
"""

import re
from dataclasses import dataclass, field


# Verb used when the goal has no words at all
DEFAULT_VERB = "accomplish"

# Roles are separated by commas, semicolons or the whole word "and"
ROLE_SEPARATOR = re.compile(r"[,;]|\band\b", re.IGNORECASE)


@dataclass
class ParsedInput:
    """Result of parsing the users and goal fields."""

    roles: list[str] = field(default_factory=list)
    verb: str = DEFAULT_VERB
    outcome: str = ""


def parse_roles(users_text: str) -> list[str]:
    """Split a users string into lower-cased role tokens.

    Order of first appearance is kept. Duplicates are kept as well, so
    "admins, admins" yields two roles.

    Args:
        users_text: Raw users field, e.g. "students, teachers and admins".

    Returns:
        List of role tokens (empty for empty input).
    """
    tokens = (token.strip().lower() for token in ROLE_SEPARATOR.split(users_text))
    return [token for token in tokens if token]


def parse_goal(goal_text: str) -> tuple[str, str]:
    """Split a goal into (verb, outcome).

    Args:
        goal_text: Raw goal field, e.g. "Track student attendance".

    Returns:
        Tuple of the lower-cased first word and the remaining words. The
        outcome falls back to the raw goal when there is only one word.
    """
    words = goal_text.split()
    verb = words[0].lower() if words else DEFAULT_VERB
    outcome = " ".join(words[1:]) or goal_text
    return verb, outcome


def parse_input(users_text: str, goal_text: str) -> ParsedInput:
    """Parse both free-text fields into a ParsedInput."""
    verb, outcome = parse_goal(goal_text)
    return ParsedInput(roles=parse_roles(users_text), verb=verb, outcome=outcome)
