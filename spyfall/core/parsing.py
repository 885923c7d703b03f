"""
Extraction of "KEY: value" fields from free-text agent replies.
"""

import re


def parse_field(key: str, text: str) -> str:
    """
    Extract the value of a `KEY: value` line from free text.

    The key is matched case-insensitively anywhere in the text and the rest of
    that line after the colon is returned, trimmed.

    Args:
        key: Field name, e.g. "TARGET", "VOTE", "GUESS"
        text: Raw reply to search

    Returns:
        The trimmed value, or an empty string if the field is absent

    Example:
        >>> parse_field("TARGET", "I've decided.\\nTARGET: Agent1\\nQUESTION: Where are we?")
        'Agent1'
    """
    if not text:
        return ""
    match = re.search(rf"{re.escape(key)}:\s*(.*)", text, re.IGNORECASE)
    return match.group(1).strip() if match else ""
