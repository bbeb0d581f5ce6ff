"""Cadastral account identifier normalization."""

import re
from typing import Optional

DEFAULT_PREFIX = "U"
EMPTY_ACCOUNT = "U0"

_HYPHENATED = re.compile(r"^([RSU])-([0-9]+)$", re.IGNORECASE)
_DIGITS_ONLY = re.compile(r"^[0-9]+$")
_CANONICAL = re.compile(r"^[RSU][0-9]+$", re.IGNORECASE)


def normalize_account(raw: Optional[str]) -> str:
    """Normalize a free-text cadastral account into its canonical form.

    Handles the shapes found in point-of-sale form answers:
    - "U-345" / "r-12" -> "U345" / "R12"
    - "345"            -> "U345"
    - "s99"            -> "S99"
    - "" or blank      -> "U0"

    Anything else is kept as typed (trimmed) behind the default "U" prefix,
    so "abc" becomes "Uabc". Never raises and never returns an empty string.

    Args:
        raw: Account identifier as captured in the form answer

    Returns:
        Canonical account identifier
    """
    if raw is None or not raw.strip():
        return EMPTY_ACCOUNT

    value = raw.strip()

    match = _HYPHENATED.match(value)
    if match:
        return f"{match.group(1).upper()}{match.group(2)}"

    if _DIGITS_ONLY.match(value):
        return f"{DEFAULT_PREFIX}{value}"

    if _CANONICAL.match(value):
        return value.upper()

    return f"{DEFAULT_PREFIX}{value}"
