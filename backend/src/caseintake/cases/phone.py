"""Phone number canonicalization for history lookups.

Stored phone numbers keep whatever formatting they arrived with; they are
normalized again on every comparison.
"""

import re

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement

from ..errors import ValidationError

_NON_DIGITS = re.compile(r"\D")

# Separators stripped from the stored column at query time
STORED_SEPARATORS = ("-", " ", "(", ")", "+")


def normalize_phone(value: str | None) -> str:
    """Strip every non-digit character from a phone string."""
    if not value:
        return ""
    return _NON_DIGITS.sub("", str(value))


def phones_match(a: str | None, b: str | None) -> bool:
    """True when both phones have the same, non-empty digit-only form."""
    left = normalize_phone(a)
    return bool(left) and left == normalize_phone(b)


def require_phone_query(value: str | None) -> str:
    """Normalize a lookup phone, rejecting one with no digits.

    Raises:
        ValidationError: If the normalized phone is empty
    """
    normalized = normalize_phone(value)
    if not normalized:
        raise ValidationError("phone query parameter is required", field="phone")
    return normalized


def normalized_phone_column(column: ColumnElement) -> ColumnElement:
    """SQL expression stripping the common separators from a phone column."""
    expr = column
    for separator in STORED_SEPARATORS:
        expr = func.replace(expr, separator, "")
    return expr
