"""Scalar type classification of literal XML text.

``classify`` looks at one literal value; ``merge`` combines what has been
seen so far with a new observation. The merge is conservative: as soon as
two observations disagree, or any observation is a plain string, the result
is ``STRING`` and it never narrows again. Because the rule only depends on
the *set* of observed classifications, the final type does not depend on
the order in which occurrences are encountered.

Example:
    >>> classify("42")
    <ScalarType.INTEGER: 'integer'>
    >>> merge(ScalarType.INTEGER, classify("hi"))
    <ScalarType.STRING: 'string'>
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional


class ScalarType(str, Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    DECIMAL = "decimal"
    STRING = "string"


# Only the lowercase XML Schema literals count as booleans; "True", "1" and
# "0" are left to the other tests.
_BOOLEAN_RE = re.compile(r"(?:true|false)")
# ASCII only: other Unicode digits are not numbers to Go or Java parsers.
_INTEGER_RE = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.\d*|\.\d+|\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def classify(text: Optional[str]) -> ScalarType:
    """Classify a literal value, checking boolean, integer, then decimal.

    Surrounding whitespace is ignored; empty or whitespace-only text is a
    string.
    """
    if text is None:
        return ScalarType.STRING
    value = text.strip()
    if not value:
        return ScalarType.STRING
    if _BOOLEAN_RE.fullmatch(value):
        return ScalarType.BOOLEAN
    if _INTEGER_RE.fullmatch(value):
        return ScalarType.INTEGER
    if _DECIMAL_RE.fullmatch(value):
        return ScalarType.DECIMAL
    return ScalarType.STRING


def merge(current: Optional[ScalarType], observed: ScalarType) -> ScalarType:
    """Combine the running type of an identity with a new observation."""
    if current is None:
        return observed
    if current is observed:
        return current
    return ScalarType.STRING

