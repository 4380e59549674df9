"""Revision counter and the canonical ordering of revision text."""

from __future__ import annotations

import re
from enum import IntEnum
from functools import cmp_to_key
from typing import Annotated

from pydantic import AfterValidator, ConfigDict, Field, RootModel, StrictStr

from state_sync.errors import InvalidRevisionText

MAX_REVISION = 2**64 - 1
ZERO_REVISION = "0"

_MAX_REVISION_TEXT = str(MAX_REVISION)
_DIGITS_RE = re.compile(r"[0-9]+")
_CANONICAL_RE = re.compile(r"0|[1-9][0-9]*")


def _check_magnitude(value: int) -> int:
    if value > MAX_REVISION:
        raise ValueError(f"revision exceeds {MAX_REVISION}")
    return value


RevisionMagnitude = Annotated[
    int, Field(ge=0, strict=True), AfterValidator(_check_magnitude)
]


class RevisionOrder(IntEnum):
    """Result of comparing two revisions, usable as a ``cmp``-style integer."""

    LESS = -1
    EQUAL = 0
    GREATER = 1


def compare_revisions(a: str, b: str) -> RevisionOrder:
    """Compare two revision strings using the canonical decimal ordering.

    Longer strings denote larger numbers (no leading zeros assumed); strings
    of equal length compare digit by digit. The input is not validated and
    is never parsed, so revisions wider than 64 bits still order correctly.
    """
    if len(a) != len(b):
        return RevisionOrder.LESS if len(a) < len(b) else RevisionOrder.GREATER
    if a == b:
        return RevisionOrder.EQUAL
    return RevisionOrder.LESS if a < b else RevisionOrder.GREATER


revision_key = cmp_to_key(compare_revisions)


def is_canonical_revision(value: object) -> bool:
    """Return True when ``value`` is the canonical decimal text of a Revision."""
    if not isinstance(value, str) or not _CANONICAL_RE.fullmatch(value):
        return False
    if len(value) != len(_MAX_REVISION_TEXT):
        return len(value) < len(_MAX_REVISION_TEXT)
    return value <= _MAX_REVISION_TEXT


def _check_canonical(value: str) -> str:
    if not is_canonical_revision(value):
        raise InvalidRevisionText(value)
    return value


# Revision text as carried inside envelopes and events.
RevisionText = Annotated[StrictStr, AfterValidator(_check_canonical)]


class Revision(RootModel[RevisionMagnitude]):
    """A monotonic state version backed by an unsigned 64-bit magnitude.

    Revisions only move forward: ``next()`` saturates at ``MAX_REVISION``
    instead of wrapping to zero.
    """

    model_config = ConfigDict(frozen=True)

    root: RevisionMagnitude = 0

    @classmethod
    def parse(cls, text: str) -> Revision:
        """Build a Revision from decimal text.

        Raises ``InvalidRevisionText`` for empty or non-digit text and for
        magnitudes above ``MAX_REVISION``; bad input is never clamped.
        """
        if not isinstance(text, str) or not _DIGITS_RE.fullmatch(text):
            raise InvalidRevisionText(text)
        digits = text.lstrip("0") or "0"
        if len(digits) > len(_MAX_REVISION_TEXT) or int(digits) > MAX_REVISION:
            raise InvalidRevisionText(text)
        return cls(int(digits))

    @property
    def value(self) -> int:
        """Return the raw magnitude."""
        return self.root

    def next(self) -> Revision:
        """Return the following revision, saturating at ``MAX_REVISION``."""
        return type(self)(min(self.root + 1, MAX_REVISION))

    def __str__(self) -> str:
        return str(self.root)

    def __int__(self) -> int:
        return self.root

    def __hash__(self) -> int:
        return hash(self.root)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.root < other.root

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.root <= other.root

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.root > other.root

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Revision):
            return NotImplemented
        return self.root >= other.root
