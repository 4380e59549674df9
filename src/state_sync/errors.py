"""Exception types raised by the state-sync primitives."""

from __future__ import annotations


class StateSyncError(Exception):
    """Base class for all state-sync errors."""


class InvalidRevisionText(StateSyncError, ValueError):
    """Raised when text cannot be converted into a typed Revision.

    The text is empty, contains anything other than ASCII decimal digits, or
    encodes a magnitude larger than the maximum revision.
    """

    def __init__(self, text: object) -> None:
        self.text = text
        super().__init__(f"invalid revision text: {text!r}")


class ProtocolError(StateSyncError):
    """Raised when a collaborator hands the sync engine a malformed message."""
