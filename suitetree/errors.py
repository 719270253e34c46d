"""Exceptions raised or collected by the suite tree model."""

from __future__ import annotations

from typing import Any


class MalformedRecordError(ValueError):
    """A backend record that could not be turned into a tree node.

    Ingestion never raises this; it is appended to a caller supplied list
    when strict collection is requested.
    """

    def __init__(self, reason: str, record: Any = None, parent_path: str | None = None):
        self.reason = reason
        self.record = record
        self.parent_path = parent_path
        where = f" under {parent_path!r}" if parent_path else ""
        self.message = f"Malformed record{where}: {reason}"
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "reason": self.reason,
            "parent_path": self.parent_path,
            "message": self.message,
        }


__all__ = ["MalformedRecordError"]
