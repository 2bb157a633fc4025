"""Note metadata model: the known-field table and the parsed-note record."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

#: Ordered mapping of header keys to values (``dict`` keeps insertion order).
Metadata = dict[str, Any]


class KanbanStatus(StrEnum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"

    @property
    def label(self) -> str:
        return _KANBAN_LABELS[self]


_KANBAN_LABELS: dict[KanbanStatus, str] = {
    KanbanStatus.TODO: "To Do",
    KanbanStatus.IN_PROGRESS: "In Progress",
    KanbanStatus.REVIEW: "Review",
    KanbanStatus.DONE: "Done",
}


# Well-known header keys and the Python type each is expected to hold.
KNOWN_FIELDS: dict[str, type] = {
    "title": str,
    "labels": list,
    "created": str,
    "modified": str,
    "kanban": str,
    "category": str,
    "pinned": bool,
    "archived": bool,
}


def is_empty_value(value: Any) -> bool:
    """True for values that are never written to a header."""
    return value is None or value == "" or (isinstance(value, list) and not value)


def known_fields(meta: Metadata) -> Metadata:
    """Return the well-known keys of *meta*, in the order they appear."""
    return {k: v for k, v in meta.items() if k in KNOWN_FIELDS}


def custom_fields(meta: Metadata) -> Metadata:
    """Return every key of *meta* that is not well-known, order preserved."""
    return {k: v for k, v in meta.items() if k not in KNOWN_FIELDS}


def kanban_status(meta: Metadata | None) -> KanbanStatus | None:
    """Return the note's kanban column, or ``None`` if unset or unrecognised."""
    if not meta:
        return None
    try:
        return KanbanStatus(meta.get("kanban"))
    except ValueError:
        return None


@dataclass(frozen=True)
class ParsedNote:
    """Result of splitting a note's text into header metadata and body."""

    #: ``None`` when no header block was recognised.
    metadata: Metadata | None
    body: str
    raw: str

    @property
    def has_metadata(self) -> bool:
        return self.metadata is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "metadata": self.metadata,
            "body": self.body,
            "raw": self.raw,
        }
