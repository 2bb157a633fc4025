"""Hashtag extraction and the in-memory tag index."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from notecore.codec import parse_note

logger = logging.getLogger(__name__)

# ``#tag`` at line start or after whitespace; must start with a letter.
_TAG_RE = re.compile(r"(?:^|(?<=\s))#([A-Za-z][A-Za-z0-9_-]*)")
# Fenced code block delimiters
_FENCE_RE = re.compile(r"^\s*(```|~~~)")

TAG_COLORS: dict[str, str] = {
    "important": "red",
    "todo": "yellow",
    "done": "green",
    "idea": "purple",
    "question": "blue",
    "bug": "orange",
    "feature": "cyan",
    "docs": "indigo",
}
DEFAULT_TAG_COLOR = "gray"

Listener = Callable[[], None]


def normalize_tag(tag: str) -> str:
    return tag.strip().lower()


def tag_color(tag: str, colors: Mapping[str, str] = TAG_COLORS) -> str:
    return colors.get(normalize_tag(tag), DEFAULT_TAG_COLOR)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def extract_tags(body: str) -> list[str]:
    """Return the distinct ``#tags`` in *body*, first-seen casing, in order.

    Lines inside fenced code blocks are skipped.
    """
    seen: set[str] = set()
    result: list[str] = []
    in_code_block = False
    for line in body.splitlines():
        if _FENCE_RE.match(line):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        for m in _TAG_RE.finditer(line):
            tag = m.group(1)
            if tag not in seen:
                seen.add(tag)
                result.append(tag)
    return result


def collect_note_tags(content: str) -> list[str]:
    """Header ``labels`` followed by body hashtags, de-duplicated case-insensitively."""
    parsed = parse_note(content)
    labels = (parsed.metadata or {}).get("labels") or []
    if isinstance(labels, str):
        labels = [t.strip() for t in labels.split(",") if t.strip()]
    seen: set[str] = set()
    result: list[str] = []
    for tag in [str(t) for t in labels] + extract_tags(parsed.body):
        key = normalize_tag(tag)
        if key and key not in seen:
            seen.add(key)
            result.append(tag)
    return result


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TagRecord:
    name: str
    paths: frozenset[str]
    color: str

    @property
    def count(self) -> int:
        return len(self.paths)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "count": self.count, "color": self.color}


class TagIndex:
    """Inverted index from normalised tag name to the note paths carrying it.

    Every mutating call notifies subscribers exactly once, after the
    mutation is complete.  Writes for one path must not overlap; the index
    does no locking of its own.
    """

    def __init__(self, colors: Mapping[str, str] | None = None) -> None:
        self.colors: dict[str, str] = {**TAG_COLORS, **(colors or {})}
        self._tags: dict[str, set[str]] = {}
        self._listeners: list[Listener] = []

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def index_note(self, path: str, tags: Iterable[str]) -> None:
        """Replace the tag set recorded for *path* with *tags*."""
        self._discard(path)
        for tag in tags:
            name = normalize_tag(tag)
            if name:
                self._tags.setdefault(name, set()).add(path)
        logger.debug("Indexed %s", path)
        self._notify()

    def remove_note(self, path: str) -> None:
        self._discard(path)
        logger.debug("Removed %s from tag index", path)
        self._notify()

    def clear(self) -> None:
        self._tags.clear()
        self._notify()

    def _discard(self, path: str) -> None:
        for name in list(self._tags):
            paths = self._tags[name]
            paths.discard(path)
            if not paths:
                del self._tags[name]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_all_tags(self) -> list[TagRecord]:
        """All tags, most used first."""
        records = [
            TagRecord(name, frozenset(paths), tag_color(name, self.colors))
            for name, paths in self._tags.items()
        ]
        return sorted(records, key=lambda r: r.count, reverse=True)

    def get_notes_with_tag(self, tag: str) -> list[str]:
        return list(self._tags.get(normalize_tag(tag), ()))

    def search_tags(self, query: str) -> list[TagRecord]:
        q = normalize_tag(query)
        return [r for r in self.get_all_tags() if q in r.name]

    def get_popular_tags(self, limit: int = 10) -> list[TagRecord]:
        return self.get_all_tags()[:limit]

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and normalize_tag(tag) in self._tags

    def __len__(self) -> int:
        return len(self._tags)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* after every mutation; return a function that stops it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
