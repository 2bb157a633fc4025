"""YAML header codec: split a note's text into metadata and body, and back.

A header block starts at offset 0 with a ``---`` line and ends at the next
``---`` line::

    ---
    title: "My Note"
    labels:
    - project
    ---
    Body text.

Parsing never raises.  Text without a complete header, or whose header is
not a YAML mapping, comes back with ``metadata=None`` and the whole input as
the body.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any

import yaml

from notecore.metadata import Metadata, ParsedNote, is_empty_value

logger = logging.getLogger(__name__)

# Opening marker, optional YAML payload, closing marker.  The payload group is
# lazy-optional so ``---\n---`` matches as an empty header.
_HEADER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)??---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)
_HEADING_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _HeaderLoader(yaml.SafeLoader):
    """SafeLoader that leaves date-like scalars as strings."""


_HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# YAML line breaks that plain and single-quoted scalars fold away.
_UNICODE_BREAKS = ("\x85", "\u2028", "\u2029")


class _HeaderDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes strings holding unicode line breaks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    style = '"' if any(ch in data for ch in _UNICODE_BREAKS) else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_HeaderDumper.add_representer(str, _represent_str)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _load_header(payload: str | None) -> Metadata:
    """Load a header payload; raise ``yaml.YAMLError`` if it is not a mapping."""
    if not payload:
        return {}
    data = yaml.load(payload, Loader=_HeaderLoader)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"header is a {type(data).__name__}, not a mapping")
    return data


def _dump_header(meta: Metadata) -> str:
    return yaml.dump(
        meta,
        Dumper=_HeaderDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
        width=float("inf"),
    ).rstrip("\n")


# ---------------------------------------------------------------------------
# Parse
# ---------------------------------------------------------------------------


def parse_note(content: str) -> ParsedNote:
    """Split *content* into ``(metadata, body)``.

    The body is everything after the closing marker with one line break
    removed.  A malformed header is logged and treated as no header.
    """
    match = _HEADER_RE.match(content)
    if not match:
        return ParsedNote(metadata=None, body=content, raw=content)
    try:
        meta = _load_header(match.group(1))
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed note header: %s", exc)
        return ParsedNote(metadata=None, body=content, raw=content)
    return ParsedNote(metadata=meta, body=content[match.end() :], raw=content)


def extract_metadata(content: str) -> Metadata | None:
    """Return only the header metadata of *content*, or ``None``."""
    match = _HEADER_RE.match(content)
    if not match:
        return None
    try:
        return _load_header(match.group(1))
    except yaml.YAMLError as exc:
        logger.warning("Ignoring malformed note header: %s", exc)
        return None


def has_header(content: str) -> bool:
    return _HEADER_RE.match(content) is not None


# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------


def serialize_note(metadata: Metadata | None, body: str) -> str:
    """Render *metadata* as a header block followed by *body*.

    Keys holding ``None``, ``""`` or ``[]`` are dropped; if nothing is left
    the body is returned unchanged.  Keys are written in the mapping's own
    order.
    """
    if not metadata:
        return body
    clean = {k: v for k, v in metadata.items() if not is_empty_value(v)}
    if not clean:
        return body
    header = f"---\n{_dump_header(clean)}\n---"
    return f"{header}\n{body}" if body else header


def update_metadata(content: str, updates: dict[str, Any]) -> str:
    """Merge *updates* into the header of *content* and stamp ``modified``.

    A key updated to ``None`` or ``""`` is removed from the header.
    """
    parsed = parse_note(content)
    meta: Metadata = {**(parsed.metadata or {}), **updates, "modified": _now()}
    return serialize_note(meta, parsed.body)


def create_note(
    title: str,
    body: str = "",
    initial_metadata: dict[str, Any] | None = None,
) -> str:
    """Return the text of a new note titled *title*.

    Without a *body*, the note starts with a ``# title`` heading.
    """
    now = _now()
    meta: Metadata = {
        "title": title,
        "labels": [],
        "created": now,
        "modified": now,
        **(initial_metadata or {}),
    }
    return serialize_note(meta, body or f"\n# {title}\n\n")


def get_note_title(content: str, file_name: str) -> str:
    """Header title, else first ``#`` heading, else *file_name* minus ``.md``."""
    parsed = parse_note(content)
    title = (parsed.metadata or {}).get("title")
    if title:
        return str(title)
    heading = _HEADING_RE.search(parsed.body)
    if heading:
        return heading.group(1).strip()
    return re.sub(r"\.md$", "", file_name, flags=re.IGNORECASE)
