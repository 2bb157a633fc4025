"""Note metadata codec, tag index, and autosave coordination."""

from notecore.autosave import AutoSaveCoordinator, AutoSaveState, format_last_saved
from notecore.codec import (
    create_note,
    extract_metadata,
    get_note_title,
    has_header,
    parse_note,
    serialize_note,
    update_metadata,
)
from notecore.config import Settings, load_settings
from notecore.metadata import KanbanStatus, ParsedNote
from notecore.store import NoteStore
from notecore.tags import TagIndex, TagRecord, collect_note_tags, extract_tags
from notecore.workspace import Workspace

__all__ = [
    "AutoSaveCoordinator",
    "AutoSaveState",
    "format_last_saved",
    "create_note",
    "extract_metadata",
    "get_note_title",
    "has_header",
    "parse_note",
    "serialize_note",
    "update_metadata",
    "Settings",
    "load_settings",
    "KanbanStatus",
    "ParsedNote",
    "NoteStore",
    "TagIndex",
    "TagRecord",
    "collect_note_tags",
    "extract_tags",
    "Workspace",
]
