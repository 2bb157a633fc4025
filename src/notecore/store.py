"""Persistence backend protocol."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class NoteStore(Protocol):
    """Where note text lives.

    Implementations (local vault directory, encrypted vault, ...) must
    satisfy this protocol so the workspace can swap backends without
    changing call sites.  Paths are the notes' stable identifiers.
    """

    async def read_note(self, path: str) -> str:
        """Return the full text of the note at *path*."""
        ...

    async def write_note(self, path: str, content: str) -> None:
        """Create or overwrite the note at *path*."""
        ...

    async def delete_note(self, path: str) -> None:
        """Delete the note at *path*."""
        ...

    async def list_notes(self) -> list[str]:
        """Return the paths of every note in the store."""
        ...
