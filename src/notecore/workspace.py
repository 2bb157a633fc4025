"""Workspace: the application root that owns the tag index.

One workspace exists per open vault.  It builds the tag index when opened,
keeps it in step with every save and delete that goes through it, and clears
it on close::

    ws = Workspace(store, load_settings(path))
    await ws.open()
    autosave = ws.autosave_for("notes/todo.md", editor.get_text)
    ...
    await autosave.force_save()
    ws.close()
"""

from __future__ import annotations

import logging
from typing import Callable

from notecore.autosave import AutoSaveCoordinator
from notecore.config import Settings
from notecore.store import NoteStore
from notecore.tags import TagIndex, collect_note_tags

logger = logging.getLogger(__name__)


class Workspace:
    def __init__(self, store: NoteStore, settings: Settings | None = None) -> None:
        self.store = store
        self.settings = settings or Settings()
        self.tags = TagIndex(self.settings.tag_colors)
        self._autosaves: dict[str, AutoSaveCoordinator] = {}
        self._closed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """(Re-)build the tag index from every note in the store."""
        self._closed = False
        self.tags.clear()
        paths = await self.store.list_notes()
        indexed = 0
        for path in paths:
            try:
                content = await self.store.read_note(path)
            except Exception as exc:  # noqa: BLE001
                # Skip unreadable notes so the rest of the vault still indexes
                logger.warning("Could not read %s for tag indexing: %s", path, exc)
                continue
            self.tags.index_note(path, collect_note_tags(content))
            indexed += 1
        logger.info("Indexed tags for %d of %d notes", indexed, len(paths))

    def close(self) -> None:
        """Stop every autosave and clear the index.  Saves still running do not re-index."""
        self._closed = True
        for autosave in self._autosaves.values():
            autosave.destroy()
        self._autosaves.clear()
        self.tags.clear()

    # ------------------------------------------------------------------
    # Note pipeline
    # ------------------------------------------------------------------

    async def save_note(self, path: str, content: str) -> None:
        """Persist *content* and re-index its tags.  Store errors propagate."""
        await self.store.write_note(path, content)
        if self._closed:
            return
        self.tags.index_note(path, collect_note_tags(content))

    async def delete_note(self, path: str) -> None:
        await self.store.delete_note(path)
        if not self._closed:
            self.tags.remove_note(path)

    def autosave_for(self, path: str, get_content: Callable[[], str]) -> AutoSaveCoordinator:
        """Return a coordinator that saves *path* with the text from *get_content*.

        Any earlier coordinator for *path* is destroyed and replaced.
        """
        self.release(path)

        async def save() -> None:
            await self.save_note(path, get_content())

        autosave = AutoSaveCoordinator(save, delay=self.settings.autosave_delay)
        self._autosaves[path] = autosave
        return autosave

    @property
    def autosave_paths(self) -> list[str]:
        """Paths that currently have an autosave coordinator."""
        return list(self._autosaves)

    def release(self, path: str) -> None:
        """Destroy and forget the coordinator for *path*, if there is one."""
        autosave = self._autosaves.pop(path, None)
        if autosave is not None:
            autosave.destroy()
