"""Debounced, single-flight autosave for the note being edited.

The editor calls :meth:`AutoSaveCoordinator.mark_dirty` on every change.  Once
the edits go quiet for ``delay`` seconds the injected save coroutine runs.
Only one save runs at a time; a failed save keeps the note dirty and records
the error until a later save succeeds.

Must be driven from a running asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Awaitable, Callable

logger = logging.getLogger(__name__)

SaveFunction = Callable[[], Awaitable[None]]

DEFAULT_DELAY = 1.0


@dataclass(frozen=True)
class AutoSaveState:
    dirty: bool = False
    saving: bool = False
    last_saved: float | None = None  # POSIX timestamp
    last_error: str | None = None


class AutoSaveCoordinator:
    def __init__(self, save: SaveFunction, delay: float = DEFAULT_DELAY) -> None:
        self._save = save
        self.delay = delay
        self._state = AutoSaveState()
        # Bumped on every mark_dirty so a save only clears edits it has seen.
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._task: asyncio.Task[None] | None = None
        self._destroyed = False

    # ------------------------------------------------------------------
    # Triggers
    # ------------------------------------------------------------------

    def mark_dirty(self) -> None:
        """Record an edit and restart the debounce timer."""
        self._set(dirty=True)
        self._generation += 1
        if self._destroyed:
            return
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._on_timer)

    def _on_timer(self) -> None:
        self._timer = None
        if self._destroyed or not self._state.dirty or self._state.saving:
            logger.debug("Autosave timer fired with nothing to do")
            return
        self._task = asyncio.get_running_loop().create_task(self.perform_save())

    async def force_save(self) -> None:
        """Save now, skipping the debounce; a no-op while a save is running."""
        await self.perform_save()

    async def perform_save(self) -> None:
        if not self._state.dirty or self._state.saving:
            return
        self._set(saving=True)
        started_at = self._generation
        try:
            await self._save()
        except Exception as exc:
            logger.exception("Autosave failed")
            self._set(last_error=str(exc) or "Failed to save")
        else:
            self._set(
                dirty=self._generation != started_at,
                last_saved=time.time(),
                last_error=None,
            )
        finally:
            self._set(saving=False)

    def destroy(self) -> None:
        """Stop scheduling saves.  A save already running is left to finish."""
        self._destroyed = True
        self._cancel_timer()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _set(self, **changes) -> None:
        self._state = replace(self._state, **changes)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> AutoSaveState:
        return self._state

    def is_dirty(self) -> bool:
        return self._state.dirty

    def is_saving(self) -> bool:
        return self._state.saving

    def get_last_saved(self) -> float | None:
        return self._state.last_saved

    def get_error(self) -> str | None:
        return self._state.last_error


def format_last_saved(timestamp: float | None, now: float | None = None) -> str:
    """Short status-bar text for the time of the last save."""
    if not timestamp:
        return "Never saved"
    elapsed = int((time.time() if now is None else now) - timestamp)
    if elapsed < 5:
        return "Just saved"
    if elapsed < 60:
        return f"Saved {elapsed}s ago"
    if elapsed < 3600:
        return f"Saved {elapsed // 60}m ago"
    return f"Saved at {datetime.fromtimestamp(timestamp):%H:%M:%S}"
