"""
Debounced autosave for the journal editor.

Every edit restarts a quiet-period timer; only when no edit has arrived
for `delay` seconds is the latest content written, as a single
upsert_by_date. A write that has already started is never cancelled by
later edits; those edits simply start the next debounce cycle.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional, Set

from .dates import DayLike, to_day_key, utc_now
from .models import JournalEntry
from .repositories import JournalEntryRepository

logger = logging.getLogger(__name__)

DEFAULT_DELAY_SECONDS = 1.0


class JournalAutosaver:
    """
    Coalesces rapid journal edits for one day into few writes.

    Must be used from inside a running event loop.
    """

    def __init__(
        self,
        journal: JournalEntryRepository,
        day: DayLike,
        delay: float = DEFAULT_DELAY_SECONDS,
        default_mood: str = "good"
    ):
        """
        Args:
            journal: Journal entry repository
            day: Calendar day being edited
            delay: Quiet period in seconds before a save
            default_mood: Mood used when neither the user nor the stored
                entry has picked one
        """
        self.journal = journal
        self.day_key = to_day_key(day)
        self.delay = delay
        self.default_mood = default_mood
        self.content = ""
        self.mood = default_mood
        self.last_saved: Optional[datetime] = None
        self._timer: Optional[asyncio.Task] = None
        self._writes: Set[asyncio.Task] = set()

    @property
    def has_pending_edit(self) -> bool:
        return self._timer is not None

    async def load(self) -> Optional[JournalEntry]:
        """Pull the stored entry for the day into the editor state"""
        entry = await self.journal.get_by_date(self.day_key)
        if entry is not None:
            self.content = entry.content
            self.mood = entry.mood or self.default_mood
        return entry

    def edit(self, content: str) -> None:
        """Record new content and restart the debounce timer"""
        self.content = content
        self._cancel_timer()
        if not content.strip():
            return
        self._timer = asyncio.ensure_future(self._debounce())

    def set_mood(self, mood: str) -> None:
        """Change the mood; saved right away when there is content"""
        self.mood = mood
        if self.content.strip():
            self._cancel_timer()
            self._start_write(self.content, mood)

    async def flush(self) -> None:
        """Write any pending edit now and wait for all writes to finish"""
        if self._timer is not None:
            self._cancel_timer()
            self._start_write(self.content, self.mood)
        if self._writes:
            await asyncio.gather(*list(self._writes))

    async def close(self) -> None:
        await self.flush()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._start_write(self.content, self.mood)

    def _start_write(self, content: str, mood: Optional[str]) -> asyncio.Task:
        write = asyncio.ensure_future(self._save(content, mood))
        self._writes.add(write)
        write.add_done_callback(self._writes.discard)
        return write

    async def _save(self, content: str, mood: Optional[str]) -> Optional[JournalEntry]:
        if not content.strip():
            return None
        try:
            entry = await self.journal.upsert_by_date(self.day_key, content, mood or self.mood)
        except Exception:
            # The stored entry is left as it was; the next edit retries
            logger.exception("Error saving journal entry for %s", self.day_key)
            return None
        self.last_saved = utc_now()
        logger.debug("Autosaved journal entry for %s", self.day_key)
        return entry
