"""
Entry service: business logic for reading entries and changing their state.
"""

import logging
from dataclasses import dataclass

from ..database import (
    Database,
    DBEntry,
    DBFeed,
    EntriesVisibility,
    EntryUpdateAction,
    ReadState,
)
from ..exceptions import require_entry, require_feed
from ..sanitizer import sanitize_html

logger = logging.getLogger(__name__)

REFRESH_OK = "ok"


@dataclass
class EntryView:
    """An entry ready to show: its feed and sanitized body."""
    entry: DBEntry
    feed: DBFeed
    content_html: str

    @property
    def next_action(self) -> str:
        state = ReadState.READ if self.entry.is_read else ReadState.UNREAD
        return state.next_action


def pick_body(entry: DBEntry) -> str | None:
    """Prefer content over description unless description is longer."""
    content = entry.content or ""
    description = entry.description or ""
    if not content and not description:
        return None
    return content if len(content) >= len(description) else description


class EntryService:
    """Service for entry-related business logic."""

    def __init__(self, db: Database):
        self.db = db

    def list_entries(
        self,
        feed_id: int,
        visibility: EntriesVisibility = EntriesVisibility.UNREAD
    ) -> tuple[DBFeed, list[DBEntry]]:
        """
        Get a feed and its entries filtered by read state.

        Raises:
            NotFound: If the feed does not exist
        """
        feed = require_feed(self.db.get_feed(feed_id))
        return feed, self.db.get_entries(feed_id, visibility)

    def show(self, entry_id: int) -> EntryView:
        """
        Load an entry with its feed and a sanitized rendering of its body.

        Raises:
            NotFound: If the entry (or its feed) does not exist
        """
        entry = require_entry(self.db.get_entry(entry_id))
        feed = require_feed(self.db.get_feed(entry.feed_id))
        return EntryView(
            entry=entry,
            feed=feed,
            content_html=sanitize_html(pick_body(entry)),
        )

    def toggle_read(self, entry_id: int) -> ReadState:
        """
        Flip an entry between read and unread.

        Raises:
            NotFound: If the entry does not exist
            DatabaseError: If the write lock could not be taken
        """
        new_state = self.db.toggle_entry_read(entry_id)
        logger.info(f"Entry {entry_id} marked {new_state.value}")
        return new_state

    def apply_action(self, entry_id: int, action: EntryUpdateAction) -> str:
        """
        Apply an update action and return the short status token for it.

        toggle_read_unread returns the label of the next available action.
        refresh has no agreed semantics yet: it checks the entry exists and
        changes nothing.
        """
        if action is EntryUpdateAction.TOGGLE_READ_UNREAD:
            return self.toggle_read(entry_id).next_action

        require_entry(self.db.get_entry(entry_id))
        return REFRESH_OK
