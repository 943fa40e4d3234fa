"""
Tests for the closed token sets used by the API.
"""

import pytest

from feedkeeper.database import EntriesVisibility, EntryUpdateAction, ReadState
from feedkeeper.exceptions import BadInput


class TestEntriesVisibility:
    """Tests for parsing the entries_visibility token."""

    @pytest.mark.parametrize("token,expected", [
        ("unread", EntriesVisibility.UNREAD),
        ("read", EntriesVisibility.READ),
        ("all", EntriesVisibility.ALL),
    ])
    def test_known_tokens(self, token, expected):
        assert EntriesVisibility.from_token(token) == expected

    def test_missing_token_means_unread(self):
        assert EntriesVisibility.from_token(None) == EntriesVisibility.UNREAD

    @pytest.mark.parametrize("token", ["", "Unread", "everything", "starred"])
    def test_unknown_tokens_rejected(self, token):
        with pytest.raises(BadInput, match="visibility"):
            EntriesVisibility.from_token(token)


class TestEntryUpdateAction:
    """Tests for parsing the entry action token."""

    @pytest.mark.parametrize("token,expected", [
        ("refresh", EntryUpdateAction.REFRESH),
        ("toggle_read_unread", EntryUpdateAction.TOGGLE_READ_UNREAD),
    ])
    def test_known_tokens(self, token, expected):
        assert EntryUpdateAction.from_token(token) == expected

    @pytest.mark.parametrize("token", [None, "", "toggle", "delete"])
    def test_missing_or_unknown_rejected(self, token):
        with pytest.raises(BadInput):
            EntryUpdateAction.from_token(token)


class TestReadState:
    def test_next_action_labels(self):
        assert ReadState.READ.next_action == "Mark unread"
        assert ReadState.UNREAD.next_action == "Mark read"
