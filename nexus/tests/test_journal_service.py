"""
Tests for JournalService.
"""
import pytest
from datetime import date, datetime, timezone

from nexus.constants import Mood
from nexus.exceptions import JournalEntryNotFoundException
from nexus.services.journal_service import JournalService


class TestJournalService:
    """Tests for journal upsert and lookup"""

    def test_save_creates_entry(self, db_session, today):
        entry = JournalService(db_session).save_entry(today, "Good day", Mood.HAPPY)
        assert entry.id
        assert entry.date == today
        assert entry.content == "Good day"
        assert entry.mood == "happy"

    def test_save_overwrites_same_day(self, db_session, today):
        service = JournalService(db_session)
        first = service.save_entry(today, "Draft", Mood.NEUTRAL)
        later = datetime(2024, 1, 15, 21, 0, tzinfo=timezone.utc)

        second = service.save_entry(today, "Final", None, now=later)

        assert second.id == first.id
        assert second.content == "Final"
        assert second.mood is None
        assert len(service.list_entries()) == 1

    def test_get_missing_entry_raises(self, db_session, today):
        with pytest.raises(JournalEntryNotFoundException):
            JournalService(db_session).get_entry(today)

    def test_list_range_newest_first(self, db_session):
        service = JournalService(db_session)
        for day in (1, 5, 9, 12):
            service.save_entry(date(2024, 1, day), f"Day {day}")

        entries = service.list_entries(date(2024, 1, 2), date(2024, 1, 12))

        assert [e.date.day for e in entries] == [12, 9, 5]

    def test_delete_entry(self, db_session, today):
        service = JournalService(db_session)
        service.save_entry(today, "Gone soon")

        service.delete_entry(today)

        with pytest.raises(JournalEntryNotFoundException):
            service.get_entry(today)
