"""
Tests for SyncService.

Tests cover:
1. Exporting the whole state as one document
2. Section-wise replacement on import
3. Rejection of inconsistent payloads
4. Reset
"""
import pytest
from datetime import date, datetime, timezone

from nexus.exceptions import SyncException
from nexus.models import Habit, JournalEntry
from nexus.schemas import SyncPayload
from nexus.services.sync_service import SyncService


PUSHED_AT = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def habit_doc(habit_id="h1", **overrides):
    doc = {
        "id": habit_id,
        "title": "Walk",
        "frequency": "weekdays",
        "target": 1,
        "completions": ["2024-01-02T10:00:00.000Z", "2024-01-03"],
        "createdAt": "2024-01-01T08:00:00.000Z",
        "colorTheme": "blue",
        "archived": False,
        "notes": {"2024-01-02": "Park loop"},
        "icon": "Footprints",
    }
    doc.update(overrides)
    return doc


class TestExport:
    """Tests for export_document"""

    def test_empty_state(self, db_session):
        document = SyncService(db_session).export_document()
        assert document.habits == []
        assert document.journal == []
        assert document.settings.theme.value == "dark"
        assert document.updated_at is None

    def test_includes_archived_habits(self, db_session, habit_factory):
        habit_factory(title="Active")
        habit_factory(title="Shelved", archived=True)

        document = SyncService(db_session).export_document()

        assert {h.title for h in document.habits} == {"Active", "Shelved"}

    def test_camel_case_wire_format(self, db_session, habit_factory):
        habit_factory(completions=["2024-01-02"])
        data = SyncService(db_session).export_document().model_dump(mode="json", by_alias=True)

        habit = data["habits"][0]
        assert "createdAt" in habit
        assert "colorTheme" in habit
        assert habit["completions"] == ["2024-01-02"]
        assert "enableNotifications" in data["settings"]


class TestImport:
    """Tests for import_document"""

    def test_replaces_habits(self, db_session, habit_factory):
        habit_factory(title="Old habit")
        payload = SyncPayload.model_validate({"habits": [habit_doc()]})

        document = SyncService(db_session).import_document(payload, PUSHED_AT)

        assert [h.id for h in document.habits] == ["h1"]
        stored = db_session.query(Habit).one()
        assert stored.completions == ["2024-01-02", "2024-01-03"]
        assert stored.notes == {"2024-01-02": "Park loop"}
        assert stored.color_theme == "blue"

    def test_omitted_sections_kept(self, db_session, habit_factory):
        habit_factory(title="Stays")
        payload = SyncPayload.model_validate({
            "settings": {"email": "me@example.com", "theme": "light",
                         "enableNotifications": False, "categories": ["Health"]},
            "journal": [{"id": "j1", "date": "2024-01-10", "content": "Hi",
                         "mood": "tired", "updatedAt": "2024-01-10T20:00:00Z"}],
        })

        document = SyncService(db_session).import_document(payload, PUSHED_AT)

        assert [h.title for h in document.habits] == ["Stays"]
        assert document.settings.email == "me@example.com"
        assert document.settings.categories == ["Health"]
        assert document.settings.enable_notifications is False
        assert document.journal[0].date == "2024-01-10"
        assert document.updated_at is not None

    def test_push_same_habit_twice(self, db_session):
        service = SyncService(db_session)
        service.import_document(SyncPayload.model_validate({"habits": [habit_doc()]}), PUSHED_AT)

        document = service.import_document(
            SyncPayload.model_validate({"habits": [habit_doc(title="Walk more")]}), PUSHED_AT
        )

        assert [h.title for h in document.habits] == ["Walk more"]

    def test_duplicate_habit_ids_rejected(self, db_session, habit_factory):
        habit_factory(title="Untouched")
        payload = SyncPayload.model_validate({"habits": [habit_doc("x"), habit_doc("x")]})

        with pytest.raises(SyncException):
            SyncService(db_session).import_document(payload, PUSHED_AT)

        assert [h.title for h in db_session.query(Habit).all()] == ["Untouched"]

    def test_duplicate_journal_dates_rejected(self, db_session):
        entry = {"id": "a", "date": "2024-01-10", "content": "", "updatedAt": "2024-01-10T20:00:00Z"}
        payload = SyncPayload.model_validate({"journal": [entry, dict(entry, id="b")]})

        with pytest.raises(SyncException):
            SyncService(db_session).import_document(payload, PUSHED_AT)


class TestReset:
    """Tests for reset"""

    def test_reset_clears_everything(self, db_session, habit_factory, default_settings):
        habit_factory(completions=["2024-01-02"])
        db_session.add(JournalEntry(date=date(2024, 1, 2), content="x",
                                    updated_at=PUSHED_AT))
        default_settings.theme = "light"
        db_session.commit()

        SyncService(db_session).reset()

        assert db_session.query(Habit).count() == 0
        assert db_session.query(JournalEntry).count() == 0
        assert SyncService(db_session).export_document().settings.theme.value == "dark"


class TestDocumentDates:
    """Tests for date normalization in pushed documents"""

    def test_offset_timestamps_use_utc_day(self):
        payload = SyncPayload.model_validate({
            "habits": [habit_doc(
                completions=["2024-01-01T23:30:00-05:00", "2024-01-03"],
                notes={"2024-01-01T23:30:00-05:00": "late walk"},
            )],
            "journal": [{"id": "j1", "date": "2024-01-01T23:30:00-05:00",
                         "updatedAt": "2024-01-02T04:30:00Z"}],
        })

        assert payload.habits[0].completions == ["2024-01-02", "2024-01-03"]
        assert payload.habits[0].notes == {"2024-01-02": "late walk"}
        assert payload.journal[0].date == "2024-01-02"
