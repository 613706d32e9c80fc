"""Unit tests for draft, history and theme persistence."""
import json
import pytest

from seo_grader.core.config import StorageKeys
from seo_grader.core.exceptions import StorageError
from seo_grader.models.analysis import SavedGrading, ThemePreference
from seo_grader.models.metadata import VideoMetadata
from seo_grader.services.storage_service import (
    DraftHistoryStore, FileKeyValueStore, MemoryKeyValueStore
)


def make_saved(grading_id, analysis, title="My Video"):
    return SavedGrading(
        id=grading_id,
        timestamp=1700000000000,
        metadata=VideoMetadata(title=title, description="desc"),
        analysis=analysis
    )

class TestFileKeyValueStore:
    """Test the file backend."""

    def test_set_and_get(self, tmp_path):
        """Test values round trip through files."""
        store = FileKeyValueStore(str(tmp_path / "state"))
        store.set("key", "value")

        assert store.get("key") == "value"
        assert (tmp_path / "state" / "key.json").read_text(encoding="utf-8") == "value"
        assert store.exists("key")

    def test_missing_key(self, tmp_path):
        """Test a missing key reads as None."""
        store = FileKeyValueStore(str(tmp_path))
        assert store.get("missing") is None
        assert not store.exists("missing")

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        """Test writes replace the file in place."""
        store = FileKeyValueStore(str(tmp_path))
        store.set("key", "one")
        store.set("key", "two")

        assert store.get("key") == "two"
        assert [p.name for p in tmp_path.iterdir()] == ["key.json"]

    def test_delete(self, tmp_path):
        """Test delete removes the file and tolerates missing keys."""
        store = FileKeyValueStore(str(tmp_path))
        store.set("key", "value")
        store.delete("key")
        store.delete("key")

        assert store.get("key") is None

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test an unwritable location is reported as StorageError."""
        blocker = tmp_path / "file"
        blocker.write_text("x")
        store = FileKeyValueStore(str(blocker / "nested"))

        with pytest.raises(StorageError):
            store.set("key", "value")

class TestDraftHistoryStore:
    """Test the persistence facade."""

    def test_draft_defaults_to_empty(self, memory_store):
        """Test an absent draft loads as empty metadata."""
        assert memory_store.load_draft() == VideoMetadata()

    def test_draft_round_trip_uses_camel_case(self):
        """Test the draft is stored with camelCase keys."""
        backend = MemoryKeyValueStore()
        store = DraftHistoryStore(backend)
        metadata = VideoMetadata(title="T", description="D", competitor_url="https://x")

        store.save_draft(metadata)

        raw = json.loads(backend.get(StorageKeys.DRAFT))
        assert raw["competitorUrl"] == "https://x"
        assert store.load_draft() == metadata

    def test_corrupt_draft_loads_empty(self):
        """Test corrupt draft data never raises."""
        store = DraftHistoryStore(MemoryKeyValueStore({StorageKeys.DRAFT: "{not json"}))
        assert store.load_draft() == VideoMetadata()

    def test_draft_with_nulls(self):
        """Test null fields in a stored draft read as empty text."""
        raw = json.dumps({"title": "T", "description": None, "competitorNotes": None})
        store = DraftHistoryStore(MemoryKeyValueStore({StorageKeys.DRAFT: raw}))

        draft = store.load_draft()
        assert draft.title == "T"
        assert draft.description == ""
        assert draft.competitor_notes == ""

    def test_clear_draft_removes_key(self):
        """Test clearing is distinct from saving an empty draft."""
        backend = MemoryKeyValueStore()
        store = DraftHistoryStore(backend)
        store.save_draft(VideoMetadata(title="T"))

        store.clear_draft()

        assert backend.get(StorageKeys.DRAFT) is None

    def test_history_defaults_to_empty(self, memory_store):
        """Test absent history loads as an empty list."""
        assert memory_store.load_history() == []

    def test_corrupt_history_loads_empty(self):
        """Test one invalid entry invalidates the whole record."""
        raw = json.dumps([{"id": "a"}])
        store = DraftHistoryStore(MemoryKeyValueStore({StorageKeys.HISTORY: raw}))

        assert store.load_history() == []

    def test_append_prepends_and_persists(self, analysis):
        """Test new entries go first and survive a reload."""
        backend = MemoryKeyValueStore()
        store = DraftHistoryStore(backend)

        store.append_saved(make_saved("first", analysis))
        entries = store.append_saved(make_saved("second", analysis))

        assert [entry.id for entry in entries] == ["second", "first"]
        reloaded = DraftHistoryStore(backend).load_history()
        assert [entry.id for entry in reloaded] == ["second", "first"]
        assert reloaded[0].analysis.overall_score == analysis.overall_score

    def test_history_is_stored_with_camel_case(self, analysis):
        """Test saved gradings keep the browser record shape."""
        backend = MemoryKeyValueStore()
        DraftHistoryStore(backend).append_saved(make_saved("first", analysis))

        raw = json.loads(backend.get(StorageKeys.HISTORY))
        assert raw[0]["analysis"]["overallScore"] == analysis.overall_score
        assert raw[0]["timestamp"] == 1700000000000

    def test_remove_saved(self, memory_store, analysis):
        """Test removal by id."""
        memory_store.append_saved(make_saved("first", analysis))
        memory_store.append_saved(make_saved("second", analysis))

        entries = memory_store.remove_saved("first")

        assert [entry.id for entry in entries] == ["second"]
        assert memory_store.find_saved("first") is None

    def test_remove_unknown_id_is_noop(self, memory_store, analysis):
        """Test unknown ids leave history unchanged."""
        memory_store.append_saved(make_saved("first", analysis))

        entries = memory_store.remove_saved("nope")

        assert [entry.id for entry in entries] == ["first"]

    def test_find_saved(self, memory_store, analysis):
        """Test lookup by id."""
        memory_store.append_saved(make_saved("first", analysis, title="Found"))

        assert memory_store.find_saved("first").metadata.title == "Found"

    def test_theme_defaults_to_light(self, memory_store):
        """Test absent theme is light."""
        assert memory_store.load_theme() == ThemePreference.LIGHT

    def test_theme_round_trip(self):
        """Test the theme is stored as plain text."""
        backend = MemoryKeyValueStore()
        store = DraftHistoryStore(backend)

        store.save_theme(ThemePreference.DARK)

        assert backend.get(StorageKeys.THEME) == "dark"
        assert store.load_theme() == ThemePreference.DARK

    def test_unknown_theme_falls_back(self):
        """Test an unknown stored value reads as light."""
        store = DraftHistoryStore(MemoryKeyValueStore({StorageKeys.THEME: "sepia"}))
        assert store.load_theme() == ThemePreference.LIGHT

    def test_file_backend_end_to_end(self, tmp_path, analysis):
        """Test draft and history survive a new store on the same directory."""
        store = DraftHistoryStore(FileKeyValueStore(str(tmp_path)))
        store.save_draft(VideoMetadata(title="Persisted"))
        store.append_saved(make_saved("first", analysis))

        reopened = DraftHistoryStore(FileKeyValueStore(str(tmp_path)))
        assert reopened.load_draft().title == "Persisted"
        assert [entry.id for entry in reopened.load_history()] == ["first"]
