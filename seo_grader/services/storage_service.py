"""Local key/value persistence for the draft, saved gradings and theme."""
import os
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ..core.config import StorageKeys
from ..core.exceptions import StorageError
from ..models.analysis import SavedGrading, ThemePreference
from ..models.metadata import VideoMetadata
from ..utils.logging import CorrelatedLogger

_history_adapter = TypeAdapter(List[SavedGrading])


class KeyValueStore:
    """String key/value store, the server-side stand-in for browser local storage."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError

    def exists(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryKeyValueStore(KeyValueStore):
    """In-memory store, used for tests and STORAGE_BACKEND=memory."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        """Clear all keys."""
        self._data.clear()


class FileKeyValueStore(KeyValueStore):
    """One file per key under a directory. Writes replace the file atomically."""

    def __init__(self, directory: str):
        self.directory = Path(directory)
        self.logger = CorrelatedLogger(__name__)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            # Unreadable state is treated like missing state
            self.logger.warning(f"Could not read {path}: {str(e)}")
            return None

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"write {key}", str(e))

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"delete {key}", str(e))


class DraftHistoryStore:
    """
    Persistence facade over a KeyValueStore.

    Keeps the editable draft, the newest-first list of saved gradings and the
    theme preference. Reads never raise: missing or corrupt records are logged
    and treated as absent.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.logger = CorrelatedLogger(__name__)
        self._history: Optional[List[SavedGrading]] = None

    # Draft

    def load_draft(self) -> VideoMetadata:
        """Persisted draft, or empty metadata when absent or corrupt."""
        raw = self.store.get(StorageKeys.DRAFT)
        if raw is None:
            return VideoMetadata()

        try:
            return VideoMetadata.model_validate_json(raw)
        except PydanticValidationError as e:
            self.logger.warning(f"Failed to parse draft, starting empty: {str(e)}")
            return VideoMetadata()

    def save_draft(self, metadata: VideoMetadata) -> None:
        """Overwrite the persisted draft."""
        self.store.set(StorageKeys.DRAFT, metadata.model_dump_json(by_alias=True))

    def clear_draft(self) -> None:
        """Remove the persisted draft entirely."""
        self.store.delete(StorageKeys.DRAFT)

    # History

    def load_history(self) -> List[SavedGrading]:
        """Persisted saved gradings, newest first; empty when absent or corrupt."""
        raw = self.store.get(StorageKeys.HISTORY)
        if raw is None:
            history: List[SavedGrading] = []
        else:
            try:
                history = _history_adapter.validate_json(raw)
            except PydanticValidationError as e:
                self.logger.warning(f"Failed to parse saved gradings, starting empty: {str(e)}")
                history = []

        self._history = history
        return list(history)

    def save_history(self, entries: List[SavedGrading]) -> None:
        """Overwrite the whole persisted collection."""
        payload = _history_adapter.dump_json(list(entries), by_alias=True).decode("utf-8")
        self.store.set(StorageKeys.HISTORY, payload)
        self._history = list(entries)

    def history(self) -> List[SavedGrading]:
        """In-memory history, loaded from the store on first use."""
        if self._history is None:
            return self.load_history()
        return list(self._history)

    def append_saved(self, entry: SavedGrading) -> List[SavedGrading]:
        """Prepend an entry, persist and return the new collection."""
        entries = [entry] + [saved for saved in self.history() if saved.id != entry.id]
        self.save_history(entries)
        self.logger.info(f"Saved grading {entry.id} ({len(entries)} in history)")
        return list(entries)

    def remove_saved(self, grading_id: str) -> List[SavedGrading]:
        """Drop entries with ``grading_id``; unknown ids leave history unchanged."""
        current = self.history()
        entries = [saved for saved in current if saved.id != grading_id]
        if len(entries) != len(current):
            self.save_history(entries)
            self.logger.info(f"Deleted saved grading {grading_id}")
        return list(entries)

    def find_saved(self, grading_id: str) -> Optional[SavedGrading]:
        """Saved grading with ``grading_id``, if any."""
        return next((saved for saved in self.history() if saved.id == grading_id), None)

    # Theme

    def load_theme(self) -> ThemePreference:
        """Persisted theme; light when absent or unknown."""
        raw = self.store.get(StorageKeys.THEME)
        if raw is None:
            return ThemePreference.LIGHT

        try:
            return ThemePreference(raw.strip())
        except ValueError:
            self.logger.warning(f"Unknown theme preference '{raw}', using light")
            return ThemePreference.LIGHT

    def save_theme(self, theme: ThemePreference) -> None:
        """Persist the theme preference."""
        self.store.set(StorageKeys.THEME, ThemePreference(theme).value)
