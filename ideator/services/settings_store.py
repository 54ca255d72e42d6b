"""Persistent settings store for credentials and favorite projects."""
import json
import os
import tempfile
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..core.config import settings
from ..models.favorites import FavoriteProject
from ..utils.logging import CorrelatedLogger


class StoreEvent(str, Enum):
    """Change notifications published by the store."""
    CREDENTIALS_CHANGED = "credentials_changed"
    FAVORITES_CHANGED = "favorites_changed"


class SettingsStore:
    """
    JSON-file backed key-value store.

    Holds two credential strings and the list of favorite projects under
    fixed keys. Every read goes back to the file so changes made by another
    process are picked up; writes replace the whole file, so concurrent
    writers are last-write-wins.
    """

    GENAI_KEY = "GENAI_API_KEY"
    YOUTUBE_KEY = "YT_API_KEY"
    FAVORITES_KEY = "ideator_favorites"

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.settings_store_path)
        self.logger = CorrelatedLogger(__name__)
        self._lock = threading.Lock()
        self._subscribers: Dict[StoreEvent, List[Callable[[], None]]] = {
            event: [] for event in StoreEvent
        }

    # Persistence

    def _read(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            self.logger.warning(f"Settings store unreadable at {self.path}: {str(e)}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # Pub/sub

    def subscribe(self, event: StoreEvent, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback for an event. Returns a function that unsubscribes it."""
        self._subscribers[event].append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers[event]:
                self._subscribers[event].remove(callback)

        return unsubscribe

    def _publish(self, event: StoreEvent) -> None:
        for callback in list(self._subscribers[event]):
            try:
                callback()
            except Exception as e:
                self.logger.error(f"Subscriber for {event.value} failed: {str(e)}")

    # Credentials

    def get_credential(self, name: str) -> str:
        """Get a stored credential, falling back to the environment."""
        value = self._read().get(name) or ""
        if value:
            return value
        if name == self.GENAI_KEY:
            return settings.openai_api_key
        if name == self.YOUTUBE_KEY:
            return settings.youtube_api_key
        return ""

    def set_credentials(self, genai_api_key: Optional[str] = None, youtube_api_key: Optional[str] = None) -> None:
        """Store credentials. ``None`` leaves a key untouched, an empty string clears it."""
        if genai_api_key is None and youtube_api_key is None:
            return

        with self._lock:
            data = self._read()
            if genai_api_key is not None:
                data[self.GENAI_KEY] = genai_api_key.strip()
            if youtube_api_key is not None:
                data[self.YOUTUBE_KEY] = youtube_api_key.strip()
            self._write(data)

        self.logger.info("Stored credentials updated")
        self._publish(StoreEvent.CREDENTIALS_CHANGED)

    def has_credentials(self) -> Dict[str, bool]:
        return {
            "genai": bool(self.get_credential(self.GENAI_KEY)),
            "youtube": bool(self.get_credential(self.YOUTUBE_KEY)),
        }

    # Favorites

    def list_favorites(self) -> List[FavoriteProject]:
        raw = self._read().get(self.FAVORITES_KEY) or []
        favorites = []
        for item in raw:
            try:
                favorites.append(FavoriteProject.model_validate(item))
            except ValueError as e:
                self.logger.warning(f"Skipping unreadable favorite entry: {str(e)}")
        return favorites

    def get_favorite(self, favorite_id: str) -> Optional[FavoriteProject]:
        for favorite in self.list_favorites():
            if favorite.id == favorite_id:
                return favorite
        return None

    def is_favorite(self, favorite_id: str) -> bool:
        return self.get_favorite(favorite_id) is not None

    def add_favorite(self, project: FavoriteProject) -> None:
        """Add a favorite, replacing any entry with the same id."""
        with self._lock:
            data = self._read()
            raw = [item for item in data.get(self.FAVORITES_KEY) or [] if item.get("id") != project.id]
            raw.insert(0, project.model_dump(mode="json"))
            data[self.FAVORITES_KEY] = raw
            self._write(data)

        self._publish(StoreEvent.FAVORITES_CHANGED)

    def remove_favorite(self, favorite_id: str) -> bool:
        """Remove a favorite. Returns whether anything was removed."""
        with self._lock:
            data = self._read()
            raw = data.get(self.FAVORITES_KEY) or []
            kept = [item for item in raw if item.get("id") != favorite_id]
            if len(kept) == len(raw):
                return False
            data[self.FAVORITES_KEY] = kept
            self._write(data)

        self._publish(StoreEvent.FAVORITES_CHANGED)
        return True

    def toggle_favorite(self, project: FavoriteProject) -> bool:
        """Favorite or unfavorite a project. Returns the new favorite state."""
        if self.remove_favorite(project.id):
            return False
        self.add_favorite(project)
        return True
