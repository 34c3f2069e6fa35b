import hashlib
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol, runtime_checkable

from pydantic import BaseModel, Field, ValidationError

from .fingerprint import content_fingerprint, has_content_changed
from ..utils.logger import setup_logger

logger = setup_logger()


class CachedCritique(BaseModel):
    """A stored critique and the fingerprint of the text it reviewed."""

    critique: str
    content_hash: str
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CacheCheck(BaseModel):
    has_cached: bool = False
    content_changed: bool = False
    critique: str = ""


@runtime_checkable
class CritiqueStore(Protocol):
    """Minimal key-value interface the cache persists through."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryCritiqueStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileCritiqueStore:
    """One JSON file per key under ``directory``.

    File names are a readable slug of the key plus the key's md5, so keys
    that slug the same still land in different files.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        safe = "".join(c if c.isalnum() or c in "-_" else "_" for c in key)[:64]
        digest = hashlib.md5(key.encode("utf-8")).hexdigest()
        return self.directory / f"{safe}-{digest}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()


class CritiqueCache:
    """Per-chapter critique cache keyed by chapter id.

    ``check`` only reports whether a critique exists and whether the chapter
    changed since; reuse or regeneration is the caller's call.
    """

    def __init__(self, store: CritiqueStore, key_prefix: str = "critique_cache_"):
        self.store = store
        self.key_prefix = key_prefix

    def _key(self, chapter_id: str) -> str:
        return f"{self.key_prefix}{chapter_id}"

    def get(self, chapter_id: str) -> Optional[CachedCritique]:
        try:
            raw = self.store.get(self._key(chapter_id))
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read critique cache for {chapter_id}: {e}")
            return None
        if not raw:
            return None
        try:
            return CachedCritique.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"Ignoring corrupt critique cache for {chapter_id}: {e}")
            return None

    def save(self, chapter_id: str, critique: str, content: str) -> Optional[CachedCritique]:
        record = CachedCritique(critique=critique, content_hash=content_fingerprint(content))
        try:
            self.store.set(self._key(chapter_id), record.model_dump_json())
        except OSError as e:
            logger.warning(f"Failed to save critique cache for {chapter_id}: {e}")
            return None
        logger.debug(f"Cached critique for {chapter_id} (hash={record.content_hash})")
        return record

    def check(self, chapter_id: str, current_content: str) -> CacheCheck:
        cached = self.get(chapter_id)
        if cached is None or not cached.critique:
            return CacheCheck()

        return CacheCheck(
            has_cached=True,
            content_changed=has_content_changed(current_content, cached.content_hash),
            critique=cached.critique,
        )

    def clear(self, chapter_id: str) -> None:
        try:
            self.store.delete(self._key(chapter_id))
        except OSError as e:
            logger.warning(f"Failed to clear critique cache for {chapter_id}: {e}")


def open_file_cache(directory: Path, key_prefix: str = "critique_cache_") -> CritiqueCache:
    return CritiqueCache(JsonFileCritiqueStore(directory), key_prefix=key_prefix)
