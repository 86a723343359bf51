from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from minisnap_core.content.ids import is_valid_slug, new_slug
from minisnap_core.content.models import Entry, RendererKind, parse_renderer
from minisnap_core.errors import AllocationExhausted, EntryNotFound, PersistenceFailure
from minisnap_core.locks import ReadWriteLock
from minisnap_core.storage.filesystem import FilesystemRecordStorage

logger = logging.getLogger(__name__)

MAX_SLUG_ATTEMPTS = 5


def _utc_now() -> datetime:
    return datetime.now(UTC)


class EntryStore:
    """Durable CRUD for entries, one JSON file per slug.

    Writes (create/update/delete) are exclusive; get/list share a read lock.
    Every write goes through a temp file and an atomic replace.
    """

    def __init__(
        self,
        root: Path,
        *,
        clock: Callable[[], datetime] = _utc_now,
        slug_factory: Callable[[], str] = new_slug,
    ) -> None:
        if not str(root).strip():
            raise ValueError("content root cannot be empty")
        self._storage = FilesystemRecordStorage(Path(root))
        self._lock = ReadWriteLock()
        self._clock = clock
        self._slug_factory = slug_factory

        try:
            self._storage.ensure_layout()
        except OSError as exc:
            raise PersistenceFailure("create content dir") from exc

    @property
    def root(self) -> Path:
        return self._storage.base_dir

    def create(self, renderer: str | RendererKind, raw: str, description: str = "") -> Entry:
        kind = parse_renderer(renderer)
        description = (description or "").strip()

        with self._lock.write():
            slug = self._allocate_slug()
            now = self._clock()
            entry = Entry(
                slug=slug,
                renderer=kind,
                raw=raw,
                description=description,
                created_at=now,
                updated_at=now,
            )
            self._persist(entry, operation="create entry")

        logger.info("Created entry %s (%s)", entry.slug, entry.renderer.value)
        return entry

    def update(
        self, slug: str, renderer: str | RendererKind, raw: str, description: str = ""
    ) -> Entry:
        kind = parse_renderer(renderer)
        description = (description or "").strip()

        with self._lock.write():
            existing = self._read(slug)
            # Never let a clock step backwards put updated_at before created_at.
            now = max(self._clock(), existing.created_at)
            entry = existing.model_copy(
                update={
                    "renderer": kind,
                    "raw": raw,
                    "description": description,
                    "updated_at": now,
                }
            )
            self._persist(entry, operation="update entry")

        logger.info("Updated entry %s", slug)
        return entry

    def get(self, slug: str) -> Entry:
        with self._lock.read():
            return self._read(slug)

    def list(self) -> list[Entry]:
        """Return all entries, newest first; equal timestamps sort by slug descending."""

        with self._lock.read():
            try:
                paths = list(self._storage.iter_record_paths())
            except OSError as exc:
                raise PersistenceFailure("read content dir") from exc
            entries = [self._read(path.stem) for path in paths if is_valid_slug(path.stem)]

        entries.sort(key=lambda e: (e.created_at, e.slug), reverse=True)
        return entries

    def delete(self, slug: str) -> None:
        with self._lock.write():
            path = self._path(slug)
            try:
                self._storage.remove(path)
            except FileNotFoundError:
                raise EntryNotFound(slug) from None
            except OSError as exc:
                raise PersistenceFailure("delete entry", slug=slug) from exc

        logger.info("Deleted entry %s", slug)

    def _allocate_slug(self) -> str:
        for _ in range(MAX_SLUG_ATTEMPTS):
            candidate = self._slug_factory()
            if not self._storage.path_for(candidate).exists():
                return candidate
            logger.warning("Slug collision on %s, retrying", candidate)
        raise AllocationExhausted(MAX_SLUG_ATTEMPTS)

    def _path(self, slug: str) -> Path:
        if not is_valid_slug(slug):
            raise EntryNotFound(slug)
        return self._storage.path_for(slug)

    def _persist(self, entry: Entry, *, operation: str) -> None:
        try:
            self._storage.write_atomic(self._storage.path_for(entry.slug), entry.to_record())
        except OSError as exc:
            raise PersistenceFailure(operation, slug=entry.slug) from exc

    def _read(self, slug: str) -> Entry:
        path = self._path(slug)
        try:
            data = self._storage.read(path)
        except FileNotFoundError:
            raise EntryNotFound(slug) from None
        except OSError as exc:
            raise PersistenceFailure("open entry", slug=slug) from exc

        try:
            return Entry.from_record(data)
        except ValidationError as exc:
            raise PersistenceFailure("decode entry", slug=slug) from exc
