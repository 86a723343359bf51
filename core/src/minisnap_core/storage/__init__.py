from __future__ import annotations

from minisnap_core.storage.filesystem import FilesystemRecordStorage

__all__ = [
    "FilesystemRecordStorage",
]
