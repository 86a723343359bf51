from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".json"
TEMP_SUFFIX = ".tmp"


class FilesystemRecordStorage:
    """Local filesystem record storage.

    One file per record, named after its key.

    Base dir: ${CONTENT_DIR}
    File path: <key>.json
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = base_dir

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def ensure_layout(self) -> None:
        self._base_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self._base_dir / f"{key}{RECORD_SUFFIX}"

    def iter_record_paths(self) -> Iterator[Path]:
        for path in sorted(self._base_dir.iterdir()):
            if not path.is_file():
                continue
            if path.suffix != RECORD_SUFFIX:
                continue
            yield path

    def write_atomic(self, path: Path, data: bytes) -> None:
        """Write bytes to a temp file next to ``path`` and move it into place.

        Readers see either the previous file or the complete new one. The temp
        file is removed if anything fails before the final replace.
        """

        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}.", suffix=TEMP_SUFFIX
        )
        temp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as out:
                out.write(data)
                out.flush()
                os.fsync(out.fileno())
            os.chmod(temp_path, 0o644)
            os.replace(temp_path, path)
        except BaseException:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                logger.warning("Could not remove temp file %s", temp_path)
            raise

    def read(self, path: Path) -> bytes:
        return path.read_bytes()

    def remove(self, path: Path) -> None:
        path.unlink()
