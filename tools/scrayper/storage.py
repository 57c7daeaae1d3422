"""Local storage layer – publish downloaded samples into the specimen tree."""

from __future__ import annotations

import os
import logging
from pathlib import Path

from .config import StorageConfig
from .errors import RowParseAnomaly, StorageWriteError
from .models import StoredSample

logger = logging.getLogger("scrayper.storage")

_FORBIDDEN = ("/", "\\", "\x00")


def check_file_hash(file_hash: str) -> str:
    """Reject names that cannot be used as a single path component."""
    if not file_hash:
        raise RowParseAnomaly("empty file hash")
    if file_hash in (".", "..") or any(ch in file_hash for ch in _FORBIDDEN):
        raise RowParseAnomaly(f"file hash {file_hash!r} is not a safe file name")
    return file_hash


class SampleStore:
    """Two-phase writer: scratch file first, then rename into place.

    The rename is the publish point, so nothing half-written ever shows up
    under ``{root}/{category}``.  The target directory is not created here.
    """

    def __init__(self, cfg: StorageConfig | None = None) -> None:
        self.cfg = cfg or StorageConfig.from_env()

    def scratch_path(self, file_hash: str) -> Path:
        return self.cfg.scratch_dir / file_hash

    def final_path(self, file_hash: str) -> Path:
        return self.cfg.target_dir / file_hash

    def place(self, file_hash: str, data: bytes) -> StoredSample:
        check_file_hash(file_hash)
        scratch = self.scratch_path(file_hash)
        final = self.final_path(file_hash)

        try:
            with open(scratch, "wb") as out:
                out.write(data)
        except OSError as exc:
            raise StorageWriteError(str(scratch), exc) from exc
        logger.info("[OK] Filehash is %s", file_hash)

        try:
            os.replace(scratch, final)
        except OSError as exc:
            scratch.unlink(missing_ok=True)
            raise StorageWriteError(str(final), exc) from exc
        logger.info("[OK] Filepath is %s", final)
        return StoredSample(file_hash=file_hash, path=final, size=len(data))
