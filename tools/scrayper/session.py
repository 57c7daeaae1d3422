"""Per-run state: the timestamped log file and the database handle."""

from __future__ import annotations

import os
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from .config import HarvesterConfig
from .db import Database
from .errors import PersistenceUnavailable, StorageWriteError

logger = logging.getLogger("scrayper.session")

LOG_FORMAT = "%(asctime)s %(message)s"
LOG_DATEFMT = "%Y/%m/%d %H:%M:%S"


class RunSession:
    """Acquire the log sink and database once, release both on exit.

    The log file is written next to the scratch files while the run is in
    progress and moved into ``log_dir`` on close, whatever the outcome of
    the run.
    """

    def __init__(self, cfg: HarvesterConfig, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self.cfg = cfg
        self._clock = clock
        self.db: Database | None = Database(cfg.db) if cfg.use_db else None
        self.log_path: Path | None = None
        self.final_log_path: Path | None = None
        self._handler: logging.FileHandler | None = None

    @property
    def page_range(self) -> tuple[int, int]:
        return self.cfg.listing.min_page, self.cfg.listing.max_page

    @property
    def db_available(self) -> bool:
        return self.db is not None and self.db.is_open

    # ── log sink ─────────────────────────────────────────────────

    def _open_log_file(self) -> None:
        if not self.cfg.log.to_file:
            return
        name = self._clock().strftime(self.cfg.log.filename_format)
        self.log_path = self.cfg.storage.scratch_dir / name
        try:
            handler = logging.FileHandler(self.log_path, encoding="utf-8")
        except OSError as exc:
            raise StorageWriteError(str(self.log_path), exc) from exc
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        logging.getLogger().addHandler(handler)
        self._handler = handler

    def _close_log_file(self) -> None:
        if self._handler is None or self.log_path is None:
            return
        logging.getLogger().removeHandler(self._handler)
        self._handler.close()
        self._handler = None

        dest = self.cfg.log.log_dir / self.log_path.name
        try:
            self.cfg.log.log_dir.mkdir(parents=True, exist_ok=True)
            os.replace(self.log_path, dest)
        except OSError as exc:
            logger.error("[NG] Could not move log file %s to %s: %s", self.log_path, dest, exc)
            return
        self.final_log_path = dest
        logger.info("[OK] Finish writing logs to %s", dest)

    # ── database ─────────────────────────────────────────────────

    def _open_db(self) -> None:
        if self.db is None:
            return
        try:
            self.db.open()
        except PersistenceUnavailable as exc:
            if self.cfg.require_db:
                raise
            logger.warning("[NG] Database unavailable, continuing without it: %s", exc)

    # ── lifecycle ────────────────────────────────────────────────

    def open(self) -> RunSession:
        self._open_log_file()
        try:
            self._open_db()
        except PersistenceUnavailable:
            self.close()
            raise
        return self

    def close(self) -> None:
        if self.db is not None:
            self.db.close()
        self._close_log_file()

    def __enter__(self) -> RunSession:
        return self.open()

    def __exit__(self, *args: object) -> None:
        self.close()
