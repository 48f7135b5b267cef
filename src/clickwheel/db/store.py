from __future__ import annotations

import logging
import sqlite3
from typing import List

from clickwheel.core.errors import RecordNotFound
from clickwheel.core.models import StoredTrack, StoreResult, Track
from clickwheel.db import database

logger = logging.getLogger(__name__)


class LibraryStore:
    """
    Request/response wrapper around the tracks table.

    Every operation completes with a StoreResult; sqlite errors are logged and
    returned as failures instead of propagating into UI callbacks. A store
    (and its connection) belongs to the thread that opened it.
    """

    def __init__(self, db: sqlite3.Connection, path: str | None = None):
        self.db = db
        self.path = path

    @classmethod
    def open(cls, path: str) -> "LibraryStore":
        # raises StoreUnavailable
        return cls(database.connect(path), path)

    def close(self) -> None:
        self.db.close()

    def put(self, record: StoredTrack) -> StoreResult[None]:
        try:
            database.put_track(self.db, record)
            return StoreResult.success()
        except sqlite3.Error as e:
            logger.error("Failed to save track %s: %s", record.id, e)
            return StoreResult.failure(e)

    def get_all_metadata(self) -> StoreResult[List[Track]]:
        try:
            return StoreResult.success(database.get_tracks(self.db))
        except sqlite3.Error as e:
            logger.error("Failed to list tracks: %s", e)
            return StoreResult.failure(e)

    def get_payload(self, track_id: str) -> StoreResult[bytes]:
        try:
            payload = database.get_track_payload(self.db, track_id)
        except sqlite3.Error as e:
            logger.error("Failed to read payload of %s: %s", track_id, e)
            return StoreResult.failure(e)
        if payload is None:
            return StoreResult.failure(RecordNotFound(track_id))
        return StoreResult.success(payload)

    def delete(self, track_id: str) -> StoreResult[None]:
        try:
            database.delete_track(self.db, track_id)
            return StoreResult.success()
        except sqlite3.Error as e:
            logger.error("Failed to delete track %s: %s", track_id, e)
            return StoreResult.failure(e)

    def delete_all(self) -> StoreResult[None]:
        try:
            database.clean_library(self.db)
            return StoreResult.success()
        except sqlite3.Error as e:
            logger.error("Failed to clear library: %s", e)
            return StoreResult.failure(e)
