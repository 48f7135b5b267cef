import logging
import os
import sqlite3
from typing import List, Optional

from clickwheel.core.errors import StoreUnavailable
from clickwheel.core.models import StoredTrack, Track
from clickwheel.db.models import track_from_row
from clickwheel.db.schema import SCHEMA_V1_SQL, TRACK_META_COLUMNS

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = 1

def connect(db_path: str) -> sqlite3.Connection:
    try:
        db = sqlite3.connect(db_path)
        db.row_factory = sqlite3.Row
        existing_version = int(db.execute("PRAGMA user_version").fetchone()[0])
        upgrade_database_if_needed(db, existing_version)
    except sqlite3.Error as e:
        raise StoreUnavailable(f"Cannot open library at {db_path}: {e}") from e
    return db

def initialize_database(app_data_dir: str, file_name: str = "library.sqlite3") -> sqlite3.Connection:
    try:
        os.makedirs(app_data_dir, exist_ok=True)
    except OSError as e:
        raise StoreUnavailable(f"Cannot create data directory {app_data_dir}: {e}") from e

    sqlite_path = os.path.join(app_data_dir, file_name)
    logger.info("Database file path: %s", sqlite_path)
    return connect(sqlite_path)

def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int) -> None:
    logger.debug("Existing database version: %s", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    # v1
    if existing_version <= 0:
        logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript(SCHEMA_V1_SQL)
        db.commit()

def debug_schema(db: sqlite3.Connection) -> List[str]:
    cur = db.execute("PRAGMA table_info(tracks)")
    return [f"- {name} ({col_type})" for _cid, name, col_type, _notnull, _default, _pk in cur.fetchall()]

# -------------------------------
# TRACKS
# -------------------------------
def put_track(db: sqlite3.Connection, record: StoredTrack) -> None:
    meta = record.meta
    # upsert instead of INSERT OR REPLACE: a replace must keep the rowid,
    # which is the insertion order of listings
    db.execute("""
        INSERT INTO tracks (
            id, title, artist, album, duration, file_name,
            mime_type, size, date_added, cover_art, payload
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            title = excluded.title,
            artist = excluded.artist,
            album = excluded.album,
            duration = excluded.duration,
            file_name = excluded.file_name,
            mime_type = excluded.mime_type,
            size = excluded.size,
            date_added = excluded.date_added,
            cover_art = excluded.cover_art,
            payload = excluded.payload
    """, (
        meta.id,
        meta.title,
        meta.artist,
        meta.album,
        meta.duration,
        meta.file_name,
        meta.mime_type,
        meta.size,
        meta.date_added,
        meta.cover_art,
        sqlite3.Binary(record.payload),
    ))
    db.commit()

def get_tracks(db: sqlite3.Connection) -> List[Track]:
    cursor = db.execute(f"SELECT {TRACK_META_COLUMNS} FROM tracks ORDER BY rowid ASC")
    return [track_from_row(row) for row in cursor.fetchall()]

def get_track_payload(db: sqlite3.Connection, track_id: str) -> Optional[bytes]:
    row = db.execute("SELECT payload FROM tracks WHERE id = ? LIMIT 1", (track_id,)).fetchone()
    if row is None:
        return None
    return bytes(row["payload"])

def delete_track(db: sqlite3.Connection, track_id: str) -> None:
    db.execute("DELETE FROM tracks WHERE id = ?", (track_id,))
    db.commit()

# -------------------------------
# CLEAN LIBRARY
# -------------------------------
def clean_library(db: sqlite3.Connection) -> None:
    db.execute("DELETE FROM tracks")
    db.commit()
