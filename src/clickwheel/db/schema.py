from __future__ import annotations

SCHEMA_V1_SQL = """
CREATE TABLE tracks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    artist TEXT NOT NULL,
    album TEXT NOT NULL,
    duration FLOAT NOT NULL DEFAULT 0,
    file_name TEXT NOT NULL,
    mime_type TEXT,
    size INTEGER NOT NULL DEFAULT 0,
    date_added INTEGER NOT NULL,
    cover_art TEXT,
    payload BLOB NOT NULL
);
"""

# column list for metadata reads; payload is deliberately absent
TRACK_META_COLUMNS = """
    id, title, artist, album, duration, file_name,
    mime_type, size, date_added, cover_art
"""
