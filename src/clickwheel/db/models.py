from __future__ import annotations

import sqlite3

from clickwheel.core.models import Track


def track_from_row(row: sqlite3.Row) -> Track:
    # Note: sqlite3.Row doesn't support .get; use "in row.keys()" checks.
    keys = set(row.keys())
    def opt(k: str):
        return row[k] if k in keys else None

    return Track(
        id=row["id"],
        title=row["title"],
        artist=row["artist"],
        album=row["album"],
        duration=float(row["duration"] or 0.0),
        file_name=row["file_name"],
        mime_type=opt("mime_type") or "",
        size=int(opt("size") or 0),
        date_added=int(row["date_added"]),
        cover_art=opt("cover_art"),
    )
