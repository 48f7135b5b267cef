# clickwheel/library/importer.py
from __future__ import annotations

import logging
import mimetypes
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from clickwheel.core.models import StoredTrack, Track
from clickwheel.core.utils import generate_id, truncate_name
from clickwheel.db.store import LibraryStore
from clickwheel.library.metadata import ExtractedMetadata, extract_metadata

logger = logging.getLogger(__name__)

AUDIO_EXTS = {".mp3", ".wav", ".ogg", ".m4a", ".flac", ".aac", ".opus"}


@dataclass(frozen=True)
class ImportProgress:
    index: int          # 1-based
    total: int
    file_name: str

    @property
    def message(self) -> str:
        return f"Adding {self.index}/{self.total}\n{truncate_name(self.file_name)}"


@dataclass(frozen=True)
class ImportReport:
    attempted: int
    imported: int
    skipped: int


def guess_mime_type(path: str) -> str:
    mime, _ = mimetypes.guess_type(path)
    return mime or ""


def is_audio_file(path: str) -> bool:
    ext = os.path.splitext(path)[1].lower()
    return ext in AUDIO_EXTS or guess_mime_type(path).startswith("audio/")


def iter_audio_paths(paths: Iterable[str]) -> list[str]:
    """
    Expand directories recursively and keep audio files, preserving the order
    given (directory contents sorted).
    """
    out: list[str] = []
    for p in paths:
        if not p:
            continue
        if os.path.isdir(p):
            for dirpath, dirnames, filenames in os.walk(p):
                dirnames.sort()
                for fn in sorted(filenames):
                    full = os.path.join(dirpath, fn)
                    if is_audio_file(full):
                        out.append(full)
        elif is_audio_file(p):
            out.append(p)
    return out


def build_record(path: str, meta: ExtractedMetadata, payload: bytes) -> StoredTrack:
    return StoredTrack(
        meta=Track(
            id=generate_id(),
            title=meta.title,
            artist=meta.artist,
            album=meta.album,
            duration=meta.duration,
            file_name=os.path.basename(path),
            mime_type=guess_mime_type(path),
            size=len(payload),
            date_added=int(time.time() * 1000),
            cover_art=meta.cover_art,
        ),
        payload=payload,
    )


def import_files(
    store: LibraryStore,
    paths: Iterable[str],
    on_progress: Optional[Callable[[ImportProgress], None]] = None,
    extract: Callable[[str], ExtractedMetadata] = extract_metadata,
) -> ImportReport:
    """
    Batch import. One file failing (probe, read or save) is skipped and the
    rest carry on.
    """
    files = iter_audio_paths(paths)
    total = len(files)
    imported = 0

    start_time = time.time()
    for i, path in enumerate(files, start=1):
        if on_progress is not None:
            on_progress(ImportProgress(index=i, total=total, file_name=os.path.basename(path)))
        try:
            meta = extract(path)
            payload = Path(path).read_bytes()
            result = store.put(build_record(path, meta, payload))
        except Exception as e:
            logger.warning("Skipping %s: %s", path, e)
            continue

        if result.ok:
            imported += 1
        else:
            logger.warning("Skipping %s: %s", path, result.error)

    logger.info("Imported %d/%d files in %dms", imported, total, int((time.time() - start_time) * 1000))
    return ImportReport(attempted=total, imported=imported, skipped=total - imported)
