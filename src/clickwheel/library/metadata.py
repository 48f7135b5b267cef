# clickwheel/library/metadata.py
from __future__ import annotations

import base64
import logging
import os
import struct
from dataclasses import dataclass
from typing import Optional

from mutagen import File as MutagenFile
from mutagen.flac import FLAC
from mutagen.id3 import ID3, ID3NoHeaderError
from mutagen.mp4 import MP4, MP4Cover
from mutagen._util import MutagenError

from clickwheel.core.errors import ExtractionFailure

logger = logging.getLogger(__name__)

# mutagen surfaces malformed headers as ValueError or struct.error too
PARSE_ERRORS = (MutagenError, OSError, ValueError, struct.error)

UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"


@dataclass(frozen=True)
class ExtractedMetadata:
    duration: float
    title: str
    artist: str
    album: str
    cover_art: str | None = None


def fallback_from_filename(file_name: str) -> ExtractedMetadata:
    """
    "Artist - Title.mp3" -> artist/title; anything else is all title.
    Further separators stay in the title ("A - B - C" -> A / "B - C").
    """
    stem = os.path.splitext(os.path.basename(file_name))[0]
    parts = stem.split(" - ")
    title = stem
    artist = UNKNOWN_ARTIST
    if len(parts) >= 2:
        artist = parts[0].strip() or UNKNOWN_ARTIST
        title = " - ".join(parts[1:]).strip() or stem
    return ExtractedMetadata(duration=0.0, title=title, artist=artist, album=UNKNOWN_ALBUM)


def _first(easy, key: str) -> str | None:
    v = easy.get(key) if easy is not None else None
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None


def _data_url(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def read_cover_art(path: str) -> Optional[str]:
    """
    Embedded front cover as a data: URL, or None.

      - MP3: first APIC frame.
      - FLAC: first picture block.
      - MP4/M4A: first 'covr' atom.
    """
    ext = os.path.splitext(path)[1].lower()
    try:
        if ext == ".mp3":
            try:
                tags = ID3(path)
            except ID3NoHeaderError:
                return None
            frames = tags.getall("APIC")
            if frames:
                return _data_url(frames[0].data, frames[0].mime or "image/jpeg")

        elif ext == ".flac":
            pictures = FLAC(path).pictures
            if pictures:
                return _data_url(pictures[0].data, pictures[0].mime or "image/jpeg")

        elif ext in {".m4a", ".mp4"}:
            covers = MP4(path).get("covr")
            if covers:
                cover = covers[0]
                mime = "image/png" if getattr(cover, "imageformat", None) == MP4Cover.FORMAT_PNG else "image/jpeg"
                return _data_url(bytes(cover), mime)
    except PARSE_ERRORS as e:
        logger.debug("No cover art in %s: %s", path, e)
    return None


def probe(path: str) -> ExtractedMetadata:
    """
    Tags and duration via mutagen. Raises ExtractionFailure when the file
    cannot be parsed at all.
    """
    try:
        audio = MutagenFile(path, easy=True)
    except PARSE_ERRORS as e:
        raise ExtractionFailure(f"Cannot parse {path}: {e}") from e
    if audio is None:
        raise ExtractionFailure(f"Unknown audio format: {path}")

    fallback = fallback_from_filename(path)

    duration = 0.0
    info = getattr(audio, "info", None)
    if info is not None and getattr(info, "length", None):
        duration = float(info.length)

    return ExtractedMetadata(
        duration=duration,
        title=_first(audio, "title") or fallback.title,
        artist=_first(audio, "artist") or fallback.artist,
        album=_first(audio, "album") or fallback.album,
        cover_art=read_cover_art(path),
    )


def extract_metadata(path: str) -> ExtractedMetadata:
    """Never raises; probe failures resolve to the filename heuristic."""
    try:
        return probe(path)
    except (ExtractionFailure, *PARSE_ERRORS) as e:
        logger.info("Falling back to file name for %s: %s", os.path.basename(path), e)
        return fallback_from_filename(path)
