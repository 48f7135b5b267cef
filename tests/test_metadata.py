import struct

import pytest

from clickwheel.core.errors import ExtractionFailure
from clickwheel.library import metadata
from clickwheel.library.metadata import (
    UNKNOWN_ALBUM, UNKNOWN_ARTIST, extract_metadata, fallback_from_filename, probe,
    read_cover_art,
)


class TestFilenameFallback:
    """Tests for metadata guessed from file names."""

    def test_artist_dash_title(self):
        """Test "Artist - Title" splits into artist and title."""
        meta = fallback_from_filename("/music/Daft Punk - One More Time.mp3")
        assert meta.artist == "Daft Punk"
        assert meta.title == "One More Time"
        assert meta.album == UNKNOWN_ALBUM
        assert meta.duration == 0.0

    def test_extra_separators_stay_in_title(self):
        """Test only the first separator splits."""
        meta = fallback_from_filename("A - B - C.flac")
        assert (meta.artist, meta.title) == ("A", "B - C")

    def test_plain_name(self):
        """Test a name without separator is all title."""
        meta = fallback_from_filename("track01.ogg")
        assert (meta.artist, meta.title) == (UNKNOWN_ARTIST, "track01")

    def test_hyphen_without_spaces(self):
        """Test a bare hyphen is not a separator."""
        meta = fallback_from_filename("Jay-Z.mp3")
        assert meta.title == "Jay-Z"
        assert meta.artist == UNKNOWN_ARTIST


class TestExtractMetadata:
    """Tests for tag probing with fallback."""

    def test_garbage_falls_back(self, tmp_path):
        """Test an unparseable file still yields metadata."""
        path = tmp_path / "Band - Tune.mp3"
        path.write_bytes(b"not really audio")
        meta = extract_metadata(str(path))
        assert (meta.artist, meta.title, meta.album) == ("Band", "Tune", UNKNOWN_ALBUM)
        assert meta.cover_art is None

    def test_probe_raises_on_garbage(self, tmp_path):
        """Test the probe reports unreadable files."""
        path = tmp_path / "x.mp3"
        path.write_bytes(b"not really audio")
        with pytest.raises(ExtractionFailure):
            probe(str(path))

    def test_missing_file_falls_back(self, tmp_path):
        """Test a missing file never raises."""
        meta = extract_metadata(str(tmp_path / "Gone - Away.mp3"))
        assert meta.title == "Away"

    def test_struct_error_becomes_extraction_failure(self, tmp_path, monkeypatch):
        """Test a truncated header inside mutagen is reported as unreadable."""
        def truncated(path, easy=False):
            raise struct.error("unpack requires a buffer of 4 bytes")

        monkeypatch.setattr(metadata, "MutagenFile", truncated)
        path = tmp_path / "Band - Cut.mp3"
        path.write_bytes(b"ID3")
        with pytest.raises(ExtractionFailure):
            probe(str(path))
        assert extract_metadata(str(path)).title == "Cut"

    def test_value_error_falls_back(self, monkeypatch):
        """Test a parser ValueError still yields the file name guess."""
        def malformed(path):
            raise ValueError("bad frame size")

        monkeypatch.setattr(metadata, "probe", malformed)
        meta = extract_metadata("/music/Band - Odd.flac")
        assert (meta.artist, meta.title) == ("Band", "Odd")

    def test_cover_art_parse_error_is_none(self, tmp_path, monkeypatch):
        """Test a broken tag block means no cover rather than an error."""
        def broken(path):
            raise struct.error("bad APIC")

        monkeypatch.setattr(metadata, "ID3", broken)
        path = tmp_path / "x.mp3"
        path.write_bytes(b"ID3")
        assert read_cover_art(str(path)) is None
