from conftest import make_track

from clickwheel.core.menu import build_menu, filter_tracks, sort_tracks
from clickwheel.core.models import ActionKind, Filters, Screen
from clickwheel.player.player import PlaybackSnapshot, PlayerStatus


def _snapshot(loaded=None, volume=0.8):
    return PlaybackSnapshot(
        loaded_track_id=loaded,
        status=PlayerStatus.PAUSED if loaded else PlayerStatus.IDLE,
        current_time=0.0,
        duration=None,
        volume=volume,
    )


class TestBuildMenu:
    """Tests for the pure menu builder."""

    def setup_method(self):
        self.tracks = [
            make_track("zebra", artist="Bee", album="Two", duration=65),
            make_track("Apple", artist="Ant", album="One", duration=200),
            make_track("mango", artist="Bee", album="One", duration=3),
        ]

    def test_root_menu(self):
        """Test the root items and device title."""
        menu = build_menu(Screen.ROOT, Filters(), self.tracks, _snapshot())
        assert menu.title == "iPod"
        assert [i.label for i in menu.items] == [
            "Music", "Cover Flow", "Add Music", "Settings", "About",
        ]
        assert menu.items[2].annotation == "+"

    def test_root_now_playing_requires_known_track(self):
        """Test a loaded id missing from the library adds no Now Playing row."""
        menu = build_menu(Screen.ROOT, Filters(), self.tracks, _snapshot(loaded="gone"))
        assert "Now Playing" not in [i.label for i in menu.items]

        loaded = self.tracks[0].id
        menu = build_menu(Screen.ROOT, Filters(), self.tracks, _snapshot(loaded=loaded))
        row = menu.items[3]
        assert (row.label, row.annotation) == ("Now Playing", "♪")

    def test_library_counts(self):
        """Test Music shows song, artist and album counts."""
        menu = build_menu(Screen.LIBRARY, Filters(), self.tracks)
        assert menu.title == "Music"
        assert [(i.label, i.annotation) for i in menu.items[:3]] == [
            ("Songs", "3"), ("Artists", "2"), ("Albums", "2"),
        ]
        assert menu.items[0].action.kind == ActionKind.OPEN_SONGS
        assert menu.items[0].action.filters == Filters()

    def test_artists_and_albums(self):
        """Test group lists carry counts and open filtered songs."""
        artists = build_menu(Screen.ARTISTS, Filters(), self.tracks)
        assert [(i.label, i.annotation) for i in artists.items] == [("Ant", "1"), ("Bee", "2")]
        assert artists.items[1].action.filters == Filters(artist="Bee")

        albums = build_menu(Screen.ALBUMS, Filters(), self.tracks)
        assert [(i.label, i.annotation) for i in albums.items] == [("One", "2"), ("Two", "1")]
        assert albums.items[0].action.filters == Filters(album="One")

    def test_songs_sorted_case_insensitively(self):
        """Test songs are title-sorted ignoring case and show m:ss."""
        menu = build_menu(Screen.SONGS, Filters(), self.tracks)
        assert menu.title == "Songs"
        assert [(i.label, i.annotation) for i in menu.items] == [
            ("Apple", "3:20"), ("mango", "0:03"), ("zebra", "1:05"),
        ]
        assert menu.items[0].action.kind == ActionKind.PLAY_TRACK

    def test_songs_filtered_title(self):
        """Test the filter value becomes the screen title."""
        menu = build_menu(Screen.SONGS, Filters(album="One"), self.tracks)
        assert menu.title == "One"
        assert [i.label for i in menu.items] == ["Apple", "mango"]

    def test_settings_shows_volume(self):
        """Test the volume row shows a rounded percentage."""
        menu = build_menu(Screen.SETTINGS, Filters(), self.tracks, _snapshot(volume=0.35))
        assert [(i.label, i.annotation) for i in menu.items] == [
            ("Volume", "35%"), ("Clear Library", "⚠"),
        ]

    def test_about_install_row(self):
        """Test Install App disappears when running installed."""
        menu = build_menu(Screen.ABOUT, Filters(), self.tracks)
        assert menu.items[1].label == "Songs: 3"
        assert menu.items[-1].action.kind == ActionKind.INSTALL

        menu = build_menu(Screen.ABOUT, Filters(), self.tracks, installed=True)
        assert "Install App" not in [i.label for i in menu.items]

    def test_non_list_screens(self):
        """Test screens drawn without a list have no menu."""
        for screen in (Screen.NOW_PLAYING, Screen.COVER_FLOW, Screen.VOLUME, Screen.ADD_MEDIA):
            assert build_menu(screen, Filters(), self.tracks) is None

    def test_pure(self):
        """Test the same inputs give equal menus."""
        a = build_menu(Screen.SONGS, Filters(artist="Bee"), self.tracks, _snapshot())
        b = build_menu(Screen.SONGS, Filters(artist="Bee"), list(self.tracks), _snapshot())
        assert a == b


class TestSorting:
    """Tests for track ordering helpers."""

    def test_sort_and_filter(self):
        """Test filtering keeps the sorted order."""
        tracks = [make_track("b", artist="X"), make_track("A", artist="X"), make_track("c", artist="Y")]
        assert [t.title for t in sort_tracks(tracks)] == ["A", "b", "c"]
        assert [t.title for t in filter_tracks(tracks, Filters(artist="X"))] == ["A", "b"]
