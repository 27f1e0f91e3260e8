"""Tests for ranking-source registration and the per-album summary."""

from curation.models import Album, CanonicalTrack, Playlist, RankingSource
from curation.playlist.provenance import ProvenanceTracker


class TestRegisterSource:
    """Test source deduplication."""

    def test_first_registration_wins(self):
        tracker = ProvenanceTracker()
        first = tracker.register_source("BestEverAlbums")
        second = tracker.register_source({"name": "besteveralbums!", "type": "critic"})

        assert second is first
        assert second.type == "external"
        assert [s.name for s in tracker.sources] == ["BestEverAlbums"]

    def test_accepts_ranking_source(self):
        tracker = ProvenanceTracker()
        source = RankingSource(name="Curator", type="internal", secure=True)

        assert tracker.register_source(source) is source

    def test_unusable_names_return_none(self):
        tracker = ProvenanceTracker()

        assert tracker.register_source("") is None
        assert tracker.register_source({"name": "!!!"}) is None
        assert tracker.sources == []

    def test_registration_order_kept(self):
        tracker = ProvenanceTracker()
        for name in ["Spotify", "BestEverAlbums", "spotify", "Curator"]:
            tracker.register_source(name)

        assert [s.name for s in tracker.sources] == ["Spotify", "BestEverAlbums", "Curator"]

    def test_register_album_registers_sources(self):
        tracker = ProvenanceTracker()
        tracker.register_album(Album(id="a1", title="T", ranking_sources=["Spotify", {"name": "Critics"}]))

        assert tracker.album("a1").title == "T"
        assert [s.name for s in tracker.sources] == ["Spotify", "Critics"]


class TestBuildSummary:
    """Test per-album placement summaries."""

    def make_track(self, track_id, album_id, rank=1, source="Engine"):
        track = CanonicalTrack(id=track_id, title=track_id.upper(), duration=200, origin_album_id=album_id, rank=rank)
        if source:
            track.annotate("Placed", source, 0.5)
        return track

    def test_groups_by_origin_album(self):
        tracker = ProvenanceTracker()
        tracker.register_album(Album(id="a1", title="First", artist="Band"))
        playlists = [
            Playlist(id="p1", title="Greatest Hits", tracks=[self.make_track("x", "a1"), self.make_track("y", "a2")]),
            Playlist(id="p2", title="Deep Cuts Vol. 1", tracks=[self.make_track("z", "a1", rank=3, source="Other")]),
        ]

        summary = tracker.build_summary(playlists)

        assert list(summary) == ["a1", "a2"]
        entry = summary["a1"]
        assert entry["albumTitle"] == "First"
        assert entry["artist"] == "Band"
        assert [t["trackId"] for t in entry["tracks"]] == ["x", "z"]
        assert entry["tracks"][1]["playlistId"] == "p2"
        assert entry["tracks"][1]["playlistTitle"] == "Deep Cuts Vol. 1"
        assert entry["tracks"][1]["rank"] == 3
        assert entry["tracks"][1]["duration"] == 200
        assert entry["sourceNames"] == ["Engine", "Other"]
        assert "lastUpdated" in entry

    def test_unknown_album_defaults(self):
        tracker = ProvenanceTracker()
        summary = tracker.build_summary([Playlist(id="p1", title="x", tracks=[self.make_track("x", "ghost")])])

        assert summary["ghost"]["albumTitle"] == "Unknown Album"
        assert summary["ghost"]["artist"] == "Unknown Artist"

    def test_tracks_without_origin_skipped(self):
        tracker = ProvenanceTracker()
        track = CanonicalTrack(id="loose", title="Loose")

        assert tracker.build_summary([Playlist(id="p1", title="x", tracks=[track])]) == {}
