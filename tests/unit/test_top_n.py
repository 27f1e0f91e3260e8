"""Tests for Top-N selection and its presets."""

import pytest

from curation.playlist.strategies import (
    Top3AcclaimedAlgorithm,
    Top3PopularAlgorithm,
    Top5AcclaimedAlgorithm,
    Top5PopularAlgorithm,
    TopNAcclaimedAlgorithm,
    TopNAlgorithm,
    TopNPopularAlgorithm,
    TopNUserAlgorithm,
)
from curation.ranking import AcclaimRankingStrategy, PopularityRankingStrategy


def ids(playlist):
    return [t.id for t in playlist.tracks]


class TestTopNSelection:
    """Top N per album, then one playlist or sequential volumes."""

    def test_single_album_single_playlist(self, album_factory):
        result = TopNAlgorithm(trackCount=3, outputMode="single").generate([album_factory("a1", 3)])

        assert len(result.playlists) == 1
        playlist = result.playlists[0]
        assert playlist.title == "Top 3"
        assert playlist.id == "p1"
        assert playlist.kind == "selection"
        assert playlist.subtitle == "Top 3 from each album"
        assert ids(playlist) == ["a1_t1", "a1_t2", "a1_t3"]
        assert [t.rank for t in playlist.tracks] == [1, 2, 3]

    def test_annotations(self, album_factory):
        result = TopNAlgorithm(trackCount=3).generate([album_factory("a1", 5)])
        tracks = result.playlists[0].tracks

        assert (tracks[0].ranking_info[-1].reason, tracks[0].ranking_info[-1].score) == ("Top 1 of 3", 1.0)
        assert (tracks[2].ranking_info[-1].reason, tracks[2].ranking_info[-1].score) == ("Top 3 of 3", 0.8)
        assert tracks[0].ranking_info[-1].source == "Top N Algorithm"

    def test_short_album_contributes_all_tracks(self, album_factory):
        result = TopNAlgorithm(trackCount=5).generate([album_factory("a1", 2), album_factory("a2", 6)])

        assert len(result.playlists[0].tracks) == 7

    def test_multiple_splits_sequentially(self, album_factory):
        albums = [album_factory("a1", 5, duration=600), album_factory("a2", 5, duration=600)]
        result = TopNAlgorithm(trackCount=3, outputMode="multiple", targetSeconds=1300).generate(albums)

        assert [p.title for p in result.playlists] == ["Top 3 Vol. 1", "Top 3 Vol. 2", "Top 3 Vol. 3"]
        assert [ids(p) for p in result.playlists] == [
            ["a1_t1", "a1_t2"],
            ["a1_t3", "a2_t1"],
            ["a2_t2", "a2_t3"],
        ]
        assert [p.id for p in result.playlists] == ["p1", "p2", "p3"]

    def test_auto_single_when_under_target(self, two_albums):
        result = TopNAlgorithm(trackCount=3).generate(two_albums)

        assert len(result.playlists) == 1
        assert result.playlists[0].duration == 6 * 180

    def test_auto_splits_when_over_target(self, two_albums):
        result = TopNAlgorithm(trackCount=3, targetSeconds=600).generate(two_albums)

        assert len(result.playlists) == 2
        assert all(p.duration <= 600 for p in result.playlists)

    def test_grouping_suffix_and_order(self, two_albums):
        result = TopNAlgorithm(trackCount=2, groupingStrategy="flat_ranked").generate(two_albums)
        playlist = result.playlists[0]

        assert playlist.title == "Top 2 (Ranked)"
        assert ids(playlist) == ["a1_t1", "a2_t1", "a1_t2", "a2_t2"]

    def test_seeded_shuffle_reproducible(self, many_albums):
        first = TopNAlgorithm(groupingStrategy="shuffle", seed=11).generate(many_albums)
        second = TopNAlgorithm(groupingStrategy="shuffle", seed=11).generate(many_albums)

        assert [ids(p) for p in first.playlists] == [ids(p) for p in second.playlists]

    def test_no_albums(self):
        assert TopNAlgorithm().generate([]).playlists == []


class TestTopNPresets:
    """Presets fix ranking, count and title."""

    @pytest.mark.parametrize("algorithm_class,title", [
        (TopNAcclaimedAlgorithm, "BEA Top 3"),
        (TopNPopularAlgorithm, "SPFY Top 3"),
        (TopNUserAlgorithm, "UGR Top 3"),
        (Top3AcclaimedAlgorithm, "Critics' Choice"),
        (Top3PopularAlgorithm, "Crowd Favorites"),
        (Top5AcclaimedAlgorithm, "Deep Cuts"),
        (Top5PopularAlgorithm, "Greatest Hits"),
    ])
    def test_titles(self, algorithm_class, title, two_albums):
        result = algorithm_class(outputMode="single").generate(two_albums)
        assert result.playlists[0].title == title

    def test_fixed_track_count_wins(self, album_factory):
        algorithm = Top3AcclaimedAlgorithm(trackCount=5)
        result = algorithm.generate([album_factory("a1", 8)])

        assert algorithm.track_count == 3
        assert len(result.playlists[0].tracks) == 3

    def test_preset_ranking_strategies(self):
        assert isinstance(Top5AcclaimedAlgorithm().ranking_strategy, AcclaimRankingStrategy)
        assert isinstance(Top3PopularAlgorithm().ranking_strategy, PopularityRankingStrategy)

    def test_popular_preset_orders_by_popularity(self):
        album = {
            "id": "a1",
            "tracks": [
                {"id": "quiet", "title": "Quiet", "spotifyPopularity": 20},
                {"id": "hit", "title": "Hit", "spotifyPopularity": 95},
                {"id": "mid", "title": "Mid", "spotifyPopularity": 50},
                {"id": "low", "title": "Low", "spotifyPopularity": 5},
            ],
        }
        result = Top3PopularAlgorithm().generate([album])

        assert ids(result.playlists[0]) == ["hit", "mid", "quiet"]

    def test_user_preset_follows_user_ranking(self, album_factory):
        album = album_factory("a1", 4, userRanking=[{"trackTitle": "a1 Song 4", "userRank": 1}])
        result = TopNUserAlgorithm(trackCount=1).generate([album])

        assert ids(result.playlists[0]) == ["a1_t4"]

    def test_preset_source(self, two_albums):
        result = Top3AcclaimedAlgorithm().generate(two_albums)
        assert result.ranking_sources[0].name == "Critics' Choice"
