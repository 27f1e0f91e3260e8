"""Unit tests for ranking strategies and track enrichment.

Coverage:
- Evidence fallback chains in enrich_album_tracks
- Balanced / Acclaim / Popularity / User orderings
- Strategy registry, aliases and fallback
"""

import copy

import pytest

from curation.models import Album
from curation.ranking import (
    AcclaimRankingStrategy,
    BalancedRankingStrategy,
    PopularityRankingStrategy,
    RankingStrategy,
    UserRankingStrategy,
    create_ranking_strategy,
    enrich_album_tracks,
    list_ranking_strategies,
    resolve_ranking_id,
)


def make_album(tracks, **extra):
    raw = {"id": "a1", "title": "Album", "artist": "Band", "tracks": tracks}
    raw.update(extra)
    return Album.from_dict(raw)


def ranked_ids(strategy, album):
    return [item.track.id for item in strategy.rank(album)]


# =============================================================================
# Enrichment
# =============================================================================

class TestEnrichment:
    """Test evidence merging."""

    def test_consolidated_ranking_fills_acclaim_rank(self):
        album = make_album(
            [{"id": "t1", "title": "Opener"}, {"id": "t2", "title": "Song X (Live)"}],
            rankingConsolidated=[{"trackTitle": "song x live", "finalPosition": 1, "rating": 92}],
        )
        tracks = enrich_album_tracks(album)

        assert tracks[1].acclaim_rank == 1
        assert tracks[1].rating == 92
        assert tracks[1].canonical_rank == 1
        assert tracks[0].acclaim_rank is None

    def test_rating_falls_back_to_popularity(self):
        album = make_album([{"id": "t1", "title": "A", "spotifyPopularity": 70}])
        track = enrich_album_tracks(album)[0]

        assert track.rating == 70
        assert track.acclaim_score == 70

    def test_invalid_popularity_is_dropped(self):
        album = make_album([{"id": "t1", "title": "A", "spotifyPopularity": -1}])
        track = enrich_album_tracks(album)[0]

        assert track.spotify_popularity is None
        assert track.spotify_rank is None

    def test_spotify_rank_assigned_by_popularity(self):
        album = make_album([
            {"id": "t1", "title": "A", "spotifyPopularity": 10},
            {"id": "t2", "title": "B", "spotifyPopularity": 90},
            {"id": "t3", "title": "C"},
        ])
        tracks = enrich_album_tracks(album)

        assert [t.spotify_rank for t in tracks] == [2, 1, None]

    def test_album_order_preserved(self):
        album = make_album([{"id": f"t{i}", "title": f"S{i}"} for i in range(4)])
        assert [t.orig_index for t in enrich_album_tracks(album)] == [0, 1, 2, 3]

    def test_empty_album(self):
        assert enrich_album_tracks(make_album([])) == []


# =============================================================================
# Strategies
# =============================================================================

class TestBalancedRanking:
    """Acclaim rank, then rating, then score, then album order."""

    def test_acclaim_rank_then_rating(self):
        album = make_album([
            {"id": "A", "title": "A", "acclaimRank": 2},
            {"id": "B", "title": "B", "acclaimRank": 1},
            {"id": "C", "title": "C", "rating": 90},
            {"id": "D", "title": "D", "rating": 95},
        ])
        ranked = BalancedRankingStrategy().rank(album)

        assert [item.track.id for item in ranked] == ["B", "A", "D", "C"]
        assert [item.rank for item in ranked] == [1, 2, 3, 4]

    def test_no_signals_keeps_album_order(self):
        album = make_album([{"id": f"t{i}", "title": f"S{i}"} for i in range(5)])
        assert ranked_ids(BalancedRankingStrategy(), album) == ["t0", "t1", "t2", "t3", "t4"]

    def test_does_not_mutate_album(self):
        raw_tracks = [{"id": "A", "title": "A", "acclaimRank": 2}, {"id": "B", "title": "B", "acclaimRank": 1}]
        album = make_album(raw_tracks)
        before = copy.deepcopy(album.tracks)

        BalancedRankingStrategy().rank(album)

        assert album.tracks == before

    def test_ranking_is_idempotent(self):
        album = make_album([
            {"id": "A", "title": "A", "rating": 60},
            {"id": "B", "title": "B", "rating": 80},
            {"id": "C", "title": "C", "acclaimRank": 1},
        ])
        strategy = BalancedRankingStrategy()

        assert ranked_ids(strategy, album) == ranked_ids(strategy, album) == ["C", "B", "A"]

    def test_returns_fresh_copies(self):
        album = make_album([{"id": "A", "title": "A"}])
        first = BalancedRankingStrategy().rank(album)[0].track
        first.annotate("Mutated")

        second = BalancedRankingStrategy().rank(album)[0].track
        assert second.ranking_info == []


class TestAcclaimRanking:
    def test_rating_beats_acclaim_rank(self):
        album = make_album([
            {"id": "A", "title": "A", "acclaimRank": 1, "rating": 80},
            {"id": "B", "title": "B", "acclaimRank": 2, "rating": 95},
        ])

        assert ranked_ids(AcclaimRankingStrategy(), album) == ["B", "A"]
        assert ranked_ids(BalancedRankingStrategy(), album) == ["A", "B"]

    def test_metadata(self):
        meta = AcclaimRankingStrategy.get_metadata()
        assert meta.id == "bea"
        assert meta.title_prefix == "BEA"


class TestPopularityRanking:
    def test_popularity_first(self):
        album = make_album([
            {"id": "A", "title": "A", "spotifyPopularity": 10, "rating": 99},
            {"id": "B", "title": "B", "spotifyPopularity": 90, "rating": 50},
            {"id": "C", "title": "C", "rating": 100},
        ])

        assert ranked_ids(PopularityRankingStrategy(), album) == ["B", "A", "C"]

    def test_missing_popularity_sorts_last(self):
        album = make_album([
            {"id": "A", "title": "A", "spotifyPopularity": -1},
            {"id": "B", "title": "B", "spotifyPopularity": 0},
        ])

        assert ranked_ids(PopularityRankingStrategy(), album) == ["B", "A"]


class TestUserRanking:
    """The listener's own order; unranked tracks follow in album order."""

    def tracks(self):
        return [{"id": f"t{i}", "title": f"Song {i}"} for i in range(1, 5)]

    def test_constructor_ranks(self):
        strategy = UserRankingStrategy(user_ranks={"Song 3": 1, "song 1": 2})
        ranked = strategy.rank(make_album(self.tracks()))

        assert [item.track.id for item in ranked] == ["t3", "t1", "t2", "t4"]
        assert [item.track.user_rank for item in ranked] == [1, 2, None, None]

    def test_album_user_ranking(self):
        album = make_album(
            self.tracks(),
            userRanking=[{"trackTitle": "Song 4", "userRank": 1}, {"title": "Song 2", "userRank": 2}],
        )

        assert ranked_ids(UserRankingStrategy(), album) == ["t4", "t2", "t1", "t3"]

    def test_no_ranking_keeps_album_order(self):
        assert ranked_ids(UserRankingStrategy(), make_album(self.tracks())) == ["t1", "t2", "t3", "t4"]

    def test_empty_album(self):
        assert UserRankingStrategy(user_ranks={"x": 1}).rank(make_album([])) == []


# =============================================================================
# Registry
# =============================================================================

class TestRankingRegistry:
    """Test strategy lookup."""

    @pytest.mark.parametrize("ranking_id,expected", [
        ("balanced", BalancedRankingStrategy),
        ("bea", AcclaimRankingStrategy),
        ("acclaim", AcclaimRankingStrategy),
        ("spotify", PopularityRankingStrategy),
        ("Popularity", PopularityRankingStrategy),
        ("user", UserRankingStrategy),
        (None, BalancedRankingStrategy),
    ])
    def test_create(self, ranking_id, expected):
        assert type(create_ranking_strategy(ranking_id)) is expected

    def test_unknown_falls_back_to_balanced(self, caplog):
        with caplog.at_level("WARNING"):
            assert resolve_ranking_id("mystery") == "balanced"
        assert "mystery" in caplog.text

    def test_options_are_passed(self):
        strategy = create_ranking_strategy("user", user_ranks={"A": 1})
        assert strategy.user_ranks == {"a": 1}

    def test_list(self):
        assert [meta.id for meta in list_ranking_strategies()] == ["balanced", "bea", "spotify", "user"]

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            RankingStrategy()
