"""Tests for string normalization keys."""

from curation.string_utils import (
    normalize_source_key,
    normalize_text,
    normalize_title_key,
    normalize_user_title,
)


class TestNormalizeText:
    """Tests for the shared normalization step."""

    def test_none_is_empty(self):
        assert normalize_text(None) == ""

    def test_typography_is_unified(self):
        assert normalize_text("Don’t “Stop”") == "don't \"stop\""

    def test_case_and_strip_are_optional(self):
        assert normalize_text("  Mixed  ", lowercase=False, strip=False) == "  Mixed  "


class TestTitleKey:
    """Title keys keep ASCII letters and digits only."""

    def test_punctuation_and_case_ignored(self):
        assert normalize_title_key("Don't Stop (Live)") == "dontstoplive"
        assert normalize_title_key("dont stop live") == "dontstoplive"

    def test_accents_are_folded(self):
        assert normalize_title_key("Café Olé") == "cafeole"

    def test_empty(self):
        assert normalize_title_key("") == ""
        assert normalize_title_key(None) == ""


class TestSourceKey:
    def test_variants_share_a_key(self):
        assert normalize_source_key("BestEverAlbums") == normalize_source_key("besteveralbums!")

    def test_empty(self):
        assert normalize_source_key(None) == ""


class TestUserTitle:
    """User-ranking keys keep apostrophes, quotes and hyphens."""

    def test_whitespace_collapsed_and_specials_dropped(self):
        assert normalize_user_title("  Hello   World!! ") == "hello world"

    def test_apostrophes_and_hyphens_survive(self):
        assert normalize_user_title("Don’t Look-Back") == "don't look-back"
