"""
Tests for phonetic normalization.
"""

import pytest


class TestNormalizeEnglish:
    """Tests for English word mapping."""

    @pytest.mark.parametrize("word", ["hi", "Hello", "HURRY", "hari", "are", "hoodie", "hare"])
    def test_hare_sounding_words(self, word):
        """Test Hare-sounding words map to Hare, case-insensitively."""
        from mantracounter.normalize import normalize
        from mantracounter.types import HARE

        assert normalize(word) == HARE

    @pytest.mark.parametrize("word", ["krishna", "Krish", "christian"])
    def test_krishna_sounding_words(self, word):
        """Test Krishna-sounding words map to Krsna."""
        from mantracounter.normalize import normalize
        from mantracounter.types import KRSNA

        assert normalize(word) == KRSNA

    def test_rama(self):
        from mantracounter.normalize import normalize

        assert normalize("Rama") == "Rama"

    @pytest.mark.parametrize("word", ["weather", "", "krishnas", "ram", "hari,"])
    def test_unknown_words_no_match(self, word):
        """Test anything outside the lists is no match, never an error."""
        from mantracounter.normalize import normalize
        from mantracounter.types import EMPTY

        assert normalize(word) == EMPTY

    def test_word_lists_are_disjoint(self):
        from mantracounter.normalize import HARE_WORDS, KRISHNA_WORDS, RAMA_WORDS

        assert not HARE_WORDS & KRISHNA_WORDS
        assert not HARE_WORDS & RAMA_WORDS
        assert not KRISHNA_WORDS & RAMA_WORDS


class TestNormalizeHindi:
    """Tests for Devanagari containment matching."""

    def test_exact_words(self):
        from mantracounter.normalize import normalize
        from mantracounter.types import HARE, KRSNA, RAMA

        assert normalize("हरे", "hi") == HARE
        assert normalize("कृष्णा", "hi") == KRSNA
        assert normalize("राम", "hi") == RAMA

    def test_containment_and_artifacts(self):
        """Test words containing a fragment match, including known mishearings."""
        from mantracounter.normalize import normalize
        from mantracounter.types import HARE, RAMA

        assert normalize("रामा", "hi") == RAMA
        assert normalize("खाद्य", "hi") == HARE
        assert normalize("हद", "hi") == HARE

    def test_unrelated_hindi_word(self):
        from mantracounter.normalize import normalize

        assert normalize("नमस्ते", "hi") == ""

    def test_english_words_do_not_match_in_hindi_mode(self):
        from mantracounter.normalize import normalize

        assert normalize("krishna", "hi") == ""


class TestNormalizeText:
    """Tests for batch normalization."""

    def test_example_sequence_and_counts(self):
        """Test canonical words and per-category counts."""
        from mantracounter.normalize import normalize_text

        result = normalize_text("hi krishna rama today")

        assert result.words == ["Hare", "Krishna", "Rama", "Hare"]
        assert result.counts == {"Hare": 2, "Krishna": 1, "Rama": 1}
        assert result.tokens == ["Hare", "Krsna", "Rama", "Hare"]
        assert result.total == 4

    def test_unmatched_words_are_dropped(self):
        """Test unmatched words are excluded, not padded."""
        from mantracounter.normalize import normalize_text

        result = normalize_text("the weather hello   there\nrama")

        assert result.words == ["Hare", "Rama"]
        assert "" not in result.tokens

    def test_empty_text(self):
        from mantracounter.normalize import normalize_text

        result = normalize_text("")

        assert result.tokens == []
        assert result.counts == {"Hare": 0, "Krishna": 0, "Rama": 0}
        assert result.text == ""

    def test_hindi_text(self):
        from mantracounter.normalize import normalize_text

        result = normalize_text("हरे कृष्णा हरे राम", "hi")

        assert result.words == ["Hare", "Krishna", "Hare", "Rama"]


class TestDevanagari:
    """Tests for transliteration of display words."""

    def test_transliterates_known_words(self):
        from mantracounter.normalize import to_devanagari

        assert to_devanagari("Hare Krishna Rama") == "हरे कृष्णा राम"

    def test_leaves_other_words(self):
        from mantracounter.normalize import to_devanagari

        assert to_devanagari("Hare om") == "हरे om"
        assert to_devanagari("") == ""
