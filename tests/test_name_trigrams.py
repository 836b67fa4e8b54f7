"""
Tests for pg_trgm-style trigram similarity.
"""

import pytest

from blacklist_check.utils.name_trigrams import (
    extract_trigrams,
    trigram_index_terms,
    trigram_similarity,
)


class TestExtractTrigrams:
    def test_single_word_is_padded(self):
        assert extract_trigrams("John") == {"  j", " jo", "joh", "ohn", "hn "}

    def test_case_and_punctuation_are_ignored(self):
        assert extract_trigrams("JOHN, doe!") == extract_trigrams("john doe")

    def test_short_word(self):
        assert extract_trigrams("a") == {"  a", " a "}

    @pytest.mark.parametrize("text", ["", "   ", "---", None])
    def test_blank_input(self, text):
        assert extract_trigrams(text) == set()


class TestTrigramSimilarity:
    def test_identical_names(self):
        assert trigram_similarity("John Doe", "john doe") == 1.0

    def test_one_letter_dropped(self):
        # john doe: 9 trigrams, jon doe: 8, shared 6
        assert trigram_similarity("John Doe", "Jon Doe") == pytest.approx(6 / 11)

    def test_word_order_does_not_matter(self):
        assert trigram_similarity("Doe John", "John Doe") == 1.0

    def test_unrelated_names_fall_below_default_threshold(self):
        assert trigram_similarity("John Doe", "Siti Rahayu") < 0.3

    def test_empty_side_scores_zero(self):
        assert trigram_similarity("", "John Doe") == 0.0
        assert trigram_similarity("John Doe", "") == 0.0

    def test_symmetric(self):
        assert trigram_similarity("Budi Santoso", "Budi Susanto") == trigram_similarity("Budi Susanto", "Budi Santoso")


def test_index_terms_are_sorted_and_unique():
    terms = trigram_index_terms("anna anna")
    assert terms == sorted(set(terms))
    assert "ann" in terms
