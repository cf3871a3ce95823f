"""Tests for the similarity matcher."""

import pytest
from datetime import datetime, timezone

from originality.core.config import Config
from originality.core.fingerprint import fingerprint
from originality.core.similarity import (
    SimilarityMatcher,
    jaccard,
    longest_common_run,
    ngrams,
    text_similarity,
    word_set,
)
from originality.core.types import CorpusEntry

SHARED = "the mitochondria is the powerhouse of the cell and produces energy"

RUN_A = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"
RUN_B = "kilos lima mike november oscar papa quebec romeo sierra tangos"


def entry(submission_id, text, author_id="bob"):
    return CorpusEntry(
        submission_id=submission_id,
        course_id="cs101",
        assignment_id="hw1",
        author_id=author_id,
        text=text,
        fingerprint=fingerprint(text),
        word_count=len(text.split()),
        submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc)
    )


class TestSetMeasures:
    """Jaccard and n-gram helpers."""

    def test_jaccard(self):
        """Test Jaccard index of two overlapping sets."""
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)
        assert jaccard({"a"}, {"a"}) == 1.0

    def test_jaccard_empty_sets(self):
        """Test that two empty sets score zero."""
        assert jaccard(set(), set()) == 0.0
        assert jaccard({"a"}, set()) == 0.0

    def test_word_set_is_case_folded(self):
        """Test that word sets ignore case and repeats."""
        assert word_set("The the THE cat") == {"the", "cat"}

    def test_ngrams(self):
        """Test consecutive lower-cased word n-grams."""
        assert ngrams("The quick brown fox", 3) == ["the quick brown", "quick brown fox"]
        assert ngrams("two words", 3) == []


class TestTextSimilarity:
    """Pairwise similarity."""

    PAIRS = [
        ("The cat sat on the mat.", "A cat sat on a mat!"),
        ("Completely different words here", "Nothing alike at all today"),
        ("", "Some text with words"),
        ("short", "short text that is longer"),
        (SHARED, "Everyone knows " + SHARED),
    ]

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric_and_bounded(self, a, b):
        """Test that similarity is symmetric and within [0, 1]."""
        forward = text_similarity(a, b)
        assert forward == text_similarity(b, a)
        assert 0.0 <= forward <= 1.0

    @pytest.mark.parametrize("text", [
        "Hello",
        "Hello there",
        "The quick brown fox jumps over the lazy dog.",
        SHARED,
    ])
    def test_identical_text_scores_one(self, text):
        """Test that a text is fully similar to itself."""
        assert text_similarity(text, text) == pytest.approx(1.0)

    def test_case_insensitive(self):
        """Test that case does not affect similarity."""
        assert text_similarity("Alpha Beta Gamma", "alpha beta gamma") == pytest.approx(1.0)

    def test_empty_texts_score_zero(self):
        """Test that two empty texts score zero."""
        assert text_similarity("", "") == 0.0
        assert text_similarity("", "one two three") == 0.0

    def test_shared_words_without_shared_ngrams(self):
        """Test a word overlap with no n-gram overlap."""
        score = text_similarity("alpha beta gamma delta epsilon", "epsilon delta gamma beta alpha")
        assert score == pytest.approx(0.5)

    def test_weights_are_applied(self):
        """Test that the configured weights shape the score."""
        a, b = "alpha beta gamma delta epsilon", "epsilon delta gamma beta alpha"
        assert text_similarity(a, b, word_weight=1.0, ngram_weight=0.0) == pytest.approx(1.0)
        assert text_similarity(a, b, word_weight=0.0, ngram_weight=1.0) == pytest.approx(0.0)


class TestLongestCommonRun:
    """Evidence extraction."""

    def test_finds_run_and_preserves_case(self):
        """Test that the longest shared passage keeps its original case."""
        text1 = "In biology class we learned that " + SHARED + ". It was fun."
        text2 = "Everyone knows The Mitochondria is the powerhouse of the cell and produces energy daily."

        query, source = longest_common_run(text1, text2)

        assert query == SHARED
        assert source == "The Mitochondria is the powerhouse of the cell and produces energy"
        assert len(query) >= 50

    def test_short_runs_are_not_reported(self):
        """Test that passages under the minimum length are dropped."""
        assert longest_common_run("the cat sat on the mat", "yes the cat sat on the mat") == ("", "")

    def test_min_length_is_configurable(self):
        """Test a custom minimum passage length."""
        assert longest_common_run("a b c", "x b c", min_length=0) == ("b c", "b c")

    def test_first_found_wins_ties(self):
        """Test that the first of two equally long passages is kept."""
        assert len(RUN_A) == len(RUN_B)
        text1 = RUN_A + " zzz " + RUN_B
        text2 = RUN_B + " qqq " + RUN_A

        assert longest_common_run(text1, text2)[0] == RUN_A
        assert longest_common_run(text2, text1)[0] == RUN_B

    def test_empty_input(self):
        """Test that empty input yields no passage."""
        assert longest_common_run("", SHARED) == ("", "")


class TestSimilarityMatcher:
    """Matching a text against corpus candidates."""

    def test_filters_and_sorts(self):
        """Test that matches are filtered by threshold and sorted by similarity."""
        matcher = SimilarityMatcher(Config(database_url="sqlite://"))
        text = "alpha beta gamma delta epsilon"
        candidates = [
            entry("reordered", "epsilon delta gamma beta alpha"),
            entry("unrelated", "zulu yankee xray"),
            entry("identical", "Alpha beta gamma delta epsilon"),
        ]

        matches = matcher.match(text, candidates)

        assert [m.source_submission_id for m in matches] == ["identical", "reordered"]
        assert matches[0].similarity == pytest.approx(100.0)
        assert matches[1].similarity == pytest.approx(50.0)
        assert matches[0].author_id == "bob"

    def test_match_below_run_length_keeps_candidate(self):
        """Test that a similar candidate without a long passage is still matched."""
        matcher = SimilarityMatcher(Config(database_url="sqlite://"))
        matches = matcher.match("alpha beta gamma delta epsilon", [entry("s1", "alpha beta gamma delta epsilon")])

        assert len(matches) == 1
        assert matches[0].matched_text == ""
        assert matches[0].source_text == ""

    def test_reports_evidence_when_long_enough(self):
        """Test that a long shared passage is reported as evidence."""
        matcher = SimilarityMatcher(Config(database_url="sqlite://"))
        matches = matcher.match("We learned " + SHARED, [entry("s1", SHARED + " every day")])

        assert matches[0].matched_text == SHARED
        assert len(matches[0].source_text) >= 50

    def test_threshold_is_configurable(self):
        """Test that a stricter threshold drops weaker candidates."""
        strict = SimilarityMatcher(Config(database_url="sqlite://", similarity_threshold=0.6))
        assert strict.match("alpha beta gamma delta epsilon", [entry("s1", "epsilon delta gamma beta alpha")]) == []

    def test_no_candidates(self):
        """Test that an empty corpus yields no matches."""
        assert SimilarityMatcher(Config(database_url="sqlite://")).match("anything", []) == []
