"""Lexical similarity between a submission and corpus entries."""

from typing import Iterable, List, Optional, Set, Tuple

from .config import Config
from .text import extract_words
from .types import CorpusEntry, MatchedSource
from .log import base_logger

logger = base_logger.getChild('similarity')


def jaccard(a: Set[str], b: Set[str]) -> float:
    """Jaccard index of two sets; 0.0 when both are empty."""
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def word_set(text: str) -> Set[str]:
    """Case-folded set of words in text."""
    return {w.lower() for w in extract_words(text)}


def ngrams(text: str, n: int = 3) -> List[str]:
    """
    Contiguous n-word sequences of the case-folded text.

    Args:
        text: Raw text
        n: Words per n-gram

    Returns:
        N-grams as space-joined strings, in order of appearance
    """
    words = [w.lower() for w in extract_words(text)]
    return [' '.join(words[i:i + n]) for i in range(len(words) - n + 1)]


def text_similarity(
    text1: str,
    text2: str,
    n: int = 3,
    word_weight: float = 0.5,
    ngram_weight: float = 0.5
) -> float:
    """
    Weighted blend of word-set Jaccard and n-gram Jaccard.

    When neither text is long enough to form an n-gram, the n-gram term takes
    the word-set Jaccard value instead of collapsing to zero.

    Args:
        text1: First text
        text2: Second text
        n: N-gram size
        word_weight: Weight of the word-set term
        ngram_weight: Weight of the n-gram term

    Returns:
        Similarity in [0, 1]; symmetric in its text arguments
    """
    words1 = word_set(text1)
    words2 = word_set(text2)
    word_score = jaccard(words1, words2)

    grams1 = set(ngrams(text1, n))
    grams2 = set(ngrams(text2, n))
    if grams1 or grams2:
        ngram_score = jaccard(grams1, grams2)
    else:
        ngram_score = word_score

    score = word_weight * word_score + ngram_weight * ngram_score
    return min(max(score, 0.0), 1.0)


def longest_common_run(text1: str, text2: str, min_length: int = 50) -> Tuple[str, str]:
    """
    Find the longest run of consecutive words shared by two texts.

    Every pair of start positions is scanned left to right and extended while
    the words match case-insensitively. A run replaces the current best only
    when its rendered text is strictly longer, so the first run found wins ties.

    Args:
        text1: Analysed text
        text2: Source text
        min_length: Minimum rendered length in characters for a run to count

    Returns:
        (run as written in text1, run as written in text2), or ("", "")
    """
    words1 = extract_words(text1)
    words2 = extract_words(text2)
    lower1 = [w.lower() for w in words1]
    lower2 = [w.lower() for w in words2]

    longest_match = ''
    longest_source = ''

    for i in range(len(words1)):
        for j in range(len(words2)):
            k = 0
            while (i + k < len(words1) and
                   j + k < len(words2) and
                   lower1[i + k] == lower2[j + k]):
                k += 1

            if k > 0:
                match = ' '.join(words1[i:i + k])
                if len(match) > len(longest_match) and len(match) >= min_length:
                    longest_match = match
                    longest_source = ' '.join(words2[j:j + k])

    return longest_match, longest_source


class SimilarityMatcher:
    """Compares a text against corpus candidates."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def similarity(self, text1: str, text2: str) -> float:
        """Pairwise similarity in [0, 1] using the configured weights."""
        return text_similarity(
            text1,
            text2,
            n=self.config.ngram_size,
            word_weight=self.config.word_weight,
            ngram_weight=self.config.ngram_weight
        )

    def match(self, text: str, candidates: Iterable[CorpusEntry]) -> List[MatchedSource]:
        """
        Score every candidate and keep those at or above the threshold.

        Args:
            text: Analysed text
            candidates: Corpus entries to compare against

        Returns:
            MatchedSource list sorted by similarity, highest first
        """
        matched = []
        compared = 0

        for entry in candidates:
            compared += 1
            score = self.similarity(text, entry.text)
            if score < self.config.similarity_threshold:
                continue

            query_run, source_run = longest_common_run(
                text, entry.text, min_length=self.config.min_match_length
            )
            matched.append(MatchedSource(
                source_submission_id=entry.submission_id,
                similarity=score * 100,
                matched_text=query_run,
                source_text=source_run,
                author_id=entry.author_id,
                submitted_at=entry.submitted_at
            ))

        matched.sort(key=lambda m: m.similarity, reverse=True)
        logger.debug(f"Compared against {compared} candidates, {len(matched)} above threshold")
        return matched
