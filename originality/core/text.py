"""Tokenization and text statistics."""

import re
from typing import List
import numpy as np

from .types import AnalysisResult, utcnow

WORD_RE = re.compile(r'\b\w+\b', re.ASCII)
SENTENCE_SPLIT_RE = re.compile(r'[.!?]+')
VOWELS = set('aeiouy')


def extract_words(text: str) -> List[str]:
    """
    Split text into words.

    Words are maximal runs of ASCII letters, digits and underscores. Case is
    preserved.

    Args:
        text: Raw text

    Returns:
        Words in order of appearance
    """
    if not text:
        return []
    return WORD_RE.findall(text)


def extract_sentences(text: str) -> List[str]:
    """
    Split text into sentences on '.', '!' and '?'.

    Whitespace-only pieces are dropped; surviving pieces are returned unstripped
    so that their character length reflects the original text.
    """
    if not text:
        return []
    return [s for s in SENTENCE_SPLIT_RE.split(text) if s.strip()]


def count_syllables(word: str) -> int:
    """Approximate syllables as the number of vowel characters, at least 1."""
    return sum(1 for c in word.lower() if c in VOWELS) or 1


def readability_score(words: List[str], sentences: List[str]) -> float:
    """
    Simplified Flesch reading ease.

    Returns 0.0 when there are no words or no sentences.
    """
    if not words or not sentences:
        return 0.0
    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = sum(count_syllables(w) for w in words) / len(words)
    return 206.835 - (1.015 * avg_words_per_sentence) - (84.6 * avg_syllables_per_word)


def extract_statistics(text: str) -> AnalysisResult:
    """
    Compute the statistics block of an analysis.

    Every ratio with a zero denominator is reported as 0.0, so empty or
    punctuation-only input yields a fully zeroed result.

    Args:
        text: Raw submission text

    Returns:
        AnalysisResult with overall_score left at 0
    """
    text = text or ""
    words = extract_words(text)
    sentences = extract_sentences(text)
    unique_words = {w.lower() for w in words}

    word_count = len(words)
    sentence_count = len(sentences)

    if word_count:
        average_word_length = float(np.mean([len(w) for w in words]))
        lexical_diversity = len(unique_words) / word_count
    else:
        average_word_length = 0.0
        lexical_diversity = 0.0

    return AnalysisResult(
        text_length=len(text),
        word_count=word_count,
        unique_words=len(unique_words),
        average_word_length=average_word_length,
        sentence_count=sentence_count,
        average_sentence_length=word_count / sentence_count if sentence_count else 0.0,
        readability_score=readability_score(words, sentences),
        lexical_diversity=lexical_diversity,
        processed_at=utcnow(),
    )
