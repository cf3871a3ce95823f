"""Stylistic heuristics that flag possible ghost-writing or patchwork text."""

from collections import Counter
from typing import List, Optional
import numpy as np

from .config import Config
from .text import extract_sentences, extract_words
from .types import PatternType, SuspiciousPattern
from .log import base_logger

logger = base_logger.getChild('patterns')

COMMON_PHRASES = [
    'according to research',
    'studies have shown',
    'it is widely accepted',
    'research indicates',
    'scholars argue',
    'evidence suggests',
    'it can be concluded',
    'in conclusion',
    'furthermore',
    'nevertheless',
    'however',
    'moreover',
]

REPEATED_SHAPE_MIN = 4
ADVANCED_WORD_LENGTH = 12
ADVANCED_RATIO_LIMIT = 0.10
STYLE_DEVIATION_RATIO = 0.5
COMMON_PHRASE_MIN = 6


def _clamp(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def sentence_shape(sentence: str) -> str:
    """Coarse shape of a sentence: LONG (>8), MED (>5) or SHORT per word."""
    shape = []
    for word in extract_words(sentence):
        if len(word) > 8:
            shape.append('LONG')
        elif len(word) > 5:
            shape.append('MED')
        else:
            shape.append('SHORT')
    return '-'.join(shape)


def detect_repetitive_structure(text: str) -> List[SuspiciousPattern]:
    """Flag every sentence shape that occurs more than three times."""
    sentences = extract_sentences(text)
    if not sentences:
        return []

    shapes = Counter(sentence_shape(s) for s in sentences)
    patterns = []
    for shape, count in shapes.items():
        if count >= REPEATED_SHAPE_MIN:
            patterns.append(SuspiciousPattern(
                type=PatternType.REPETITIVE_STRUCTURE,
                confidence=_clamp(count / len(sentences)),
                description=f"Repetitive sentence structure detected ({count} occurrences)",
                text_segment=shape
            ))
    return patterns


def detect_unusual_vocabulary(text: str) -> List[SuspiciousPattern]:
    """Flag a high share of words longer than twelve characters."""
    words = extract_words(text)
    if not words:
        return []

    advanced = [w for w in words if len(w) > ADVANCED_WORD_LENGTH]
    ratio = len(advanced) / len(words)
    if ratio <= ADVANCED_RATIO_LIMIT:
        return []

    return [SuspiciousPattern(
        type=PatternType.UNUSUAL_VOCABULARY,
        confidence=_clamp(ratio * 2),
        description=f"High proportion of advanced vocabulary ({ratio * 100:.1f}%)",
        text_segment=', '.join(advanced[:5])
    )]


def detect_inconsistent_style(text: str) -> List[SuspiciousPattern]:
    """Flag sentence lengths whose spread exceeds half their mean."""
    lengths = [len(s) for s in extract_sentences(text)]
    if not lengths:
        return []

    mean = float(np.mean(lengths))
    std_dev = float(np.std(lengths))
    if mean <= 0 or std_dev <= mean * STYLE_DEVIATION_RATIO:
        return []

    return [SuspiciousPattern(
        type=PatternType.INCONSISTENT_STYLE,
        confidence=_clamp(std_dev / mean),
        description=f"Inconsistent sentence lengths detected (std dev: {std_dev:.1f})",
        text_segment=f"Shortest: {min(lengths)} chars, Longest: {max(lengths)} chars"
    )]


def detect_common_phrases(text: str) -> List[SuspiciousPattern]:
    """Flag heavy use of stock academic transition phrases."""
    lowered = (text or '').lower()
    found = [phrase for phrase in COMMON_PHRASES if phrase in lowered]
    if len(found) < COMMON_PHRASE_MIN:
        return []

    return [SuspiciousPattern(
        type=PatternType.COMMON_PHRASES,
        confidence=_clamp(len(found) / 10),
        description=f"High usage of common academic phrases ({len(found)} found)",
        text_segment=', '.join(found[:3])
    )]


class PatternDetector:
    """Runs every heuristic and keeps the confident findings."""

    heuristics = (
        detect_repetitive_structure,
        detect_unusual_vocabulary,
        detect_inconsistent_style,
        detect_common_phrases,
    )

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def detect_all(self, text: str) -> List[SuspiciousPattern]:
        """Every finding, including those below the reporting threshold."""
        findings = []
        for heuristic in self.heuristics:
            findings.extend(heuristic(text or ''))
        return findings

    def detect(self, text: str) -> List[SuspiciousPattern]:
        """
        Findings with confidence at or above the suspicious threshold.

        Args:
            text: Raw submission text

        Returns:
            List of SuspiciousPattern objects
        """
        findings = self.detect_all(text)
        kept = [p for p in findings if p.confidence >= self.config.suspicious_threshold]
        logger.debug(f"{len(findings)} heuristics fired, {len(kept)} above threshold")
        return kept
