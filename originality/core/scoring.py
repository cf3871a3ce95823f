"""Combine matched sources and pattern findings into one score."""

from typing import Sequence

from .types import MatchedSource, SuspiciousPattern


def aggregate(
    matched_sources: Sequence[MatchedSource],
    suspicious_patterns: Sequence[SuspiciousPattern],
    top_n: int = 3,
    source_weight: float = 0.6,
    pattern_weight: float = 0.4
) -> float:
    """
    Overall originality-risk score in [0, 100].

    Args:
        matched_sources: Matches sorted by similarity, highest first
        suspicious_patterns: Reported pattern findings
        top_n: Number of leading matches averaged
        source_weight: Weight of the match average
        pattern_weight: Weight of the pattern average

    Returns:
        Score between 0 and 100
    """
    score = 0.0

    top = list(matched_sources)[:top_n]
    if top:
        score += sum(m.similarity for m in top) / len(top) * source_weight

    if suspicious_patterns:
        confidence = sum(p.confidence for p in suspicious_patterns) / len(suspicious_patterns)
        score += confidence * 100 * pattern_weight

    return min(max(score, 0.0), 100.0)
