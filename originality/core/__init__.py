"""Core modules for originality analysis."""

from .config import Config
from .errors import OriginalityError, NotFound, ValidationFailure, StoreFailure
from .types import (
    AnalysisCheck,
    AnalysisEnvelope,
    AnalysisResult,
    CheckStatus,
    CorpusEntry,
    MatchedSource,
    PatternType,
    SubmissionText,
    SuspiciousPattern,
)
from .text import extract_statistics
from .fingerprint import fingerprint
from .similarity import SimilarityMatcher, text_similarity, longest_common_run
from .patterns import PatternDetector
from .scoring import aggregate
from .store import CorpusStore, SQLCorpusStore
from .analyzer import OriginalityAnalyzer

__all__ = [
    "Config",
    "OriginalityError",
    "NotFound",
    "ValidationFailure",
    "StoreFailure",
    "AnalysisCheck",
    "AnalysisEnvelope",
    "AnalysisResult",
    "CheckStatus",
    "CorpusEntry",
    "MatchedSource",
    "PatternType",
    "SubmissionText",
    "SuspiciousPattern",
    "extract_statistics",
    "fingerprint",
    "SimilarityMatcher",
    "text_similarity",
    "longest_common_run",
    "PatternDetector",
    "aggregate",
    "CorpusStore",
    "SQLCorpusStore",
    "OriginalityAnalyzer",
]
