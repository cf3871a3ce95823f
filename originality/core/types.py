"""Shared data types for the originality analysis engine."""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class _Model(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CheckStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class PatternType(str, Enum):
    REPETITIVE_STRUCTURE = "repetitive_structure"
    UNUSUAL_VOCABULARY = "unusual_vocabulary"
    INCONSISTENT_STYLE = "inconsistent_style"
    COMMON_PHRASES = "common_phrases"


# pending -> processing -> completed | failed
_TRANSITIONS = {
    CheckStatus.PENDING: {CheckStatus.PROCESSING},
    CheckStatus.PROCESSING: {CheckStatus.COMPLETED, CheckStatus.FAILED},
    CheckStatus.COMPLETED: set(),
    CheckStatus.FAILED: set(),
}


class InvalidTransition(ValueError):
    """Raised when a check is moved to a status it cannot reach."""


class SubmissionText(_Model):
    """A submission handed to the engine by the host system."""

    submission_id: str = Field(description="Opaque submission identifier")
    course_id: str = Field(description="Course the submission belongs to")
    assignment_id: str = Field(description="Assignment the submission answers")
    author_id: str = Field(description="Author of the submission")
    text: Optional[str] = Field(description="Raw submission text")


class CorpusEntry(_Model):
    """A previously analysed submission kept for future comparisons."""

    submission_id: str = Field(description="Unique key of the entry")
    course_id: str
    assignment_id: str
    author_id: str
    text: str
    fingerprint: str = Field(description="SHA-256 of the normalized text")
    word_count: int = 0
    submitted_at: datetime = Field(default_factory=utcnow)
    is_active: bool = Field(default=True, description="False excludes the entry from matching")


class MatchedSource(_Model):
    """A corpus entry similar enough to the analysed text."""

    source_submission_id: str
    similarity: float = Field(ge=0.0, le=100.0, description="Similarity percentage (0-100)")
    matched_text: str = Field(default="", description="Longest common run in the analysed text")
    source_text: str = Field(default="", description="The same run as written in the source")
    author_id: str
    submitted_at: datetime


class SuspiciousPattern(_Model):
    """A stylistic heuristic finding."""

    type: PatternType
    confidence: float = Field(ge=0.0, le=1.0)
    description: str
    text_segment: str = ""


class AnalysisResult(_Model):
    """Text statistics of an analysed submission."""

    overall_score: float = 0.0
    text_length: int = 0
    word_count: int = 0
    unique_words: int = 0
    average_word_length: float = 0.0
    sentence_count: int = 0
    average_sentence_length: float = 0.0
    readability_score: float = 0.0
    lexical_diversity: float = 0.0
    processed_at: datetime = Field(default_factory=utcnow)


class AnalysisCheck(_Model):
    """Persistent record of one analysis run, keyed by submission."""

    submission_id: str
    course_id: str = ""
    assignment_id: str = ""
    status: CheckStatus = CheckStatus.PENDING
    similarity_score: float = 0.0
    matched_sources: List[MatchedSource] = Field(default_factory=list)
    suspicious_patterns: List[SuspiciousPattern] = Field(default_factory=list)
    analysis_result: Optional[AnalysisResult] = None
    error: Optional[Dict[str, Any]] = Field(default=None, description="Diagnostics of a failed run")
    checked_by: str = ""
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in (CheckStatus.COMPLETED, CheckStatus.FAILED)

    def transition(self, status: CheckStatus) -> "AnalysisCheck":
        """Move the check to a new status, enforcing the lifecycle."""
        status = CheckStatus(status)
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"Cannot move check from {self.status.value} to {status.value}")
        self.status = status
        self.updated_at = utcnow()
        return self


class AnalysisEnvelope(_Model):
    """Result handed back to the host system."""

    submission_id: str
    similarity_score: float = Field(ge=0.0, le=100.0)
    matched_sources: List[MatchedSource] = Field(default_factory=list)
    suspicious_patterns: List[SuspiciousPattern] = Field(default_factory=list)
    analysis_result: Optional[AnalysisResult] = None
    status: CheckStatus
    error: Optional[Dict[str, Any]] = None

    @classmethod
    def from_check(cls, check: AnalysisCheck) -> "AnalysisEnvelope":
        return cls(
            submission_id=check.submission_id,
            similarity_score=check.similarity_score,
            matched_sources=check.matched_sources,
            suspicious_patterns=check.suspicious_patterns,
            analysis_result=check.analysis_result,
            status=check.status,
            error=check.error,
        )

    def to_api(self) -> Dict[str, Any]:
        """Render the camelCase wire shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
