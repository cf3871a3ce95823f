"""Configuration module for the originality engine."""

import os
from pydantic import BaseModel, Field, ConfigDict, model_validator
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value else default


class Config(BaseModel):
    """Configuration for the originality analysis engine."""

    # Storage settings
    database_url: str = Field(
        default_factory=lambda: os.getenv("ORIGINALITY_DATABASE_URL", "sqlite:///./originality.db"),
        description="SQLAlchemy URL of the corpus store"
    )
    echo_sql: bool = Field(
        default=False,
        description="Log every SQL statement issued by the store"
    )

    # Matching settings
    similarity_threshold: float = Field(
        default_factory=lambda: _env_float("ORIGINALITY_SIMILARITY_THRESHOLD", 0.15),
        ge=0.0,
        le=1.0,
        description="Minimum similarity (0-1) for a corpus entry to be reported"
    )
    min_match_length: int = Field(
        default_factory=lambda: _env_int("ORIGINALITY_MIN_MATCH_LENGTH", 50),
        ge=0,
        description="Minimum rendered length in characters of a reported common run"
    )
    ngram_size: int = Field(
        default=3,
        ge=1,
        description="Number of words per n-gram"
    )
    word_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of word-set Jaccard in the pairwise similarity"
    )
    ngram_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of n-gram Jaccard in the pairwise similarity"
    )

    # Pattern settings
    suspicious_threshold: float = Field(
        default_factory=lambda: _env_float("ORIGINALITY_SUSPICIOUS_THRESHOLD", 0.80),
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a suspicious pattern to be reported"
    )

    # Scoring settings
    top_sources: int = Field(
        default=3,
        ge=1,
        description="Number of best matched sources averaged into the score"
    )
    source_weight: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Weight of matched-source similarity in the overall score"
    )
    pattern_weight: float = Field(
        default=0.4,
        ge=0.0,
        le=1.0,
        description="Weight of pattern confidence in the overall score"
    )

    @model_validator(mode="after")
    def _check_weights(self) -> "Config":
        if self.word_weight + self.ngram_weight > 1.0 + 1e-9:
            raise ValueError("word_weight + ngram_weight must not exceed 1")
        return self

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid"
    )
