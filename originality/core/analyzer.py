"""Analysis orchestrator: the public entry point of the engine."""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Optional
import chardet

from .config import Config
from .errors import NotFound, ValidationFailure
from .fingerprint import fingerprint
from .patterns import PatternDetector
from .scoring import aggregate
from .similarity import SimilarityMatcher
from .store import CorpusStore, SQLCorpusStore
from .text import extract_statistics
from .types import (
    AnalysisCheck,
    AnalysisEnvelope,
    CheckStatus,
    CorpusEntry,
    SubmissionText,
    utcnow,
)
from .log import base_logger

logger = base_logger.getChild('analyzer')


class KeyedLocks:
    """One lock per key, dropped once nobody holds or waits on it."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, list] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            slot = self._locks.setdefault(key, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                yield
        finally:
            with self._guard:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


class OriginalityAnalyzer:
    """Runs originality analyses against a corpus store."""

    def __init__(self, config: Optional[Config] = None, store: Optional[CorpusStore] = None):
        """
        Initialize the analyzer.

        Args:
            config: Configuration object (uses defaults if not provided)
            store: Corpus store (a SQL store on config.database_url if not provided)
        """
        self.config = config or Config()
        self.store = store or SQLCorpusStore(self.config.database_url, echo=self.config.echo_sql)
        self.matcher = SimilarityMatcher(self.config)
        self.pattern_detector = PatternDetector(self.config)
        self._locks = KeyedLocks()

    @staticmethod
    def read_file(file_path: str) -> str:
        """
        Read a file with automatic encoding detection.

        Args:
            file_path: Path to the file

        Returns:
            File contents as string
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        raw_data = path.read_bytes()
        result = chardet.detect(raw_data)
        encoding = result['encoding'] or 'utf-8'
        confidence = result['confidence'] or 0
        logger.debug(f"Detected encoding for {file_path}: {encoding} (confidence: {confidence:.2f})")

        for enc in (encoding, 'utf-8'):
            try:
                return raw_data.decode(enc)
            except (UnicodeDecodeError, LookupError):
                continue

        raise ValueError(f"Could not decode file {file_path} with any known encoding")

    @staticmethod
    def _validate(submission: SubmissionText, checked_by: str):
        if submission.text is None:
            raise ValidationFailure(f"Submission {submission.submission_id!r} has no text")
        for name in ("submission_id", "course_id", "assignment_id", "author_id"):
            if not str(getattr(submission, name)).strip():
                raise ValidationFailure(f"Submission field {name} must not be blank")
        if not isinstance(checked_by, str) or not checked_by.strip():
            raise ValidationFailure("checked_by must be a non-blank string")

    def analyze(self, submission: SubmissionText, checked_by: str) -> AnalysisEnvelope:
        """
        Analyse a submission and record the outcome.

        Concurrent calls for the same submission are serialised; calls for
        different submissions run independently, so two submissions analysed at
        the same time may or may not see each other in the corpus.

        Args:
            submission: Submission text and its course context
            checked_by: Identity that requested the check, stored for auditing

        Returns:
            AnalysisEnvelope with status "completed"

        Raises:
            ValidationFailure: The submission has no text, or an identifier or checked_by is blank
            StoreFailure: The corpus store failed; the check is recorded as failed
        """
        self._validate(submission, checked_by)
        with self._locks.hold(submission.submission_id):
            return self._run(submission, checked_by)

    def _run(self, submission: SubmissionText, checked_by: str) -> AnalysisEnvelope:
        logger.info(f"Analysing submission {submission.submission_id} (checked by {checked_by})")

        check = AnalysisCheck(
            submission_id=submission.submission_id,
            course_id=submission.course_id,
            assignment_id=submission.assignment_id,
            checked_by=checked_by
        )
        check.transition(CheckStatus.PROCESSING)
        self.store.save_check(check)

        text = submission.text
        try:
            analysis_result = extract_statistics(text)

            candidates = self.store.find_candidates(
                submission.course_id,
                submission.assignment_id,
                submission.author_id
            )
            matched_sources = self.matcher.match(text, candidates)
            suspicious_patterns = self.pattern_detector.detect(text)

            score = aggregate(
                matched_sources,
                suspicious_patterns,
                top_n=self.config.top_sources,
                source_weight=self.config.source_weight,
                pattern_weight=self.config.pattern_weight
            )
            analysis_result.overall_score = score

            completed = check.model_copy(update={
                "similarity_score": score,
                "matched_sources": matched_sources,
                "suspicious_patterns": suspicious_patterns,
                "analysis_result": analysis_result,
            })
            completed.transition(CheckStatus.COMPLETED)
            self.store.save_check(completed)

            self.store.upsert(CorpusEntry(
                submission_id=submission.submission_id,
                course_id=submission.course_id,
                assignment_id=submission.assignment_id,
                author_id=submission.author_id,
                text=text,
                fingerprint=fingerprint(text),
                word_count=analysis_result.word_count,
                submitted_at=utcnow()
            ))
        except Exception as e:
            logger.error(f"Analysis of submission {submission.submission_id} failed: {e}")
            self._record_failure(check, e)
            raise

        logger.info(
            f"Analysis complete: {len(matched_sources)} matched sources, "
            f"{len(suspicious_patterns)} suspicious patterns, score {score:.1f}"
        )
        return AnalysisEnvelope.from_check(completed)

    def _record_failure(self, check: AnalysisCheck, error: Exception):
        check.error = {"error": str(error), "error_type": type(error).__name__}
        check.transition(CheckStatus.FAILED)
        try:
            self.store.save_check(check)
        except Exception:
            # The original error is re-raised by the caller
            logger.exception(f"Could not record failed check for submission {check.submission_id}")

    def get_result(self, submission_id: str) -> AnalysisEnvelope:
        """
        Latest analysis result of a submission.

        Raises:
            NotFound: The submission was never analysed
        """
        check = self.store.get_check(submission_id)
        if check is None:
            raise NotFound(submission_id)
        return AnalysisEnvelope.from_check(check)

    def course_results(self, course_id: str) -> List[AnalysisEnvelope]:
        """Results of every analysed submission in a course, most recent first."""
        return [AnalysisEnvelope.from_check(c) for c in self.store.list_checks(course_id)]

    def exclude_submission(self, submission_id: str):
        """Stop matching future submissions against this one."""
        self.store.set_active(submission_id, False)

    def include_submission(self, submission_id: str):
        """Match future submissions against this one again."""
        self.store.set_active(submission_id, True)
