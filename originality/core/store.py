"""Corpus store: previously analysed submissions and analysis check records."""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
from sqlalchemy import create_engine, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import NotFound, StoreFailure
from .models import Base, CheckRow, CorpusRow
from .types import AnalysisCheck, CorpusEntry
from .log import base_logger

logger = base_logger.getChild('store')

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

# Columns refreshed when a submission is re-analysed
CORPUS_REFRESH_COLUMNS = ("text", "fingerprint", "word_count", "submitted_at")


class CorpusStore(ABC):
    """The only queries the engine needs from its persistence layer."""

    @abstractmethod
    def find_candidates(self, course_id: str, assignment_id: str, exclude_author_id: str) -> List[CorpusEntry]:
        """Active entries of a course assignment, excluding one author's work."""

    @abstractmethod
    def upsert(self, entry: CorpusEntry) -> None:
        """Insert an entry or refresh the existing one with the same submission_id."""

    @abstractmethod
    def get_entry(self, submission_id: str) -> Optional[CorpusEntry]:
        """Fetch a corpus entry by submission."""

    @abstractmethod
    def set_active(self, submission_id: str, active: bool) -> None:
        """Include or exclude an entry from future matching."""

    @abstractmethod
    def save_check(self, check: AnalysisCheck) -> None:
        """Insert or overwrite the check record of a submission."""

    @abstractmethod
    def get_check(self, submission_id: str) -> Optional[AnalysisCheck]:
        """Fetch the check record of a submission."""

    @abstractmethod
    def list_checks(self, course_id: str) -> List[AnalysisCheck]:
        """All check records of a course, most recently updated first."""


class SQLCorpusStore(CorpusStore):
    """SQLAlchemy-backed corpus store."""

    def __init__(self, url: str = "sqlite:///./originality.db", echo: bool = False):
        """
        Connect to the database and create missing tables.

        Args:
            url: SQLAlchemy database URL
            echo: Log SQL statements
        """
        self.url = url
        engine_kwargs: Dict[str, Any] = {"echo": echo}
        if url in IN_MEMORY_URLS:
            # One shared connection, otherwise every session sees an empty database
            engine_kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        elif url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}

        try:
            self.engine = create_engine(url, **engine_kwargs)
            Base.metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreFailure(f"Could not open corpus store at {url}: {e}") from e

        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        logger.info(f"Corpus store ready ({self.engine.dialect.name})")

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self.Session() as session, session.begin():
                yield session
        except SQLAlchemyError as e:
            logger.error(f"Corpus store failed to {action}: {e}")
            raise StoreFailure(f"Failed to {action}: {e}") from e

    def _dialect_insert(self):
        name = self.engine.dialect.name
        if name == "sqlite":
            from sqlalchemy.dialects.sqlite import insert
            return insert
        if name == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
            return insert
        return None

    def _upsert_row(self, session: Session, row_cls, values: Dict[str, Any], refresh: tuple):
        insert = self._dialect_insert()
        if insert is None:
            session.merge(row_cls(**values))
            return
        stmt = insert(row_cls).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[row_cls.submission_id],
            set_={name: getattr(stmt.excluded, name) for name in refresh}
        )
        session.execute(stmt)

    @staticmethod
    def _entry_from_row(row: CorpusRow) -> CorpusEntry:
        return CorpusEntry(
            submission_id=row.submission_id,
            course_id=row.course_id,
            assignment_id=row.assignment_id,
            author_id=row.author_id,
            text=row.text,
            fingerprint=row.fingerprint,
            word_count=row.word_count,
            submitted_at=row.submitted_at,
            is_active=row.is_active
        )

    @staticmethod
    def _check_from_row(row: CheckRow) -> AnalysisCheck:
        return AnalysisCheck(
            submission_id=row.submission_id,
            course_id=row.course_id,
            assignment_id=row.assignment_id,
            status=row.status,
            similarity_score=row.similarity_score,
            matched_sources=row.matched_sources or [],
            suspicious_patterns=row.suspicious_patterns or [],
            analysis_result=row.analysis_result,
            error=row.error,
            checked_by=row.checked_by,
            created_at=row.created_at,
            updated_at=row.updated_at
        )

    def find_candidates(self, course_id: str, assignment_id: str, exclude_author_id: str) -> List[CorpusEntry]:
        with self._session("read candidates") as session:
            rows = session.execute(
                select(CorpusRow).where(
                    CorpusRow.course_id == course_id,
                    CorpusRow.assignment_id == assignment_id,
                    CorpusRow.author_id != exclude_author_id,
                    CorpusRow.is_active.is_(True)
                )
            ).scalars().all()
            entries = [self._entry_from_row(r) for r in rows]
        logger.debug(f"Found {len(entries)} candidates for course={course_id} assignment={assignment_id}")
        return entries

    def upsert(self, entry: CorpusEntry) -> None:
        values = {
            "submission_id": entry.submission_id,
            "course_id": entry.course_id,
            "assignment_id": entry.assignment_id,
            "author_id": entry.author_id,
            "text": entry.text,
            "fingerprint": entry.fingerprint,
            "word_count": entry.word_count,
            "submitted_at": entry.submitted_at,
            "is_active": entry.is_active,
        }
        with self._session("upsert corpus entry") as session:
            self._upsert_row(session, CorpusRow, values, CORPUS_REFRESH_COLUMNS)

    def get_entry(self, submission_id: str) -> Optional[CorpusEntry]:
        with self._session("read corpus entry") as session:
            row = session.get(CorpusRow, submission_id)
            return self._entry_from_row(row) if row else None

    def set_active(self, submission_id: str, active: bool) -> None:
        with self._session("update corpus entry") as session:
            result = session.execute(
                update(CorpusRow)
                .where(CorpusRow.submission_id == submission_id)
                .values(is_active=active)
            )
            if result.rowcount == 0:
                raise NotFound(submission_id, what="corpus entry")
        logger.info(f"Corpus entry {submission_id} is_active={active}")

    def save_check(self, check: AnalysisCheck) -> None:
        values = check.model_dump(mode="json")
        values["created_at"] = check.created_at
        values["updated_at"] = check.updated_at
        refresh = tuple(name for name in values if name != "submission_id")
        with self._session("save analysis check") as session:
            self._upsert_row(session, CheckRow, values, refresh)

    def get_check(self, submission_id: str) -> Optional[AnalysisCheck]:
        with self._session("read analysis check") as session:
            row = session.get(CheckRow, submission_id)
            return self._check_from_row(row) if row else None

    def list_checks(self, course_id: str) -> List[AnalysisCheck]:
        with self._session("list analysis checks") as session:
            rows = session.execute(
                select(CheckRow)
                .where(CheckRow.course_id == course_id)
                .order_by(CheckRow.updated_at.desc())
            ).scalars().all()
            return [self._check_from_row(r) for r in rows]
