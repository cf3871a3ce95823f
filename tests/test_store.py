"""Tests for the SQL corpus store."""

import pytest
from datetime import datetime, timedelta, timezone

from originality.core.errors import NotFound, StoreFailure
from originality.core.fingerprint import fingerprint
from originality.core.models import Base
from originality.core.types import AnalysisCheck, CheckStatus, CorpusEntry, MatchedSource

PLUS_FIVE = timezone(timedelta(hours=5))


def entry(submission_id, author_id="bob", text="some words here", course_id="cs101",
          assignment_id="hw1", **kwargs):
    return CorpusEntry(
        submission_id=submission_id,
        course_id=course_id,
        assignment_id=assignment_id,
        author_id=author_id,
        text=text,
        fingerprint=fingerprint(text),
        word_count=len(text.split()),
        **kwargs
    )


class TestCorpusEntries:
    """Test cases for corpus entry storage."""

    def test_upsert_and_get(self, store):
        """Test that an upserted entry can be read back."""
        store.upsert(entry("s1"))
        stored = store.get_entry("s1")

        assert stored.text == "some words here"
        assert stored.fingerprint == fingerprint("some words here")
        assert stored.word_count == 3
        assert stored.is_active
        assert stored.submitted_at.tzinfo is not None

    def test_get_missing_entry(self, store):
        """Test that an unknown submission has no entry."""
        assert store.get_entry("nope") is None

    def test_upsert_overwrites(self, store):
        """Test that a second upsert refreshes the same row."""
        first = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store.upsert(entry("s1", text="old text", submitted_at=first))
        store.upsert(entry("s1", text="brand new text body", submitted_at=first + timedelta(days=1)))

        stored = store.get_entry("s1")
        assert stored.text == "brand new text body"
        assert stored.fingerprint == fingerprint("brand new text body")
        assert stored.word_count == 4
        assert stored.submitted_at == first + timedelta(days=1)
        assert len(store.find_candidates("cs101", "hw1", "someone-else")) == 1

    def test_offset_timestamp_keeps_its_instant(self, store):
        """Test that a non-UTC submitted_at is stored as the same instant."""
        submitted = datetime(2024, 1, 1, 12, tzinfo=PLUS_FIVE)
        store.upsert(entry("s1", submitted_at=submitted))

        stored = store.get_entry("s1").submitted_at
        assert stored == submitted
        assert stored == datetime(2024, 1, 1, 7, tzinfo=timezone.utc)
        assert stored.utcoffset() == timedelta(0)

    def test_offset_timestamp_survives_overwrite(self, store):
        """Test that the conflict-update path also converts to UTC."""
        store.upsert(entry("s1"))
        submitted = datetime(2024, 3, 1, 23, 30, tzinfo=PLUS_FIVE)
        store.upsert(entry("s1", submitted_at=submitted))

        assert store.get_entry("s1").submitted_at == submitted

    def test_naive_timestamp_is_read_as_utc(self, store):
        """Test that a naive submitted_at is treated as UTC."""
        store.upsert(entry("s1", submitted_at=datetime(2024, 1, 1, 12)))
        assert store.get_entry("s1").submitted_at == datetime(2024, 1, 1, 12, tzinfo=timezone.utc)

    def test_find_candidates_scoping(self, store):
        """Test that candidates are limited to active peer work of one assignment."""
        store.upsert(entry("own", author_id="alice"))
        store.upsert(entry("peer", author_id="bob"))
        store.upsert(entry("other-course", author_id="bob", course_id="cs202"))
        store.upsert(entry("other-assignment", author_id="bob", assignment_id="hw2"))
        store.upsert(entry("inactive", author_id="carol", is_active=False))

        candidates = store.find_candidates("cs101", "hw1", "alice")
        assert [c.submission_id for c in candidates] == ["peer"]

    def test_set_active(self, store):
        """Test excluding and re-including an entry."""
        store.upsert(entry("s1"))

        store.set_active("s1", False)
        assert store.find_candidates("cs101", "hw1", "alice") == []

        store.set_active("s1", True)
        assert len(store.find_candidates("cs101", "hw1", "alice")) == 1

    def test_set_active_unknown_submission(self, store):
        """Test that toggling an unknown entry raises NotFound."""
        with pytest.raises(NotFound):
            store.set_active("missing", False)


class TestChecks:
    """Test cases for analysis check records."""

    def test_save_and_get(self, store):
        """Test that a saved check can be read back."""
        check = AnalysisCheck(
            submission_id="s1",
            course_id="cs101",
            assignment_id="hw1",
            status=CheckStatus.COMPLETED,
            similarity_score=42.5,
            matched_sources=[MatchedSource(
                source_submission_id="s0",
                similarity=70.0,
                author_id="bob",
                submitted_at=datetime(2024, 1, 1, tzinfo=timezone.utc)
            )],
            checked_by="prof"
        )
        store.save_check(check)

        stored = store.get_check("s1")
        assert stored.status == CheckStatus.COMPLETED
        assert stored.similarity_score == 42.5
        assert stored.matched_sources[0].source_submission_id == "s0"
        assert stored.checked_by == "prof"
        assert stored.analysis_result is None

    def test_save_overwrites(self, store):
        """Test that saving again replaces the earlier record."""
        store.save_check(AnalysisCheck(submission_id="s1", course_id="cs101", status=CheckStatus.PROCESSING))
        store.save_check(AnalysisCheck(
            submission_id="s1",
            course_id="cs101",
            status=CheckStatus.FAILED,
            error={"error": "boom"}
        ))

        assert store.get_check("s1").status == CheckStatus.FAILED
        assert store.get_check("s1").error == {"error": "boom"}
        assert len(store.list_checks("cs101")) == 1

    def test_offset_timestamps_keep_their_instant(self, store):
        """Test that non-UTC created_at and updated_at are stored as the same instant."""
        created = datetime(2024, 1, 1, 12, tzinfo=PLUS_FIVE)
        updated = created + timedelta(minutes=3)
        store.save_check(AnalysisCheck(submission_id="s1", created_at=created, updated_at=updated))

        stored = store.get_check("s1")
        assert stored.created_at == created
        assert stored.updated_at == updated
        assert stored.created_at.utcoffset() == timedelta(0)

    def test_list_checks_by_course(self, store):
        """Test that checks are listed per course, most recently updated first."""
        now = datetime(2024, 1, 1, tzinfo=timezone.utc)
        store.save_check(AnalysisCheck(submission_id="a", course_id="cs101", updated_at=now))
        store.save_check(AnalysisCheck(submission_id="b", course_id="cs101", updated_at=now + timedelta(hours=1)))
        store.save_check(AnalysisCheck(submission_id="c", course_id="cs202"))

        assert [c.submission_id for c in store.list_checks("cs101")] == ["b", "a"]

    def test_list_checks_orders_by_instant(self, store):
        """Test that ordering follows the instant, not the local wall clock."""
        # 10:00+05:00 is 05:00 UTC, earlier than 06:00 UTC
        store.save_check(AnalysisCheck(
            submission_id="early", course_id="cs101",
            updated_at=datetime(2024, 1, 1, 10, tzinfo=PLUS_FIVE)
        ))
        store.save_check(AnalysisCheck(
            submission_id="late", course_id="cs101",
            updated_at=datetime(2024, 1, 1, 6, tzinfo=timezone.utc)
        ))

        assert [c.submission_id for c in store.list_checks("cs101")] == ["late", "early"]

    def test_get_missing_check(self, store):
        """Test that an unknown submission has no check."""
        assert store.get_check("nope") is None


def test_database_errors_become_store_failures(store):
    """Test that SQLAlchemy errors surface as StoreFailure."""
    Base.metadata.drop_all(store.engine)

    with pytest.raises(StoreFailure):
        store.find_candidates("cs101", "hw1", "alice")
    with pytest.raises(StoreFailure):
        store.upsert(entry("s1"))
