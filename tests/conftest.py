"""Shared fixtures."""

import pytest

from originality.core.config import Config
from originality.core.store import SQLCorpusStore
from originality.core.analyzer import OriginalityAnalyzer
from originality.core.types import SubmissionText


@pytest.fixture
def config():
    return Config(database_url="sqlite://")


@pytest.fixture
def store():
    return SQLCorpusStore("sqlite://")


@pytest.fixture
def analyzer(config, store):
    return OriginalityAnalyzer(config, store=store)


@pytest.fixture
def make_submission():
    def _make(submission_id, text, author_id="alice", course_id="cs101", assignment_id="hw1"):
        return SubmissionText(
            submission_id=submission_id,
            course_id=course_id,
            assignment_id=assignment_id,
            author_id=author_id,
            text=text
        )
    return _make
