"""
Tests for QASession

Covers the Empty/Ready/Processing lifecycle, the answer history and the
notices emitted for each outcome.
"""

import asyncio
import pytest
from datetime import timezone
from unittest.mock import AsyncMock, Mock, patch


QUICKSORT_CORPUS = (
    "Quicksort has O(n log n) average time complexity. "
    "It uses divide and conquer."
)


@pytest.fixture
def notifier():
    from studyqa.common.notices import CollectingNotifier
    return CollectingNotifier()


@pytest.fixture
def session(notifier):
    from studyqa.session import QASession
    return QASession(notifier=notifier, latency_seconds=0)


@pytest.fixture
def loaded_session(session, notifier):
    session.submit_corpus(QUICKSORT_CORPUS)
    notifier.drain()
    return session


class TestCorpusSubmission:
    """Tests for loading textbook content"""

    def test_starts_empty(self, session):
        from studyqa.session import SessionState

        assert session.state == SessionState.EMPTY
        assert session.has_content() is False
        assert session.get_answer_history() == []

    def test_submit_corpus(self, session, notifier):
        from studyqa.session import SessionState

        assert session.submit_corpus(QUICKSORT_CORPUS) is True

        assert session.state == SessionState.READY
        assert session.has_content() is True
        assert notifier.notices[-1].title == "Content processed successfully"

    def test_corpus_is_trimmed(self, session):
        session.submit_corpus("   Heaps are trees with ordered parents.  \n")

        assert session.corpus == "Heaps are trees with ordered parents."

    def test_blank_corpus_rejected(self, session, notifier):
        from studyqa.common.notices import Severity
        from studyqa.session import SessionState

        assert session.submit_corpus("  \n\t ") is False

        assert session.state == SessionState.EMPTY
        notice = notifier.notices[-1]
        assert notice.title == "No content provided"
        assert notice.severity == Severity.DESTRUCTIVE

    def test_blank_corpus_keeps_previous_content(self, loaded_session):
        loaded_session.submit_corpus("")

        assert loaded_session.corpus == QUICKSORT_CORPUS

    def test_resubmission_replaces_corpus(self, loaded_session):
        loaded_session.submit_corpus("Graphs are made of vertices joined by edges.")

        assert loaded_session.corpus == "Graphs are made of vertices joined by edges."


class TestQuestionSubmission:
    """Tests for answering questions"""

    @pytest.mark.asyncio
    async def test_question_without_content(self, session, notifier):
        from studyqa.common.notices import Severity

        record = await session.submit_question("What is the time complexity of quicksort?")

        assert record is None
        assert session.get_answer_history() == []
        assert session.is_processing is False
        notice = notifier.notices[-1]
        assert notice.title == "No content available"
        assert notice.severity == Severity.DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_quicksort_complexity_scenario(self, loaded_session, notifier):
        record = await loaded_session.submit_question("What is the time complexity of quicksort?")

        assert record is not None
        assert "Quicksort has O(n log n) average time complexity" in record.relevant_passages
        assert record.confidence == 0.8
        assert "computational complexity theory" in record.answer
        assert record.source_context.endswith("...")
        assert loaded_session.get_answer_history() == [record]
        assert notifier.notices[-1].description == "Answer generated with 80% confidence."

    @pytest.mark.asyncio
    async def test_nonsense_question_scenario(self, loaded_session):
        from studyqa.retriever.synthesizer import NO_MATCH_ANSWER

        record = await loaded_session.submit_question("Zzyx flibber?")

        assert record.relevant_passages == ()
        assert record.answer == NO_MATCH_ANSWER
        assert record.confidence == 0.1
        assert record.source_context == ""

    @pytest.mark.asyncio
    async def test_question_is_trimmed(self, loaded_session):
        record = await loaded_session.submit_question("  divide conquer  ")

        assert record.question == "divide conquer"

    @pytest.mark.asyncio
    async def test_blank_question_rejected(self, loaded_session, notifier):
        record = await loaded_session.submit_question("   ")

        assert record is None
        assert loaded_session.get_answer_history() == []
        assert notifier.notices[-1].title == "No question provided"

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, loaded_session):
        first = await loaded_session.submit_question("divide conquer")
        second = await loaded_session.submit_question("average complexity")

        assert loaded_session.get_answer_history() == [second, first]

    @pytest.mark.asyncio
    async def test_history_is_a_snapshot(self, loaded_session):
        await loaded_session.submit_question("divide conquer")

        history = loaded_session.get_answer_history()
        history.clear()

        assert len(loaded_session.get_answer_history()) == 1

    @pytest.mark.asyncio
    async def test_timestamp_is_utc(self, loaded_session):
        record = await loaded_session.submit_question("divide conquer")

        assert record.timestamp.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_waits_simulated_latency(self, notifier):
        from studyqa.session import QASession

        session = QASession(notifier=notifier, latency_seconds=1.5)
        session.submit_corpus(QUICKSORT_CORPUS)

        with patch("studyqa.session.session.asyncio.sleep", new=AsyncMock()) as sleep:
            record = await session.submit_question("divide conquer")

        sleep.assert_awaited_once_with(1.5)
        assert record is not None


class TestProcessingFaults:
    """Tests for failure handling during processing"""

    @pytest.mark.asyncio
    async def test_synthesis_failure_is_reported(self, notifier):
        from studyqa.common.notices import Severity
        from studyqa.session import QASession, SessionState

        synthesizer = Mock()
        synthesizer.synthesize.side_effect = RuntimeError("boom")
        session = QASession(synthesizer=synthesizer, notifier=notifier, latency_seconds=0)
        session.submit_corpus(QUICKSORT_CORPUS)

        record = await session.submit_question("What is the time complexity of quicksort?")

        assert record is None
        assert session.get_answer_history() == []
        assert session.state == SessionState.READY
        assert session.is_processing is False
        notice = notifier.notices[-1]
        assert notice.title == "Error processing question"
        assert notice.severity == Severity.DESTRUCTIVE

    @pytest.mark.asyncio
    async def test_retrieval_failure_is_reported(self, notifier):
        from studyqa.session import QASession

        retriever = Mock()
        retriever.retrieve.side_effect = ValueError("bad corpus")
        session = QASession(retriever=retriever, notifier=notifier, latency_seconds=0)
        session.submit_corpus(QUICKSORT_CORPUS)

        record = await session.submit_question("divide conquer")

        assert record is None
        assert session.is_processing is False

    @pytest.mark.asyncio
    async def test_session_recovers_after_failure(self, notifier):
        from studyqa.retriever.synthesizer import Synthesizer
        from studyqa.session import QASession

        synthesizer = Mock(wraps=Synthesizer())
        session = QASession(synthesizer=synthesizer, notifier=notifier, latency_seconds=0)
        session.submit_corpus(QUICKSORT_CORPUS)

        synthesizer.synthesize.side_effect = RuntimeError("boom")
        assert await session.submit_question("divide conquer") is None

        synthesizer.synthesize.side_effect = None
        record = await session.submit_question("divide conquer")

        assert record is not None
        assert len(session.get_answer_history()) == 1

    @pytest.mark.asyncio
    async def test_duplicate_submission_rejected_while_processing(self, notifier):
        from studyqa.session import QASession, SessionState

        session = QASession(notifier=notifier, latency_seconds=0.05)
        session.submit_corpus(QUICKSORT_CORPUS)

        first = asyncio.create_task(session.submit_question("divide conquer"))
        await asyncio.sleep(0)

        assert session.state == SessionState.PROCESSING
        assert await session.submit_question("average complexity") is None
        assert notifier.notices[-1].title == "Question already in progress"

        record = await first

        assert record is not None
        assert session.get_answer_history() == [record]
        assert session.state == SessionState.READY

    @pytest.mark.asyncio
    async def test_answers_against_corpus_loaded_when_asked(self, notifier):
        from studyqa.session import QASession

        graphs = "Graphs are made of vertices joined by edges everywhere."
        session = QASession(notifier=notifier, latency_seconds=0.05)
        session.submit_corpus(QUICKSORT_CORPUS)

        task = asyncio.create_task(session.submit_question("divide conquer"))
        await asyncio.sleep(0)
        assert session.submit_corpus(graphs) is True

        record = await task

        assert record is not None
        assert record.relevant_passages == ("It uses divide and conquer",)
        assert session.corpus == graphs


class TestFromConfig:
    """Tests for building a session from configuration"""

    @pytest.mark.asyncio
    async def test_from_config(self, notifier):
        from studyqa.common.config import StudyQAConfig
        from studyqa.session import QASession

        config = StudyQAConfig()
        config.session.latency_seconds = 0
        config.retriever.top_k = 1
        session = QASession.from_config(config, notifier=notifier)
        session.submit_corpus(
            "Graphs are made of vertices joined by edges. "
            "Directed graphs have edges with a direction."
        )

        record = await session.submit_question("graphs edges")

        assert session.latency_seconds == 0
        assert record.relevant_passages == ("Graphs are made of vertices joined by edges",)


class TestNotices:
    """Tests for notice delivery"""

    def test_collecting_notifier_drain(self, notifier):
        from studyqa.common.notices import Notice

        notifier.notify(Notice(title="a", description="b"))

        drained = notifier.drain()

        assert [n.title for n in drained] == ["a"]
        assert notifier.notices == []

    def test_notice_to_dict(self):
        from studyqa.common.notices import Notice, Severity

        notice = Notice(title="t", description="d", severity=Severity.DESTRUCTIVE)

        assert notice.to_dict() == {"title": "t", "description": "d", "severity": "destructive"}

    def test_destructive_notices_logged_as_warnings(self, caplog):
        from studyqa.common.notices import LoggingNotifier, Notice, Severity

        with caplog.at_level("INFO", logger="studyqa.notices"):
            LoggingNotifier().notify(Notice(title="Oops", description="failed", severity=Severity.DESTRUCTIVE))

        assert caplog.records[-1].levelname == "WARNING"
        assert "Oops: failed" in caplog.text
