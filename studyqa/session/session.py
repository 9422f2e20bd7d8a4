"""
Question-Answering Session

Owns the loaded textbook content and the answer history for one user.

States:
- EMPTY: no content loaded, questions are rejected
- READY: content loaded, questions are accepted
- PROCESSING: a question is being answered, further questions are rejected

Nothing escapes submit_question: every failure becomes a notice and the
session returns to READY.
"""

import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from ..common.config import StudyQAConfig
from ..common.errors import EmptyCorpusError, InvalidContentError, ProcessingFault
from ..common.notices import Notice, Notifier, LoggingNotifier, CollectingNotifier, Severity
from ..common.schemas import AnswerRecord
from ..retriever.query_processor import QueryProcessor
from ..retriever.searcher import PassageRetriever
from ..retriever.synthesizer import Synthesizer, confidence_percent

logger = logging.getLogger("studyqa.session")


SUGGESTED_QUESTIONS = [
    "What is the time complexity of quicksort?",
    "Explain the difference between breadth-first and depth-first search",
    "How does dynamic programming solve optimization problems?",
    "What are the key principles of divide and conquer algorithms?",
    "Describe the concept of computational complexity theory",
]


class SessionState(str, Enum):
    """Session lifecycle state"""
    EMPTY = "empty"
    READY = "ready"
    PROCESSING = "processing"


class QASession:
    """
    Question-answering session over a single textbook corpus.

    Usage:
        session = QASession(latency_seconds=0)
        session.submit_corpus(text)
        record = await session.submit_question("What is a heap?")
        history = session.get_answer_history()
    """

    def __init__(
        self,
        retriever: Optional[PassageRetriever] = None,
        synthesizer: Optional[Synthesizer] = None,
        notifier: Optional[Notifier] = None,
        latency_seconds: float = 1.5,
    ):
        """
        Initialize session.

        Args:
            retriever: Passage retriever (default: PassageRetriever())
            synthesizer: Answer synthesizer (default: Synthesizer())
            notifier: Receives user-facing notices (default: LoggingNotifier())
            latency_seconds: Simulated inference time per question
        """
        self._retriever = retriever or PassageRetriever()
        self._synthesizer = synthesizer or Synthesizer()
        self._notifier = notifier or LoggingNotifier()
        self._latency_seconds = latency_seconds
        self._corpus = ""
        self._history: List[AnswerRecord] = []
        self._processing = False

    @classmethod
    def from_config(cls, config: StudyQAConfig, notifier: Optional[Notifier] = None) -> "QASession":
        """Build a session with components tuned by config"""
        processor = QueryProcessor(min_keyword_length=config.retriever.min_keyword_length)
        retriever = PassageRetriever(
            query_processor=processor,
            min_sentence_length=config.retriever.min_sentence_length,
            top_k=config.retriever.top_k,
        )
        return cls(
            retriever=retriever,
            synthesizer=Synthesizer(config.synthesizer),
            notifier=notifier,
            latency_seconds=config.session.latency_seconds,
        )

    # ------------------------------------------------------------------ #
    # State
    # ------------------------------------------------------------------ #

    @property
    def corpus(self) -> str:
        return self._corpus

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    @property
    def is_processing(self) -> bool:
        return self._processing

    @property
    def latency_seconds(self) -> float:
        return self._latency_seconds

    @property
    def state(self) -> SessionState:
        if self._processing:
            return SessionState.PROCESSING
        if self.has_content():
            return SessionState.READY
        return SessionState.EMPTY

    def has_content(self) -> bool:
        """True when non-blank content is loaded"""
        return bool(self._corpus.strip())

    def get_answer_history(self) -> List[AnswerRecord]:
        """Snapshot of answered questions, newest first"""
        return list(self._history)

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def submit_corpus(self, content: str) -> bool:
        """
        Replace the loaded textbook content.

        Args:
            content: Raw textbook text

        Returns:
            True if the content was loaded, False if it was blank
        """
        try:
            self._load_corpus(content)
        except InvalidContentError:
            self._notify(
                "No content provided",
                "Please upload a file or paste some textbook content.",
                Severity.DESTRUCTIVE,
            )
            return False

        logger.info("Loaded textbook content (%d characters)", len(self._corpus))
        self._notify(
            "Content processed successfully",
            "Your textbook content is ready for question answering.",
        )
        return True

    async def submit_question(self, question: str) -> Optional[AnswerRecord]:
        """
        Answer a question against the loaded content.

        Args:
            question: User question

        Returns:
            The new AnswerRecord (also prepended to history), or None if the
            question was rejected or answering failed
        """
        question = (question or "").strip()

        if self._processing:
            self._notify(
                "Question already in progress",
                "Please wait for the current answer before asking another question.",
                Severity.DESTRUCTIVE,
            )
            return None

        try:
            self._require_content()
        except EmptyCorpusError:
            self._notify(
                "No content available",
                "Please upload textbook content first.",
                Severity.DESTRUCTIVE,
            )
            return None

        if not question:
            self._notify(
                "No question provided",
                "Please enter a question about the textbook content.",
                Severity.DESTRUCTIVE,
            )
            return None

        # Answer against the content loaded when the question was asked
        corpus = self._corpus
        self._processing = True
        try:
            record = await self._answer(question, corpus)
        except ProcessingFault as e:
            logger.error("%s", e)
            self._notify(
                "Error processing question",
                "There was an error generating the answer. Please try again.",
                Severity.DESTRUCTIVE,
            )
            return None
        finally:
            self._processing = False

        self._history.insert(0, record)
        self._notify(
            "Question answered",
            f"Answer generated with {confidence_percent(record.confidence)}% confidence.",
        )
        return record

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _load_corpus(self, content: str) -> None:
        content = (content or "").strip()
        if not content:
            raise InvalidContentError("Textbook content is empty")
        self._corpus = content

    def _require_content(self) -> None:
        if not self.has_content():
            raise EmptyCorpusError("No textbook content loaded")

    async def _answer(self, question: str, corpus: str) -> AnswerRecord:
        """Simulated inference: wait, retrieve, synthesize"""
        try:
            if self._latency_seconds > 0:
                await asyncio.sleep(self._latency_seconds)

            passages = self._retriever.retrieve(corpus, question)
            result = self._synthesizer.synthesize(question, passages)

            return AnswerRecord(
                question=question,
                answer=result.answer,
                confidence=result.confidence,
                source_context=result.source_context,
                relevant_passages=tuple(passages),
                timestamp=datetime.now(timezone.utc),
            )
        except Exception as e:
            raise ProcessingFault(question, e) from e

    def _notify(self, title: str, description: str, severity: Severity = Severity.DEFAULT) -> None:
        self._notifier.notify(Notice(title=title, description=description, severity=severity))


def pair_notifier(
    session: Optional[QASession],
    notifier: Optional[CollectingNotifier] = None,
) -> CollectingNotifier:
    """
    Notifier a server drains after each request.

    It must be the one the session reports to, otherwise the drained
    notices would always be empty.

    Raises:
        ValueError: If the session reports elsewhere
    """
    if session is None:
        return notifier or CollectingNotifier()

    if notifier is None:
        if not isinstance(session.notifier, CollectingNotifier):
            raise ValueError("session must report to a CollectingNotifier")
        return session.notifier

    if session.notifier is not notifier:
        raise ValueError("notifier is not the one the session reports to")
    return notifier
