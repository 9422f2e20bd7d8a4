"""
Searcher

Keyword-overlap passage retrieval over a single textbook corpus.

Each candidate sentence scores one point per distinct question keyword it
contains (case-insensitive substring match). Sentences with no overlap are
dropped, the rest are ranked by score with ties kept in corpus order.
"""

import logging
from typing import List
from dataclasses import dataclass

from .query_processor import QueryProcessor, split_sentences

logger = logging.getLogger("studyqa.retriever.searcher")


@dataclass(frozen=True)
class ScoredSentence:
    """A candidate sentence with its keyword overlap score"""
    sentence: str
    score: int

    @property
    def is_relevant(self) -> bool:
        return self.score > 0


class PassageRetriever:
    """
    Finds the sentences of a corpus most relevant to a question.

    Stateless: identical inputs always give identical output.
    """

    def __init__(
        self,
        query_processor: QueryProcessor = None,
        min_sentence_length: int = 20,
        top_k: int = 3,
    ):
        """
        Initialize retriever.

        Args:
            query_processor: Keyword extractor (default: QueryProcessor())
            min_sentence_length: Sentences must be longer than this to be candidates
            top_k: Maximum number of passages returned
        """
        self._processor = query_processor or QueryProcessor()
        self._min_sentence_length = min_sentence_length
        self._top_k = top_k

    @property
    def top_k(self) -> int:
        return self._top_k

    def score(self, corpus: str, question: str) -> List[ScoredSentence]:
        """Score every candidate sentence, in corpus order."""
        sentences = split_sentences(corpus, min_length=self._min_sentence_length)
        keywords = self._processor.parse(question).keywords

        scored = []
        for sentence in sentences:
            lowered = sentence.lower()
            score = sum(1 for kw in keywords if kw in lowered)
            scored.append(ScoredSentence(sentence=sentence, score=score))
        return scored

    def retrieve(self, corpus: str, question: str) -> List[str]:
        """
        Return up to top_k relevant passages, best first.

        Args:
            corpus: Textbook content
            question: User question

        Returns:
            Sentences with score > 0, sorted by descending score (stable)
        """
        relevant = [s for s in self.score(corpus, question) if s.is_relevant]
        # sorted() is stable, so equal scores keep corpus order
        ranked = sorted(relevant, key=lambda s: s.score, reverse=True)
        passages = [s.sentence for s in ranked[:self._top_k]]

        logger.debug("Retrieved %d/%d passages for %r", len(passages), len(relevant), question)
        return passages


_default_retriever = PassageRetriever()


def retrieve(corpus: str, question: str) -> List[str]:
    """Retrieve passages with the default settings."""
    return _default_retriever.retrieve(corpus, question)
