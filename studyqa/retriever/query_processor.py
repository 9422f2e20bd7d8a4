"""
Query Processor

Splits textbook content into candidate sentences and reduces a question to
the keywords used for overlap scoring.
"""

import re
from typing import Iterable, List
from dataclasses import dataclass, field

# Runs of sentence terminators
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

# Interrogatives and connectives that carry no topical signal
STOP_WORDS = frozenset({
    "what", "how", "why", "when", "where", "which", "does", "the", "and", "or",
})


@dataclass
class ParsedQuestion:
    """Parsed representation of a user question"""
    original: str
    cleaned: str
    keywords: List[str] = field(default_factory=list)


def split_sentences(corpus: str, min_length: int = 20) -> List[str]:
    """
    Split corpus text into candidate sentences.

    Pieces between runs of '.', '!' or '?' are trimmed and kept only when
    longer than ``min_length`` characters. Corpus order is preserved.
    """
    if not corpus:
        return []

    sentences = []
    for piece in SENTENCE_SPLIT_RE.split(corpus):
        piece = piece.strip()
        if len(piece) > min_length:
            sentences.append(piece)
    return sentences


def extract_keywords(
    question: str,
    min_length: int = 3,
    stop_words: Iterable[str] = STOP_WORDS,
) -> List[str]:
    """
    Extract the question keyword set.

    Lower-cases, splits on whitespace and drops short tokens and stop words.
    Tokens keep any attached punctuation. Duplicates are collapsed so a
    repeated word cannot score twice.
    """
    stop = set(stop_words)
    keywords: List[str] = []
    seen = set()

    for token in question.lower().split():
        if len(token) <= min_length or token in stop:
            continue
        if token not in seen:
            seen.add(token)
            keywords.append(token)

    return keywords


class QueryProcessor:
    """
    Processes user questions for passage retrieval.

    Responsibilities:
    1. Normalize question text
    2. Extract keywords for overlap scoring
    """

    def __init__(self, min_keyword_length: int = 3, stop_words: Iterable[str] = STOP_WORDS):
        self._min_keyword_length = min_keyword_length
        self._stop_words = frozenset(stop_words)

    def parse(self, question: str) -> ParsedQuestion:
        """
        Parse a user question into structured form.

        Args:
            question: Raw user question string

        Returns:
            ParsedQuestion with cleaned text and keywords
        """
        cleaned = question.strip().lower()
        keywords = extract_keywords(
            question,
            min_length=self._min_keyword_length,
            stop_words=self._stop_words,
        )
        return ParsedQuestion(original=question, cleaned=cleaned, keywords=keywords)
