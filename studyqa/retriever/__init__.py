"""
Retriever - Textbook Passage Retrieval and Answer Synthesis

Key Components:
- QueryProcessor: Splits the corpus and extracts question keywords
- PassageRetriever: Ranks sentences by keyword overlap
- Synthesizer: Rule-based answer synthesis from ranked passages

Pipeline:
1. Split corpus into candidate sentences
2. Score sentences against question keywords
3. Keep the top 3 overlapping sentences
4. Synthesize answer, confidence and source context
"""

from .query_processor import QueryProcessor, ParsedQuestion, split_sentences, extract_keywords
from .searcher import PassageRetriever, ScoredSentence, retrieve
from .synthesizer import (
    Synthesizer,
    SynthesizedAnswer,
    AnswerRule,
    ANSWER_RULES,
    synthesize,
    confidence_label,
    confidence_percent,
    format_answer_for_display,
)

__all__ = [
    "QueryProcessor",
    "ParsedQuestion",
    "split_sentences",
    "extract_keywords",
    "PassageRetriever",
    "ScoredSentence",
    "retrieve",
    "Synthesizer",
    "SynthesizedAnswer",
    "AnswerRule",
    "ANSWER_RULES",
    "synthesize",
    "confidence_label",
    "confidence_percent",
    "format_answer_for_display",
]
