"""
Synthesizer

Template-based answer synthesis from retrieved passages.

Rules are checked in a fixed order against the lower-cased question and the
first match wins:
1. no passages          -> apology, low confidence, no source context
2. complexity questions -> complexity template
3. algorithm questions  -> algorithm template
4. dynamic programming  -> dynamic programming template
5. anything else        -> excerpt of the best passage, confidence grows
                           with the number of passages
"""

import math
import logging
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass

from ..common.config import SynthesizerConfig
from ..common.schemas import AnswerRecord

logger = logging.getLogger("studyqa.retriever.synthesizer")


@dataclass
class SynthesizedAnswer:
    """Synthesized answer for one question"""
    answer: str
    confidence: float  # 0.0 to 1.0
    source_context: str


@dataclass(frozen=True)
class AnswerRule:
    """A templated answer triggered by substrings of the question"""
    name: str
    triggers: Tuple[str, ...]
    template: str
    confidence: float

    def matches(self, question_lower: str) -> bool:
        return any(trigger in question_lower for trigger in self.triggers)


NO_MATCH_ANSWER = (
    "I couldn't find relevant information in the provided textbook content "
    "to answer this question."
)

GENERIC_ANSWER_PREFIX = "Based on the textbook content, "

ELLIPSIS = "..."

# Checked in order. "complexity" covers "time complexity" and wins over
# "dynamic programming" when a question mentions both.
ANSWER_RULES: Tuple[AnswerRule, ...] = (
    AnswerRule(
        name="complexity",
        triggers=("time complexity", "complexity"),
        template=(
            "Based on the textbook content, the time complexity analysis involves examining "
            "how the algorithm's runtime grows with input size. The relevant section discusses "
            "algorithmic efficiency and computational complexity theory."
        ),
        confidence=0.8,
    ),
    AnswerRule(
        name="algorithm",
        triggers=("algorithm", "search", "sort"),
        template=(
            "According to the textbook, this algorithmic concept involves systematic "
            "problem-solving approaches. The text describes various techniques and their "
            "applications in computer science."
        ),
        confidence=0.75,
    ),
    AnswerRule(
        name="dynamic_programming",
        triggers=("dynamic programming",),
        template=(
            "Dynamic programming is an optimization technique described in the textbook that "
            "solves complex problems by breaking them down into simpler subproblems. It stores "
            "the results of subproblems to avoid redundant calculations."
        ),
        confidence=0.85,
    ),
)


class Synthesizer:
    """
    Synthesizes answers from ranked passages.

    Pure: no randomness, no external calls.
    """

    def __init__(
        self,
        config: Optional[SynthesizerConfig] = None,
        rules: Sequence[AnswerRule] = ANSWER_RULES,
    ):
        """
        Initialize synthesizer.

        Args:
            config: Tuning constants (default: SynthesizerConfig())
            rules: Ordered templated rules
        """
        self._config = config or SynthesizerConfig()
        self._rules = tuple(rules)

    @property
    def rules(self) -> Tuple[AnswerRule, ...]:
        return self._rules

    def match_rule(self, question: str) -> Optional[AnswerRule]:
        """First templated rule triggered by the question, if any"""
        question_lower = question.lower()
        for rule in self._rules:
            if rule.matches(question_lower):
                return rule
        return None

    def synthesize(self, question: str, passages: Sequence[str]) -> SynthesizedAnswer:
        """
        Synthesize an answer from retrieved passages.

        Args:
            question: Raw user question
            passages: Passages from the retriever, best first

        Returns:
            SynthesizedAnswer with answer text, confidence and source context
        """
        cfg = self._config

        if not passages:
            return SynthesizedAnswer(
                answer=NO_MATCH_ANSWER,
                confidence=cfg.no_match_confidence,
                source_context="",
            )

        best = passages[0]
        source_context = best[:cfg.context_excerpt_length] + ELLIPSIS

        rule = self.match_rule(question)
        if rule is not None:
            logger.debug("Question matched rule %s", rule.name)
            return SynthesizedAnswer(
                answer=rule.template,
                confidence=rule.confidence,
                source_context=source_context,
            )

        answer = GENERIC_ANSWER_PREFIX + best[:cfg.answer_excerpt_length] + ELLIPSIS
        return SynthesizedAnswer(
            answer=answer,
            confidence=self._calculate_confidence(len(passages)),
            source_context=source_context,
        )

    def _calculate_confidence(self, passage_count: int) -> float:
        """Generic-answer confidence: grows with passage count, capped"""
        cfg = self._config
        confidence = min(
            cfg.fallback_confidence_cap,
            cfg.fallback_base_confidence + cfg.fallback_confidence_step * passage_count,
        )
        return round(confidence, 2)


_default_synthesizer = Synthesizer()


def synthesize(question: str, passages: Sequence[str]) -> SynthesizedAnswer:
    """Synthesize with the default rules and constants."""
    return _default_synthesizer.synthesize(question, passages)


def confidence_percent(confidence: float) -> int:
    """Confidence as a whole percentage, halves rounded up"""
    return int(math.floor(confidence * 100 + 0.5))


def confidence_label(confidence: float) -> str:
    """Badge text for a confidence score"""
    if confidence >= 0.8:
        return "High Confidence"
    if confidence >= 0.6:
        return "Medium Confidence"
    return "Low Confidence"


def format_answer_for_display(record: AnswerRecord) -> str:
    """Format an answer record for CLI/UI display"""
    lines = [
        f"**Q**: {record.question}",
        "",
        record.answer,
        "",
        f"**Confidence**: {confidence_label(record.confidence)} ({confidence_percent(record.confidence)}%)",
        f"**Asked**: {record.timestamp.strftime('%H:%M:%S')}",
    ]

    if record.source_context:
        lines.append("")
        lines.append("**Source Context**:")
        lines.append(f'  "{record.source_context}"')

    if record.relevant_passages:
        lines.append("")
        lines.append("**Related Textbook Passages**:")
        for passage in record.relevant_passages:
            lines.append(f"  - {passage}")

    return "\n".join(lines)


def format_history_for_display(records: List[AnswerRecord]) -> str:
    """Format a whole answer history, newest first"""
    return "\n\n---\n\n".join(format_answer_for_display(r) for r in records)
