"""
Answer Record Schema

One answered question with its supporting passages. Records are created
once by a session and never modified.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class AnswerRecord:
    """An answered question"""
    question: str
    answer: str
    confidence: float  # 0.0 to 1.0
    source_context: str
    relevant_passages: Tuple[str, ...] = ()
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serialisable form"""
        return {
            "question": self.question,
            "answer": self.answer,
            "confidence": self.confidence,
            "source_context": self.source_context,
            "relevant_passages": list(self.relevant_passages),
            "timestamp": self.timestamp.isoformat(),
        }
