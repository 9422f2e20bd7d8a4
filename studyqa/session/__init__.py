"""
Session - Question-Answering Orchestration

Holds the textbook corpus and answer history, runs retrieval and synthesis
for each question and reports outcomes as notices.
"""

from .session import QASession, SessionState, SUGGESTED_QUESTIONS, pair_notifier

__all__ = [
    "QASession",
    "SessionState",
    "SUGGESTED_QUESTIONS",
    "pair_notifier",
]
