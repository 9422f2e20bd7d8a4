"""
StudyQA Common Module

Shared infrastructure for the retriever, the session and the servers.
"""

from .config import StudyQAConfig, load_config, save_config
from .errors import StudyQAError, EmptyCorpusError, InvalidContentError, ProcessingFault
from .notices import Notice, Severity, Notifier, LoggingNotifier, CollectingNotifier
from .schemas import AnswerRecord

__all__ = [
    "StudyQAConfig",
    "load_config",
    "save_config",
    "StudyQAError",
    "EmptyCorpusError",
    "InvalidContentError",
    "ProcessingFault",
    "Notice",
    "Severity",
    "Notifier",
    "LoggingNotifier",
    "CollectingNotifier",
    "AnswerRecord",
]
