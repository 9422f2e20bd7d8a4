"""
Notices

User-facing notification side-channel ("toasts").

Every notice carries a title, a description and a severity. Notices are
advisory: the session emits them for uploads, rejections and completed or
failed questions, and the surfaces decide how to show them.
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import List, Protocol

logger = logging.getLogger("studyqa.notices")


class Severity(str, Enum):
    """Notice severity"""
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notice:
    """A single user-facing notification"""
    title: str
    description: str
    severity: Severity = Severity.DEFAULT

    def to_dict(self) -> dict:
        data = asdict(self)
        data["severity"] = self.severity.value
        return data


class Notifier(Protocol):
    """Anything that can receive notices from a session"""

    def notify(self, notice: Notice) -> None:
        ...


class LoggingNotifier:
    """Writes notices to the log. Destructive notices are logged as warnings."""

    def notify(self, notice: Notice) -> None:
        level = logging.WARNING if notice.severity == Severity.DESTRUCTIVE else logging.INFO
        logger.log(level, "%s: %s", notice.title, notice.description)


class CollectingNotifier(LoggingNotifier):
    """
    Logs notices and keeps them in memory.

    The servers drain it after each request so the caller receives the
    notices produced by that request.
    """

    def __init__(self):
        self._notices: List[Notice] = []

    def notify(self, notice: Notice) -> None:
        super().notify(notice)
        self._notices.append(notice)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    def drain(self) -> List[Notice]:
        """Return collected notices and forget them"""
        drained, self._notices = self._notices, []
        return drained
