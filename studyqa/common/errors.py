"""Error types raised inside a question-answering session."""


class StudyQAError(Exception):
    """Base class for StudyQA errors."""
    pass


class EmptyCorpusError(StudyQAError):
    """A question was asked before any textbook content was loaded."""
    pass


class InvalidContentError(StudyQAError):
    """Submitted textbook content was blank."""
    pass


class ProcessingFault(StudyQAError):
    """Retrieval or synthesis failed unexpectedly while answering a question."""

    def __init__(self, question: str, cause: Exception):
        super().__init__(f"Failed to answer {question!r}: {cause}")
        self.question = question
        self.cause = cause
