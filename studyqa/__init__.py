"""
StudyQA

Textbook question answering over pasted or uploaded course material.

Philosophy:
- The corpus is plain text held by a session, replaced wholesale on upload
- Answers are reproducible: keyword-overlap retrieval plus fixed templates
- Every answer carries its supporting excerpts and a confidence score

Usage:
    from studyqa.common import load_config
    from studyqa.retriever import PassageRetriever, Synthesizer
    from studyqa.session import QASession
"""

__version__ = "0.1.0"
