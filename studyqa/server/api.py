"""
StudyQA HTTP Server

FastAPI server backing the browser front end.

Endpoints:
- GET /health: Health check
- POST /corpus: Load textbook content
- POST /questions: Ask a question
- GET /answers: Answer history, newest first
- GET /suggestions: Suggested starter questions

Every mutating endpoint returns the notices produced while handling it so
the front end can show them as toasts.
"""

import logging
from typing import Optional
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from pydantic import BaseModel

from ..common.config import load_config
from ..common.notices import CollectingNotifier
from ..session import QASession, SUGGESTED_QUESTIONS, pair_notifier

logger = logging.getLogger("studyqa.server.api")


# =============================================================================
# Request Models
# =============================================================================

class CorpusSubmission(BaseModel):
    """Textbook content upload"""
    content: str


class QuestionSubmission(BaseModel):
    """Question request"""
    question: str


# =============================================================================
# App Factory
# =============================================================================

def create_app(session: Optional[QASession] = None, notifier: Optional[CollectingNotifier] = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        session: Session to serve (default: built from load_config() on startup)
        notifier: Notifier the session reports to; drained after each request.
            Defaults to the session's own notifier when that one collects.

    Raises:
        ValueError: If the session reports to a different notifier
    """
    notifier = pair_notifier(session, notifier)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the session on startup"""
        if app.state.session is None:
            config = load_config()
            app.state.session = QASession.from_config(config, notifier=notifier)
            logger.info("Session ready (latency: %.2fs)", config.session.latency_seconds)
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title="StudyQA",
        description="Question answering over textbook content",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.session = session
    app.state.notifier = notifier

    def _session(request: Request) -> QASession:
        return request.app.state.session

    def _drain(request: Request) -> list:
        return [n.to_dict() for n in request.app.state.notifier.drain()]

    @app.get("/health")
    async def health(request: Request):
        """Health check endpoint"""
        session = _session(request)
        return {
            "status": "healthy",
            "service": "studyqa",
            "state": session.state.value,
            "has_content": session.has_content(),
            "processing": session.is_processing,
            "answers": len(session.get_answer_history()),
        }

    @app.post("/corpus")
    async def submit_corpus(request: Request, submission: CorpusSubmission):
        """Replace the loaded textbook content"""
        session = _session(request)
        ok = session.submit_corpus(submission.content)
        return {
            "ok": ok,
            "has_content": session.has_content(),
            "characters": len(session.corpus),
            "notices": _drain(request),
        }

    @app.post("/questions")
    async def submit_question(request: Request, submission: QuestionSubmission):
        """Answer a question against the loaded content"""
        session = _session(request)
        record = await session.submit_question(submission.question)
        return {
            "ok": record is not None,
            "answer": record.to_dict() if record else None,
            "notices": _drain(request),
        }

    @app.get("/answers")
    async def get_answers(request: Request):
        """Answer history, newest first"""
        history = _session(request).get_answer_history()
        return {
            "count": len(history),
            "items": [record.to_dict() for record in history],
        }

    @app.get("/suggestions")
    async def get_suggestions():
        """Suggested starter questions"""
        return {"questions": list(SUGGESTED_QUESTIONS)}

    return app


app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def run_server():
    """Run the StudyQA HTTP server"""
    import uvicorn

    load_dotenv()
    config = load_config()
    logging.basicConfig(
        level=config.server.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting server on %s:%d", config.server.host, config.server.port)
    uvicorn.run(
        "studyqa.server.api:app",
        host=config.server.host,
        port=config.server.port,
        reload=False,
    )


if __name__ == "__main__":
    run_server()
