"""
StudyQA MCP Server

Exposes a question-answering session as MCP tools over stdio.

Expected MCP Tool Return Format:
{
    "ok": bool,
    "results": Any,          # Present if ok is True
    "error": str,            # Present if ok is False
    "notices": List[dict]    # Notices emitted while handling the call
}
"""

import argparse
import logging
import os
import signal
from typing import Any, Dict, Optional, Annotated

from dotenv import load_dotenv
from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..common.config import load_config
from ..common.notices import CollectingNotifier
from ..retriever.synthesizer import format_answer_for_display
from ..session import QASession, SUGGESTED_QUESTIONS, pair_notifier

logger = logging.getLogger("studyqa.mcp")


class MCPServerApp:
    """
    Main application class for the MCP server.

    One session per server process; the MCP client plays the role of the
    single user.
    """
    def __init__(
            self,
            session: Optional[QASession] = None,
            mcp_server_name: str = "studyqa_mcp_server",
            notifier: Optional[CollectingNotifier] = None,
        ) -> None:
        """
        Initializes the MCPServerApp.
        Args:
            session (QASession): Session to serve. Built from load_config() when omitted.
            mcp_server_name (str): The name of the MCP server.
            notifier (CollectingNotifier): Notifier the session reports to. Defaults to
                the session's own notifier when that one collects.
        Raises:
            ValueError: If the session reports to a different notifier.
        """
        self.notifier = pair_notifier(session, notifier)
        self.session = session or QASession.from_config(load_config(), notifier=self.notifier)
        self.mcp = FastMCP(name=mcp_server_name)

        def _drain() -> list:
            return [n.to_dict() for n in self.notifier.drain()]

        # ---------- MCP Tools: Submit Corpus ---------- #
        @self.mcp.tool(
            name="submit_corpus",
            description="Load textbook content for question answering. Replaces any previously loaded content.",
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True)
        )
        async def tool_submit_corpus(
            content: Annotated[str, Field(description="plain textbook text")],
        ) -> Dict[str, Any]:
            """
            Replace the session corpus.

            Returns:
                Dict[str, Any]: ok flag, loaded character count and notices.
            """
            if not self.session.submit_corpus(content):
                return {"ok": False, "error": "Textbook content is empty", "notices": _drain()}
            return {
                "ok": True,
                "results": {"characters": len(self.session.corpus)},
                "notices": _drain(),
            }

        # ---------- MCP Tools: Ask Question ---------- #
        @self.mcp.tool(
            name="ask_question",
            description=(
                "Ask a question about the loaded textbook content. "
                "Returns a synthesized answer, a confidence score, a source excerpt "
                "and up to three related passages."
            ),
            annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False)
        )
        async def tool_ask_question(
            question: Annotated[str, Field(description="natural language question")],
        ) -> Dict[str, Any]:
            """
            Answer a question against the loaded corpus.

            Returns:
                Dict[str, Any]: the answer record and a display rendering, or an error.
            """
            record = await self.session.submit_question(question)
            notices = _drain()
            if record is None:
                error = notices[-1]["description"] if notices else "Question was not answered"
                return {"ok": False, "error": error, "notices": notices}
            return {
                "ok": True,
                "results": {
                    **record.to_dict(),
                    "formatted": format_answer_for_display(record),
                },
                "notices": notices,
            }

        # ---------- MCP Tools: Answer History ---------- #
        @self.mcp.tool(
            name="get_answer_history",
            description="List answered questions, newest first.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_get_answer_history() -> Dict[str, Any]:
            history = self.session.get_answer_history()
            return {"ok": True, "results": [r.to_dict() for r in history]}

        # ---------- MCP Tools: Session Status ---------- #
        @self.mcp.tool(
            name="has_content",
            description="Check whether textbook content is loaded, and list suggested questions.",
            annotations=ToolAnnotations(readOnlyHint=True, destructiveHint=False)
        )
        async def tool_has_content() -> Dict[str, Any]:
            return {
                "ok": True,
                "results": {
                    "has_content": self.session.has_content(),
                    "state": self.session.state.value,
                    "suggested_questions": list(SUGGESTED_QUESTIONS),
                },
            }

    def run(self) -> None:
        """Runs the MCP server using stdio transport."""
        self.mcp.run(transport="stdio")


def main() -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Run the StudyQA MCP server (stdio).")
    parser.add_argument(
        "--server-name",
        default=os.getenv("MCP_SERVER_NAME", "studyqa_mcp_server"),
        help="Advertised MCP server name.",
    )
    parser.add_argument(
        "--latency",
        type=float,
        default=None,
        help="Simulated seconds per answer (overrides config).",
    )
    args = parser.parse_args()

    config = load_config()
    # stdout carries the MCP protocol, so logs go to stderr
    logging.basicConfig(level=config.server.log_level)
    if args.latency is not None:
        config.session.latency_seconds = args.latency

    notifier = CollectingNotifier()
    app = MCPServerApp(
        session=QASession.from_config(config, notifier=notifier),
        mcp_server_name=args.server_name,
        notifier=notifier,
    )
    logger.info("Serving session over stdio (latency: %.2fs)", config.session.latency_seconds)

    def _handle_shutdown(signum, frame):
        raise SystemExit(0)
    for sig in (signal.SIGINT, getattr(signal, "SIGTERM", None)):
        if sig is not None:
            signal.signal(sig, _handle_shutdown)

    app.run()


if __name__ == "__main__":
    main()
