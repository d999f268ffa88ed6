"""Terminal session with the Sales Copilot, for development.

Usage:
    sales-copilot                      # quiet
    sales-copilot --debug              # log every Apollo / Unipile call
    sales-copilot --session acme-q3    # reuse a named conversation

Inside the session, ``/doc <id>`` prints a drafted document with its
suggestions, ``/new`` starts a fresh conversation and ``/quit`` exits.
"""

from __future__ import annotations

import argparse
import logging
import uuid

from dotenv import load_dotenv
from langchain_core.messages import HumanMessage

from sales_copilot.agent import create_sales_copilot_agent
from sales_copilot.api.routes import message_text, turn_activity
from sales_copilot.config import get_settings
from sales_copilot.services.document_store import document_store

logger = logging.getLogger(__name__)

PROMPT = "you> "


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )
    if not debug:
        for noisy in ("httpx", "httpcore", "anthropic"):
            logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("sales_copilot").setLevel(logging.DEBUG if debug else logging.INFO)


def render_document(document_id: str) -> str:
    """Plain-text view of a stored document and its open suggestions."""
    document = document_store.get_document(document_id)
    if document is None:
        return f"No document with id {document_id}"
    lines = [f"== {document.title} ==", document.content]
    open_suggestions = [
        s for s in document_store.get_suggestions(document_id) if not s.is_resolved
    ]
    if open_suggestions:
        lines.append("")
        lines.append(f"-- {len(open_suggestions)} suggestion(s) --")
        for s in open_suggestions:
            lines.append(f"* {s.description}")
            lines.append(f"  - {s.original_text}")
            lines.append(f"  + {s.suggested_text}")
    return "\n".join(lines)


def _run_turn(agent, session_id: str, text: str) -> None:
    result = agent.invoke(
        {"messages": [HumanMessage(content=text)]},
        config={"configurable": {"thread_id": session_id}},
    )
    messages = result.get("messages", [])
    if not messages:
        print("copilot> (no reply, try rephrasing)\n")
        return

    print(f"\ncopilot> {message_text(messages[-1])}")
    tools_used, documents = turn_activity(messages)
    if tools_used:
        print(f"         [tools: {', '.join(tools_used)}]")
    for doc in documents:
        print(f"         [document: {doc.title}  (/doc {doc.id})]")
    print()


def main():
    parser = argparse.ArgumentParser(description="Chat with the Sales Copilot in a terminal")
    parser.add_argument("--debug", action="store_true", help="log HTTP calls and agent steps")
    parser.add_argument("--session", help="conversation id to use instead of a random one")
    args = parser.parse_args()

    load_dotenv()
    _configure_logging(args.debug)

    try:
        get_settings()
    except OSError as e:
        print(f"Configuration error: {e}")
        return

    agent = create_sales_copilot_agent()
    session_id = args.session or uuid.uuid4().hex
    print(f"Sales Copilot (session {session_id[:8]}). /doc <id>, /new, /quit\n")

    while True:
        try:
            text = input(PROMPT).strip()
        except (KeyboardInterrupt, EOFError):
            print()
            break

        if not text:
            continue
        if text in ("/quit", "/exit"):
            break
        if text == "/new":
            session_id = uuid.uuid4().hex
            print(f"(new session {session_id[:8]})\n")
            continue
        if text.startswith("/doc"):
            document_id = text[len("/doc"):].strip()
            print(render_document(document_id) if document_id else "usage: /doc <id>")
            print()
            continue

        try:
            _run_turn(agent, session_id, text)
        except KeyboardInterrupt:
            print("\n(turn interrupted)\n")
        except Exception as e:
            logger.exception("Copilot turn failed")
            print(f"\ncopilot> Something went wrong: {e}\n")


if __name__ == "__main__":
    main()
