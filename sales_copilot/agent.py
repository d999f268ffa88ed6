"""LangGraph-based research agent for the Sales Copilot.

Architecture:
  A LangGraph StateGraph with three nodes:

    1. **chatbot**     Claude with every Apollo, LinkedIn and document tool bound
    2. **tools**       executes the tool calls the LLM requests
    3. **step_limit**  closes out a turn that has used up its tool rounds

  Routing:
    chatbot → (tool calls, rounds left?)   → tools → chatbot (loop)
            → (tool calls, no rounds left) → step_limit → END
            → (no tool calls?)             → END

  Each user message gets at most ``MAX_TOOL_STEPS`` consecutive tool rounds.
  When the budget runs out the pending calls are answered with a "skipped"
  tool result, so the stored history stays valid for the next turn.

  Memory:
    Conversation state is managed per session via LangGraph's MemorySaver
    checkpoint, enabling multi-turn conversations across API calls.
"""

from __future__ import annotations

import logging
import time
from typing import Annotated

from langchain_anthropic import ChatAnthropic
from langchain_core.messages import AIMessage, AnyMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.checkpoint.memory import MemorySaver
from langgraph.graph import END, StateGraph
from langgraph.graph.message import add_messages
from langgraph.prebuilt import ToolNode
from typing_extensions import TypedDict

from sales_copilot.config import MODEL_NAME, get_settings
from sales_copilot.prompts import get_system_prompt
from sales_copilot.services.metrics import metrics
from sales_copilot.tools.apollo import APOLLO_TOOLS
from sales_copilot.tools.documents import DOCUMENT_TOOLS
from sales_copilot.tools.unipile import UNIPILE_TOOLS

logger = logging.getLogger(__name__)

MAX_TOOL_STEPS = 5

STEP_LIMIT_REPLY = (
    "I've reached the limit of research steps for a single message. "
    "Ask me to continue and I'll pick up where I left off."
)
SKIPPED_TOOL_RESULT = "Skipped: tool step limit reached for this message."


# ── State schema ─────────────────────────────────────────────────────


class AgentState(TypedDict):
    """The state that flows through the graph.

    ``messages`` uses the LangGraph ``add_messages`` reducer so that each
    node can append messages without overwriting the full history.
    """

    messages: Annotated[list[AnyMessage], add_messages]


# ── All tools the agent can use ──────────────────────────────────────

ALL_TOOLS = [*APOLLO_TOOLS, *UNIPILE_TOOLS, *DOCUMENT_TOOLS]


# ── LLM builder ─────────────────────────────────────────────────────


def _build_llm() -> ChatAnthropic:
    """Build the primary LLM with every tool bound."""
    llm = ChatAnthropic(
        model=MODEL_NAME,
        api_key=get_settings().anthropic_api_key,
        temperature=0.1,
        max_tokens=4096,
    )
    return llm.bind_tools(ALL_TOOLS)


def tool_rounds(messages: list[AnyMessage]) -> int:
    """Count the tool-calling AI turns since the latest human message."""
    rounds = 0
    for msg in reversed(messages):
        if isinstance(msg, HumanMessage):
            break
        if isinstance(msg, AIMessage) and msg.tool_calls:
            rounds += 1
    return rounds


# ── Nodes ───────────────────────────────────────────────────────────


def _make_chatbot_node():
    """Create the chatbot node.

    The LLM + tool bindings are captured in the closure so that repeated
    node invocations (chatbot -> tool -> chatbot -> ...) share one client
    instead of re-constructing it on every loop iteration.
    """
    llm_with_tools = _build_llm()

    def chatbot_node(state: AgentState) -> dict:
        """Invoke the LLM with the current conversation history."""
        logger.debug("chatbot node invoked (model: %s)", MODEL_NAME)
        system = SystemMessage(content=get_system_prompt())
        t0 = time.perf_counter()
        try:
            response = llm_with_tools.invoke([system] + state["messages"])
            elapsed = (time.perf_counter() - t0) * 1000
            metrics.record_success("anthropic", "llm_invoke", latency_ms=elapsed)
            logger.debug("chatbot responded in %.0fms", elapsed)
            return {"messages": [response]}
        except Exception as exc:
            elapsed = (time.perf_counter() - t0) * 1000
            metrics.record_failure(
                "anthropic", "llm_invoke",
                error_type=type(exc).__name__, latency_ms=elapsed,
            )
            raise

    return chatbot_node


def step_limit_node(state: AgentState) -> dict:
    """Answer the pending tool calls as skipped and end the turn."""
    last_message = state["messages"][-1]
    logger.info(
        "Tool step limit (%d) reached, skipping %d call(s)",
        MAX_TOOL_STEPS, len(last_message.tool_calls),
    )
    skipped = [
        ToolMessage(
            content=SKIPPED_TOOL_RESULT,
            tool_call_id=call["id"],
            name=call["name"],
        )
        for call in last_message.tool_calls
    ]
    return {"messages": [*skipped, AIMessage(content=STEP_LIMIT_REPLY)]}


# ── Conditional edges ────────────────────────────────────────────────


def should_use_tools(state: AgentState) -> str:
    """Route tool calls to the tools node while the turn has rounds left."""
    last_message = state["messages"][-1]
    if not (hasattr(last_message, "tool_calls") and last_message.tool_calls):
        return END
    if tool_rounds(state["messages"]) > MAX_TOOL_STEPS:
        return "step_limit"
    return "tools"


# ── Graph assembly ───────────────────────────────────────────────────


def create_sales_copilot_agent():
    """Build and compile the Sales Copilot LangGraph agent.

    Returns a compiled graph that can be invoked with:
        graph.invoke(
            {"messages": [HumanMessage(content="...")]},
            config={"configurable": {"thread_id": "session-123"}},
        )
    """
    graph = StateGraph(AgentState)

    graph.add_node("chatbot", _make_chatbot_node())
    graph.add_node("tools", ToolNode(ALL_TOOLS))
    graph.add_node("step_limit", step_limit_node)

    graph.set_entry_point("chatbot")
    graph.add_conditional_edges(
        "chatbot",
        should_use_tools,
        {"tools": "tools", "step_limit": "step_limit", END: END},
    )
    graph.add_edge("tools", "chatbot")
    graph.add_edge("step_limit", END)

    # Compile with memory checkpointer for multi-turn conversations
    memory = MemorySaver()
    compiled = graph.compile(checkpointer=memory)

    logger.debug("Sales Copilot agent compiled (model: %s, tools: %d)", MODEL_NAME, len(ALL_TOOLS))
    return compiled
