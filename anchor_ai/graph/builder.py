"""Graph builder: constructs the LangGraph decision topology.

Topology:

    START → render_prompt → call_model
               ├── "parse"    → parse_reply
               │                   ├── "end"      → END
               │                   └── "fallback" → apply_fallback
               └── "fallback" → apply_fallback → END

The graph is compiled once and can be invoked many times.
"""

from __future__ import annotations

from langgraph.graph import END, START, StateGraph

from anchor_ai.graph.nodes import (
    LLMFactory,
    apply_fallback,
    make_call_model,
    make_render_prompt,
    parse_reply,
    route_after_model,
    route_after_parse,
)
from anchor_ai.graph.state import DecisionState


def build_decision_graph(
    llm_factory: LLMFactory,
    timeout_seconds: float = 20.0,
    consistency_days: int = 7,
):
    """Construct and compile the decision graph.

    Args:
        llm_factory: Callable returning a langchain BaseChatModel
                     (e.g. ChatGoogleGenerativeAI for Gemini Flash).
        timeout_seconds: Upper bound on the model call.
        consistency_days: Window of the consistency score in the prompt.

    Returns:
        A compiled LangGraph application.
    """
    graph = StateGraph(DecisionState)

    # ── Register nodes ───────────────────────────────────────────────────
    graph.add_node("render_prompt", make_render_prompt(consistency_days))
    graph.add_node("call_model", make_call_model(llm_factory, timeout_seconds))
    graph.add_node("parse_reply", parse_reply)
    graph.add_node("apply_fallback", apply_fallback)

    # ── Edges ────────────────────────────────────────────────────────────
    graph.add_edge(START, "render_prompt")
    graph.add_edge("render_prompt", "call_model")
    graph.add_edge("apply_fallback", END)

    # ── Conditional routing ──────────────────────────────────────────────
    graph.add_conditional_edges(
        "call_model",
        route_after_model,
        {
            "parse": "parse_reply",
            "fallback": "apply_fallback",
        },
    )
    graph.add_conditional_edges(
        "parse_reply",
        route_after_parse,
        {
            "end": END,
            "fallback": "apply_fallback",
        },
    )

    return graph.compile()
