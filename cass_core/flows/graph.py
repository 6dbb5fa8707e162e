"""LangGraph construction and node implementations for a single turn.

route -> ask_location | search | complete -> END

Nodes never raise on backend failures: a BusinessError is logged with the
query (and prompt, when one was built) and turned into a fixed reply.
"""

from __future__ import annotations

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from cass_core.domain.conversation import InMemoryConversationStore
from cass_core.domain.exceptions import BusinessError
from cass_core.domain.models import RoutingDecision
from cass_core.flows.state import TurnState
from cass_core.infrastructure.logging.logger import logger
from cass_core.prompts import MAX_CONTEXT_MESSAGES, SUMMARY_THRESHOLD, build_prompt
from cass_core.providers.base import CompletionClient, SearchClient
from cass_core.routing.router import Router
from cass_core.sanitizer import sanitize_response

LOCATION_QUESTION = "What location are you talking about?"
FAILURE_MESSAGE = (
    "I encountered an issue processing that. "
    "Please check your network connection or try again later."
)


def _failed(state: TurnState, exc: BusinessError) -> TurnState:
    logger.error(
        "turn.backend_failed",
        extra={
            "extra": {
                "trace_id": state.get("trace_id"),
                "decision": state.get("decision"),
                "code": exc.code,
                "error": exc.message,
                "status": exc.http_status,
                "query": state.get("query"),
                "prompt": state.get("prompt"),
            }
        },
    )
    state["reply"] = FAILURE_MESSAGE
    state["failed"] = True
    state["error_code"] = exc.code
    return state


def route_node(state: TurnState, router: Router) -> TurnState:
    decision = router.classify(state["query"].lower(), state.get("user_has_provided_location", False))
    state["decision"] = decision.value
    logger.info("route_node.decision", extra={"extra": {"trace_id": state.get("trace_id"), "decision": decision.value}})
    return state


def location_node(state: TurnState) -> TurnState:
    state["reply"] = LOCATION_QUESTION
    state["failed"] = False
    return state


def search_node(state: TurnState, client: SearchClient) -> TurnState:
    try:
        raw = client.search(state["query"])
    except BusinessError as exc:
        return _failed(state, exc)
    state["reply"] = sanitize_response(raw)
    state["failed"] = False
    return state


def completion_node(
    state: TurnState,
    client: CompletionClient,
    store: InMemoryConversationStore,
    max_context_messages: int,
    summary_threshold: int,
) -> TurnState:
    state["prompt"] = build_prompt(store.state, max_context_messages, summary_threshold)
    try:
        raw = client.complete(state["prompt"])
    except BusinessError as exc:
        return _failed(state, exc)
    state["reply"] = sanitize_response(raw)
    state["failed"] = False
    return state


def decision_router(state: TurnState) -> str:
    return state["decision"]


def build_turn_graph(
    store: InMemoryConversationStore,
    router: Router,
    completion_client: CompletionClient,
    search_client: SearchClient,
    max_context_messages: int = MAX_CONTEXT_MESSAGES,
    summary_threshold: int = SUMMARY_THRESHOLD,
) -> CompiledStateGraph:
    graph = StateGraph(TurnState)
    graph.add_node("route", lambda s: route_node(s, router))
    graph.add_node("ask_location", location_node)
    graph.add_node("search", lambda s: search_node(s, search_client))
    graph.add_node(
        "complete",
        lambda s: completion_node(s, completion_client, store, max_context_messages, summary_threshold),
    )
    graph.set_entry_point("route")
    graph.add_conditional_edges(
        "route",
        decision_router,
        {
            RoutingDecision.NEEDS_LOCATION.value: "ask_location",
            RoutingDecision.USE_SEARCH.value: "search",
            RoutingDecision.USE_COMPLETION.value: "complete",
        },
    )
    graph.add_edge("ask_location", END)
    graph.add_edge("search", END)
    graph.add_edge("complete", END)
    return graph.compile()
