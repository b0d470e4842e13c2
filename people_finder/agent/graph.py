"""
LangGraph assistant: search → (format or generate) → END.

Orchestration only: the engine decides whether heuristics suffice; the
generate node calls the text generator when they do not. Every user-visible
failure becomes one of the fixed messages below; details go to the log.
"""

import logging
from typing import Literal, TypedDict

from langgraph.graph import END, StateGraph

from people_finder.agent.llm import generate
from people_finder.agent.prompts import build_prompt, build_results_prompt
from people_finder.core.errors import EmptyCorpusError, EmptyQueryError, ServiceUnavailableError
from people_finder.services.models import QueryType, SearchResponse
from people_finder.services.search_engine import SearchEngine

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No people data has been loaded yet. Please upload records first."
EMPTY_QUERY_MESSAGE = "Please enter a question or search keywords."
NOT_FOUND_MESSAGE = "No matching people were found. Try different keywords."
GENERATION_FAILED_MESSAGE = "Sorry, I couldn't generate an answer right now. Please try again later."

AssistantMode = Literal["search", "chat"]


class AssistantState(TypedDict):
    question: str
    mode: AssistantMode
    chat_history: list  # list of {"role": "user"|"assistant", "content": str}
    query_type: QueryType | None
    response: SearchResponse | None
    escalated: bool
    answer: str


def build_graph(engine: SearchEngine):
    """
    Build and compile the assistant graph for one engine.
    search → format_answer | generate_answer | END (when search already answered).
    """

    def _search(state: AssistantState) -> dict:
        """Node 1: run the engine; blank query / empty corpus answer immediately."""
        question = state.get("question") or ""
        logger.info("[graph:search] IN  question=%r mode=%s", question, state.get("mode"))
        try:
            response = engine.search(question)
        except EmptyQueryError:
            logger.info("[graph:search] OUT empty query")
            return {"answer": EMPTY_QUERY_MESSAGE}
        except EmptyCorpusError:
            logger.info("[graph:search] OUT empty corpus")
            return {"answer": NO_DATA_MESSAGE}
        logger.info(
            "[graph:search] OUT type=%s results=%d escalate=%s",
            response.query_type,
            len(response.results),
            response.should_escalate,
        )
        if state.get("mode") == "chat" and response.aggregation is None and not response.results:
            return {"response": response, "query_type": response.query_type, "answer": NOT_FOUND_MESSAGE}
        return {"response": response, "query_type": response.query_type}

    def _format_answer(state: AssistantState) -> dict:
        """Node 2a: heuristics were enough; render results or aggregation."""
        response = state["response"]
        answer = engine.format_results(response.results, response.aggregation)
        logger.info("[graph:format_answer] OUT answer_len=%d", len(answer))
        return {"answer": answer}

    def _generate_answer(state: AssistantState) -> dict:
        """Node 2b: escalate to the text generator. History-aware."""
        question = state.get("question") or ""
        response = state["response"]
        history = state.get("chat_history") or []
        if state.get("mode") == "chat":
            prompt = build_results_prompt(question, response.results, history)
        else:
            prompt = build_prompt(question, response.corpus, response.query_type, history)
        logger.info("[graph:generate_answer] IN  prompt_len=%d", len(prompt))
        try:
            answer = generate(prompt)
        except ServiceUnavailableError as e:
            logger.warning("[graph:generate_answer] generation failed: %s", e.message)
            return {"answer": GENERATION_FAILED_MESSAGE, "escalated": True}
        logger.info("[graph:generate_answer] OUT answer_len=%d", len(answer))
        return {"answer": answer, "escalated": True}

    def _route_after_search(state: AssistantState) -> str:
        if state.get("answer"):
            return END
        response = state["response"]
        if state.get("mode") == "chat":
            next_node = "format_answer" if response.aggregation is not None else "generate_answer"
        else:
            next_node = "generate_answer" if response.should_escalate else "format_answer"
        logger.info("[graph:route_after_search] -> %s", next_node)
        return next_node

    graph = StateGraph(AssistantState)
    graph.add_node("search", _search)
    graph.add_node("format_answer", _format_answer)
    graph.add_node("generate_answer", _generate_answer)

    graph.set_entry_point("search")
    graph.add_conditional_edges("search", _route_after_search)
    graph.add_edge("format_answer", END)
    graph.add_edge("generate_answer", END)

    return graph.compile()


def _initial_state(question: str, mode: AssistantMode, history: list | None) -> AssistantState:
    return {
        "question": (question or "").strip(),
        "mode": mode,
        "chat_history": history if history is not None else [],
        "query_type": None,
        "response": None,
        "escalated": False,
        "answer": "",
    }


def run_assistant(
    engine: SearchEngine, question: str, history: list | None = None, mode: AssistantMode = "search"
) -> dict:
    """
    Answer one question. Returns answer, query_type, escalated, results_count.

    mode "search" follows the engine's escalation flag and prompts with the
    whole corpus; mode "chat" returns aggregations directly and otherwise asks
    the generator to answer from the ranked matches only.
    """
    logger.info("[run_assistant] START question=%r mode=%s", question, mode)
    final = build_graph(engine).invoke(_initial_state(question, mode, history))
    response: SearchResponse | None = final.get("response")
    answer = (final.get("answer") or "").strip()
    escalated = bool(final.get("escalated"))
    logger.info("[run_assistant] END escalated=%s answer_len=%d", escalated, len(answer))
    return {
        "answer": answer,
        "query_type": final.get("query_type"),
        "escalated": escalated,
        "results_count": len(response.results) if response else 0,
    }


def run_assistant_stream(
    engine: SearchEngine, question: str, history: list | None = None, mode: AssistantMode = "search"
):
    """
    Run the assistant and yield streaming events: search → answer.
    Yields {"event": "search", ...}, {"event": "answer", "answer": str}, or {"event": "error", "message": str}.
    """
    logger.info("[run_assistant_stream] START question=%r mode=%s", question, mode)
    graph = build_graph(engine)
    try:
        for event in graph.stream(_initial_state(question, mode, history)):
            # event: dict mapping node name to state update
            for node_name, update in event.items():
                update = update or {}
                if node_name == "search":
                    response = update.get("response")
                    if response is not None:
                        yield {
                            "event": "search",
                            "query_type": response.query_type,
                            "results": len(response.results),
                            "escalate": response.should_escalate,
                        }
                    if update.get("answer"):
                        yield {"event": "answer", "answer": update["answer"]}
                elif node_name in ("format_answer", "generate_answer"):
                    yield {"event": "answer", "answer": update.get("answer", "")}
    except Exception:
        logger.exception("[run_assistant_stream] assistant stream failed")
        yield {"event": "error", "message": GENERATION_FAILED_MESSAGE}
    logger.info("[run_assistant_stream] END")
