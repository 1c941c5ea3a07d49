"""Orchestration cycle graph.

One cycle turns one caller input into one EngineResponse:

1. Build the primary prompt from every world file
2. Call the backend and parse its reply
3. Apply file mutations and fold the reply into the response
4. If checks were requested: resolve them, build the follow-up prompt,
   call the backend again, parse, apply and fold once more
5. Commit

A primary-phase failure ends the cycle in the error node with a fallback
narrative and no mutation. A follow-up failure still commits what the
primary phase produced, with a diagnostic note appended.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from langgraph.graph import StateGraph, END

from aimud.dice.checks import CheckResolver
from aimud.engine.applier import FileApplier
from aimud.engine.backend import GenerativeBackend
from aimud.engine.exceptions import BackendError, FormatError
from aimud.engine.parser import ResponseParser
from aimud.engine.prompts import (
    SYSTEM_PROMPT,
    build_action_prompt,
    build_followup_prompt,
    build_initialize_prompt,
)
from aimud.engine.schemas import EngineResponse
from aimud.llm.audit_logger import set_audit_context
from aimud.world.store import CanonicalStore

logger = logging.getLogger(__name__)

CycleMode = Literal["initialize", "action"]

INITIALIZE_FAILURE_NARRATIVE = (
    "System initialization failed. Please check the backend configuration and API key."
)
ACTION_FAILURE_NARRATIVE = (
    "System Error: the action could not be processed. Nothing in the world has changed."
)
FOLLOWUP_FAILURE_NOTE = (
    "[System: the outcome of the checks could not be narrated. "
    "Earlier changes were kept; you may repeat the action.]"
)


@dataclass
class CycleServices:
    """Collaborators a cycle runs against."""

    store: CanonicalStore
    backend: GenerativeBackend
    resolver: CheckResolver
    parser: ResponseParser
    applier: FileApplier
    system_prompt: str = SYSTEM_PROMPT
    temperature: float = 0.7


class CycleState(TypedDict, total=False):
    """State for the cycle graph."""

    # Input
    mode: CycleMode
    player_input: str
    cycle_number: int

    # Internal
    _services: CycleServices

    # Working state
    prompt: str
    followup_prompt: str
    raw_reply: str
    phase_error: str | None

    # Output
    response: EngineResponse
    status: str  # "committed" or "error"


# =============================================================================
# Primary phase
# =============================================================================


async def build_prompt_node(state: CycleState) -> dict[str, Any]:
    """Snapshot the world files and frame the caller input."""
    services = state["_services"]
    files = services.store.get_all()
    player_input = state.get("player_input", "")

    if state.get("mode") == "initialize":
        prompt = build_initialize_prompt(player_input, files)
    else:
        prompt = build_action_prompt(files, player_input)

    return {"prompt": prompt, "response": EngineResponse(), "phase_error": None}


async def await_primary_node(state: CycleState) -> dict[str, Any]:
    """Send the primary prompt to the backend."""
    services = state["_services"]
    set_audit_context(
        cycle_number=state.get("cycle_number"),
        phase="primary",
        call_type=state.get("mode", "action"),
    )

    try:
        raw = await services.backend.generate(
            state["prompt"],
            services.system_prompt,
            services.temperature,
        )
    except BackendError as e:
        logger.error(f"Primary backend call failed: {e}")
        return {"phase_error": f"Backend error: {e}"}

    return {"raw_reply": raw}


async def parse_primary_node(state: CycleState) -> dict[str, Any]:
    """Decode the primary reply, apply its files and fold it in."""
    services = state["_services"]

    try:
        parsed = services.parser.parse(state.get("raw_reply", ""))
    except FormatError as e:
        logger.error(f"Unreadable primary reply: {e}\nRaw reply:\n{e.raw_text}")
        return {"phase_error": f"Format error: {e}"}

    applied = services.applier.apply(parsed.file_mutations())
    return {"response": state["response"].merge(parsed, applied)}


# =============================================================================
# Follow-up phase
# =============================================================================


async def resolve_checks_node(state: CycleState) -> dict[str, Any]:
    """Roll every pending check."""
    services = state["_services"]
    response = state["response"]

    results = services.resolver.resolve_all(response.pending_checks)
    for result in results:
        logger.info(f"Check '{result.name}' rolled {result.roll} -> {result.outcome}")

    return {
        "response": response.model_copy(
            update={
                "check_results": [*response.check_results, *results],
                "pending_checks": [],
            }
        )
    }


async def build_followup_node(state: CycleState) -> dict[str, Any]:
    """Frame the check outcomes together with the primary context."""
    services = state["_services"]
    response = state["response"]

    # Read back from the store so the prompt shows what was actually written
    written = {name: services.store.read(name) or "" for name in response.files}
    prompt = build_followup_prompt(state["prompt"], response.check_results, written)
    return {"followup_prompt": prompt}


async def await_secondary_node(state: CycleState) -> dict[str, Any]:
    """Send the follow-up prompt to the backend."""
    services = state["_services"]
    set_audit_context(
        cycle_number=state.get("cycle_number"),
        phase="followup",
        call_type=state.get("mode", "action"),
    )

    try:
        raw = await services.backend.generate(
            state["followup_prompt"],
            services.system_prompt,
            services.temperature,
        )
    except BackendError as e:
        logger.error(f"Follow-up backend call failed, keeping primary results: {e}")
        return {"phase_error": f"Follow-up backend error: {e}"}

    return {"raw_reply": raw}


async def parse_secondary_node(state: CycleState) -> dict[str, Any]:
    """Decode the follow-up reply, apply its files and fold it in."""
    services = state["_services"]

    try:
        parsed = services.parser.parse(state.get("raw_reply", ""))
    except FormatError as e:
        logger.error(
            f"Unreadable follow-up reply, keeping primary results: {e}\n"
            f"Raw reply:\n{e.raw_text}"
        )
        return {"phase_error": f"Follow-up format error: {e}"}

    applied = services.applier.apply(parsed.file_mutations())
    return {"response": state["response"].merge(parsed, applied)}


# =============================================================================
# Terminal nodes
# =============================================================================


async def commit_node(state: CycleState) -> dict[str, Any]:
    """Finalize the response of a committed cycle."""
    response = state["response"]
    update: dict[str, Any] = {"pending_checks": []}

    if response.pending_checks:
        names = ", ".join(check.name for check in response.pending_checks)
        logger.warning(f"Ignoring checks requested by the follow-up reply: {names}")

    phase_error = state.get("phase_error")
    if phase_error:
        update["narrative"] = f"{response.narrative}\n\n{FOLLOWUP_FAILURE_NOTE}".strip()
        update["errors"] = [*response.errors, phase_error]

    committed = response.model_copy(update=update)
    logger.info(
        f"Cycle {state.get('cycle_number')} committed: {len(committed.files)} file(s), "
        f"{len(committed.updates)} update(s), game_over={committed.game_over}"
    )
    return {"response": committed, "status": "committed"}


async def error_node(state: CycleState) -> dict[str, Any]:
    """End a cycle whose primary phase failed."""
    if state.get("mode") == "initialize":
        narrative = INITIALIZE_FAILURE_NARRATIVE
    else:
        narrative = ACTION_FAILURE_NARRATIVE

    errors = [state["phase_error"]] if state.get("phase_error") else []
    return {
        "response": EngineResponse(narrative=narrative, errors=errors, failed=True),
        "status": "error",
    }


# =============================================================================
# Routing
# =============================================================================


def route_after_primary_call(state: CycleState) -> str:
    return "error" if state.get("phase_error") else "parse"


def route_after_primary(state: CycleState) -> str:
    """Pick the branch once the primary reply is known."""
    if state.get("phase_error"):
        return "error"
    if state["response"].pending_checks:
        return "checks"
    return "commit"


def route_after_secondary_call(state: CycleState) -> str:
    return "commit" if state.get("phase_error") else "parse"


def build_cycle_graph():
    """Build the orchestration cycle graph.

    Returns:
        Compiled StateGraph for one cycle.
    """
    graph = StateGraph(CycleState)

    # Add nodes
    graph.add_node("build_prompt", build_prompt_node)
    graph.add_node("await_primary", await_primary_node)
    graph.add_node("parse_primary", parse_primary_node)
    graph.add_node("resolve_checks", resolve_checks_node)
    graph.add_node("build_followup", build_followup_node)
    graph.add_node("await_secondary", await_secondary_node)
    graph.add_node("parse_secondary", parse_secondary_node)
    graph.add_node("commit", commit_node)
    graph.add_node("error", error_node)

    # Set entry point
    graph.set_entry_point("build_prompt")

    # Add edges
    graph.add_edge("build_prompt", "await_primary")
    graph.add_conditional_edges(
        "await_primary",
        route_after_primary_call,
        {"parse": "parse_primary", "error": "error"},
    )
    graph.add_conditional_edges(
        "parse_primary",
        route_after_primary,
        {"checks": "resolve_checks", "commit": "commit", "error": "error"},
    )
    graph.add_edge("resolve_checks", "build_followup")
    graph.add_edge("build_followup", "await_secondary")
    graph.add_conditional_edges(
        "await_secondary",
        route_after_secondary_call,
        {"parse": "parse_secondary", "commit": "commit"},
    )
    graph.add_edge("parse_secondary", "commit")
    graph.add_edge("commit", END)
    graph.add_edge("error", END)

    return graph.compile()


# Convenience function for running one cycle
async def run_cycle(
    services: CycleServices,
    mode: CycleMode,
    player_input: str,
    cycle_number: int = 1,
    graph=None,
) -> EngineResponse:
    """Run one orchestration cycle.

    Args:
        services: Store, backend and helpers to run against.
        mode: "initialize" or "action".
        player_input: Scenario prompt or player action.
        cycle_number: Cycle counter, used to group audit logs.
        graph: Pre-compiled graph; built on demand when None.

    Returns:
        The committed (or failed) EngineResponse.
    """
    graph = graph or build_cycle_graph()

    initial_state: CycleState = {
        "mode": mode,
        "player_input": player_input,
        "cycle_number": cycle_number,
        "_services": services,
        "prompt": "",
        "followup_prompt": "",
        "raw_reply": "",
        "phase_error": None,
        "response": EngineResponse(),
        "status": "",
    }

    result = await graph.ainvoke(initial_state)
    return result["response"]