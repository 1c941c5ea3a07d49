"""Narrative engine.

Single entry point for running orchestration cycles against a world store.
"""

import logging

from aimud.config import settings
from aimud.dice.checks import CheckResolver
from aimud.engine.applier import FileApplier
from aimud.engine.backend import GenerativeBackend, LLMBackend
from aimud.engine.exceptions import EngineBusyError
from aimud.engine.graph import CycleMode, CycleServices, build_cycle_graph, run_cycle
from aimud.engine.parser import ResponseParser
from aimud.engine.prompts import SYSTEM_PROMPT
from aimud.engine.schemas import EngineResponse
from aimud.world.store import CanonicalStore

logger = logging.getLogger(__name__)


class NarrativeEngine:
    """Runs one orchestration cycle per caller input.

    The engine is not reentrant: one cycle at a time. Call ``initialize``
    once for a new world, then ``process_action`` for every player action.

    Args:
        store: Canonical world store.
        backend: Generative backend. Defaults to an LLMBackend over the
            configured provider.
        resolver: Check resolver (inject a fixed roller in tests).
        parser: Reply parser.
        system_prompt: System instruction sent with every call.
        temperature: Sampling temperature. Defaults to settings.temperature.

    Usage:
        engine = NarrativeEngine(CanonicalStore())
        response = await engine.initialize("A rainy port town, I am a thief")
        response = await engine.process_action("I climb the warehouse wall")
    """

    def __init__(
        self,
        store: CanonicalStore,
        backend: GenerativeBackend | None = None,
        resolver: CheckResolver | None = None,
        parser: ResponseParser | None = None,
        system_prompt: str = SYSTEM_PROMPT,
        temperature: float | None = None,
    ) -> None:
        self.store = store
        self._services = CycleServices(
            store=store,
            backend=backend or LLMBackend(),
            resolver=resolver or CheckResolver(),
            parser=parser or ResponseParser(),
            applier=FileApplier(store),
            system_prompt=system_prompt,
            temperature=settings.temperature if temperature is None else temperature,
        )
        self._graph = build_cycle_graph()
        self._in_flight = False
        self.cycle_count = 0

    @property
    def in_flight(self) -> bool:
        """True while a cycle is running."""
        return self._in_flight

    async def initialize(self, scenario_prompt: str) -> EngineResponse:
        """Bootstrap the world from a scenario description.

        Raises:
            EngineBusyError: If a cycle is already in flight.
        """
        return await self._run("initialize", scenario_prompt)

    async def process_action(self, action_text: str) -> EngineResponse:
        """Process one player action.

        Raises:
            EngineBusyError: If a cycle is already in flight.
        """
        return await self._run("action", action_text)

    async def _run(self, mode: CycleMode, text: str) -> EngineResponse:
        if self._in_flight:
            raise EngineBusyError()

        self._in_flight = True
        self.cycle_count += 1
        logger.debug(f"Starting cycle {self.cycle_count} ({mode})")
        try:
            return await run_cycle(
                self._services,
                mode,
                text,
                cycle_number=self.cycle_count,
                graph=self._graph,
            )
        finally:
            self._in_flight = False
