"""Process-wide game session context.

Lifecycle:
- built once, on first use, by ``get_context()`` (which also creates the
  database tables),
- ``reset()`` wipes the world and the session log but keeps the object,
- nothing rebuilds it implicitly.
"""

import logging
from collections import deque

from aimud.config import settings
from aimud.engine.engine import NarrativeEngine
from aimud.engine.schemas import EngineResponse, UpdateRecord
from aimud.world.store import CanonicalStore

logger = logging.getLogger(__name__)

WORLD_TIME_FILE = "WorldTime.txt"


class GameContext:
    """Owns the world store, the engine and the session log.

    Args:
        store: World store. Defaults to one over the configured database.
        engine: Engine bound to ``store``.
        history_limit: Number of updates kept in ``recent_updates``.
    """

    def __init__(
        self,
        store: CanonicalStore | None = None,
        engine: NarrativeEngine | None = None,
        history_limit: int | None = None,
    ) -> None:
        self.store = store if store is not None else CanonicalStore()
        self.engine = engine if engine is not None else NarrativeEngine(self.store)
        self.recent_updates: deque[UpdateRecord] = deque(
            maxlen=history_limit or settings.update_history_limit
        )
        self.game_over = False
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """True once a world exists (including one resumed from disk)."""
        return self._initialized or len(self.store) > 0

    async def submit(self, text: str) -> EngineResponse:
        """Run a cycle: the first input initializes, later ones are actions.

        Raises:
            EngineBusyError: If a cycle is already in flight.
        """
        if self.initialized:
            response = await self.engine.process_action(text)
        else:
            response = await self.engine.initialize(text)
            self._initialized = not response.failed

        self.recent_updates.extend(response.updates)
        if response.game_over:
            logger.info("Game over")
            self.game_over = True
        return response

    def inspect(self, ref: str) -> tuple[str, str, str] | None:
        """Look up a file by name, alias or fragment.

        Returns:
            (filename, display name, content), or None if nothing matches.
        """
        name = self.store.resolve_reference(ref)
        if name is None:
            return None
        return name, self.store.get_display_name(name), self.store.read(name) or ""

    def world_time(self) -> str | None:
        """Current world clock, as written by the backend."""
        content = self.store.read(WORLD_TIME_FILE)
        return content.strip() if content else None

    def reset(self) -> None:
        """Wipe every world file and the session log."""
        self.store.clear()
        self.recent_updates.clear()
        self.game_over = False
        self._initialized = False
        logger.info("World reset")


# Global context instance
_context: GameContext | None = None


def get_context() -> GameContext:
    """Get or create the process-wide game context."""
    global _context
    if _context is None:
        from aimud.database.connection import init_db

        init_db()
        _context = GameContext()
    return _context
