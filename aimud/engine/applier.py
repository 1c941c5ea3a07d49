"""File mutation applier.

Writes the file mutations of one phase to the canonical store. Each file
is a full replacement; a display name, when given, replaces the alias.
"""

import logging

from aimud.engine.schemas import FileMutation
from aimud.world.store import CanonicalStore

logger = logging.getLogger(__name__)


class FileApplier:
    """Applies file mutations to the canonical store.

    Args:
        store: Store to write to.
    """

    def __init__(self, store: CanonicalStore) -> None:
        self.store = store

    def apply(self, mutations: dict[str, FileMutation]) -> dict[str, FileMutation]:
        """Write every mutation, in the order the backend listed them.

        Args:
            mutations: Filename -> mutation.

        Returns:
            The mutations that were written.
        """
        applied: dict[str, FileMutation] = {}
        for name, mutation in mutations.items():
            if not name.strip():
                logger.warning("Skipping file mutation with an empty name")
                continue

            created = not self.store.exists(name)
            self.store.write(name, mutation.content, mutation.display_name)
            applied[name] = mutation
            logger.debug(f"{'Created' if created else 'Replaced'} world file '{name}'")

        if applied:
            logger.info(f"Applied {len(applied)} file mutation(s)")
        return applied
