"""Row-level access to the world_files table.

Every method runs in its own transaction and converts SQLAlchemy failures
into PersistenceError. The canonical store decides what to do with them.
"""

from contextlib import AbstractContextManager
from typing import Callable

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aimud.database.connection import get_db_session
from aimud.database.models.world_file import WorldFile
from aimud.engine.exceptions import PersistenceError

SessionFactory = Callable[[], AbstractContextManager[Session]]


class WorldFileRepository:
    """Durable mapping of filename to (content, display name).

    Args:
        session_factory: Context manager factory yielding a committed-on-exit
            session. Defaults to the application database.
    """

    def __init__(self, session_factory: SessionFactory | None = None) -> None:
        self._session_factory = session_factory or get_db_session

    def load_all(self) -> list[tuple[str, str, str | None]]:
        """Load every world file.

        Returns:
            List of (name, content, display_name) tuples.

        Raises:
            PersistenceError: If the table cannot be read.
        """
        try:
            with self._session_factory() as db:
                rows = db.execute(select(WorldFile)).scalars().all()
                return [(row.name, row.content, row.display_name) for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load world files: {e}") from e

    def upsert(self, name: str, content: str, display_name: str | None) -> None:
        """Insert or fully replace one world file.

        Raises:
            PersistenceError: If the write cannot be committed.
        """
        try:
            with self._session_factory() as db:
                row = db.get(WorldFile, name)
                if row is None:
                    db.add(WorldFile(name=name, content=content, display_name=display_name))
                else:
                    row.content = content
                    row.display_name = display_name
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to save '{name}': {e}") from e

    def delete(self, name: str) -> None:
        """Delete one world file if present.

        Raises:
            PersistenceError: If the delete cannot be committed.
        """
        try:
            with self._session_factory() as db:
                db.execute(delete(WorldFile).where(WorldFile.name == name))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to delete '{name}': {e}") from e

    def delete_all(self) -> None:
        """Delete every world file in a single transaction.

        Raises:
            PersistenceError: If the delete cannot be committed.
        """
        try:
            with self._session_factory() as db:
                db.execute(delete(WorldFile))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to clear world files: {e}") from e
