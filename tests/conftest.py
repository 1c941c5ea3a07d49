"""Core test fixtures for AI-MUD tests."""

from contextlib import contextmanager

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from aimud.database.models.base import Base
from aimud.database.repository import WorldFileRepository
from aimud.world.store import CanonicalStore


@pytest.fixture
def engine(tmp_path):
    """Create a file-backed SQLite engine so separate stores share data."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'world.db'}",
        echo=False,
        connect_args={"check_same_thread": False},
    )

    # Import all models to ensure they're registered with Base
    import aimud.database.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    """Session factory with commit-on-success semantics."""
    make_session = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    @contextmanager
    def factory():
        session: Session = make_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def repository(session_factory) -> WorldFileRepository:
    return WorldFileRepository(session_factory)


@pytest.fixture
def store(repository) -> CanonicalStore:
    """Create an empty world store backed by the test database."""
    return CanonicalStore(repository=repository, default_extension=".txt")
