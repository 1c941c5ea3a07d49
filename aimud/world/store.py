"""Canonical store of world files.

The store is the only durable world state. It keeps an in-memory view of
every file (content and display name) and writes each change through to
the database before returning.

Failure semantics:
- A persistence failure is logged and swallowed; the in-memory view stays
  authoritative for the rest of the process.
- A load failure on startup leaves the store empty, never half-loaded.
"""

from __future__ import annotations

import logging
import re

from aimud.config import settings
from aimud.database.repository import SessionFactory, WorldFileRepository
from aimud.engine.exceptions import PersistenceError
from aimud.world.annotations import extract_references

logger = logging.getLogger(__name__)

_EXTENSION_PATTERN = re.compile(r"\.[A-Za-z0-9]+$")
_SEPARATOR_PATTERN = re.compile(r"[_\-]+")
_NUMERIC_SUFFIX_PATTERN = re.compile(r"\s+\d+$")


def derive_display_name(name: str) -> str:
    """Derive a human-readable alias from a filename.

    Strips the extension, turns separators into spaces and drops a trailing
    instance number.

    Examples:
        >>> derive_display_name("KingsGuard_1.txt")
        'KingsGuard'
        >>> derive_display_name("Old_Church.txt")
        'Old Church'
        >>> derive_display_name("WorldTime.txt")
        'WorldTime'
    """
    display = _EXTENSION_PATTERN.sub("", name)
    display = _SEPARATOR_PATTERN.sub(" ", display).strip()
    display = _NUMERIC_SUFFIX_PATTERN.sub("", display)
    return display or name


class CanonicalStore:
    """Durable mapping from filename to content plus a display-name alias.

    Args:
        repository: Row-level persistence. Built from ``session_factory``
            when omitted.
        session_factory: Session factory for the default repository.
        default_extension: Extension tried when a reference has none.

    Usage:
        store = CanonicalStore()
        store.write("KingsGuard_1.txt", "Armed. hide[Bribable]", "King's Guard")
        store.resolve_reference("King's Guard")  # "KingsGuard_1.txt"
    """

    def __init__(
        self,
        repository: WorldFileRepository | None = None,
        session_factory: SessionFactory | None = None,
        default_extension: str | None = None,
    ) -> None:
        self._repository = repository or WorldFileRepository(session_factory)
        self.default_extension = default_extension or settings.default_extension
        self._files: dict[str, str] = {}
        self._display_names: dict[str, str] = {}
        self._load()

    def _load(self) -> None:
        """Populate the in-memory view from the database."""
        try:
            rows = self._repository.load_all()
        except PersistenceError as e:
            logger.error(f"Failed to load world files, starting empty: {e}")
            return

        files: dict[str, str] = {}
        display_names: dict[str, str] = {}
        for name, content, display_name in rows:
            files[name] = content
            display_names[name] = display_name or derive_display_name(name)

        self._files = files
        self._display_names = display_names
        logger.debug(f"Loaded {len(files)} world files")

    # =========================================================================
    # Reads
    # =========================================================================

    def read(self, name: str) -> str | None:
        """Return a file's content, or None if it does not exist."""
        return self._files.get(name)

    def exists(self, name: str) -> bool:
        """Check whether a file exists (exact, case-sensitive name)."""
        return name in self._files

    def list(self) -> list[str]:
        """List filenames in lexicographic order."""
        return sorted(self._files)

    def get_all(self) -> dict[str, str]:
        """Snapshot of name -> content. Mutating it does not affect the store."""
        return dict(self._files)

    def get_display_name(self, name: str) -> str:
        """Return the stored alias, or the derived one."""
        return self._display_names.get(name) or derive_display_name(name)

    def __len__(self) -> int:
        return len(self._files)

    # =========================================================================
    # Writes
    # =========================================================================

    def write(self, name: str, content: str, display_name: str | None = None) -> None:
        """Create or fully replace a file.

        Args:
            name: Filename (primary key).
            content: New content; replaces the old content entirely.
            display_name: Alias. When omitted, an existing alias is kept and a
                new file gets a derived one.
        """
        self._files[name] = content
        if display_name:
            self._display_names[name] = display_name
        elif name not in self._display_names:
            self._display_names[name] = derive_display_name(name)

        try:
            self._repository.upsert(name, content, self._display_names[name])
        except PersistenceError as e:
            logger.error(f"World file '{name}' kept in memory only: {e}")

    def delete(self, name: str) -> None:
        """Remove a file and its alias. Missing files are ignored."""
        self._files.pop(name, None)
        self._display_names.pop(name, None)

        try:
            self._repository.delete(name)
        except PersistenceError as e:
            logger.error(f"Deletion of '{name}' not persisted: {e}")

    def clear(self) -> None:
        """Remove every file and alias. Irreversible."""
        self._files = {}
        self._display_names = {}

        try:
            self._repository.delete_all()
        except PersistenceError as e:
            logger.error(f"World reset not persisted: {e}")

    # =========================================================================
    # Reference Resolution
    # =========================================================================

    def resolve_reference(self, ref: str) -> str | None:
        """Resolve a [Reference] to a filename.

        Resolution order, first match wins:
        1. exact filename (as written, then with surrounding whitespace trimmed)
        2. filename with the default extension appended
        3. display name (exact); several matches -> smallest filename
        4. case-insensitive substring of a filename; smallest filename

        Args:
            ref: Reference text as written between brackets.

        Returns:
            The filename, or None if nothing matches.
        """
        stripped = ref.strip()
        if not stripped:
            return None

        # Exact lookups try the reference as written, then trimmed
        for candidate in dict.fromkeys((ref, stripped)):
            if candidate in self._files:
                return candidate
            with_extension = f"{candidate}{self.default_extension}"
            if with_extension in self._files:
                return with_extension

        for name in self.list():
            if self._display_names.get(name) == stripped:
                return name

        ref_lower = stripped.lower()
        for name in self.list():
            if ref_lower in name.lower():
                return name

        return None

    def linked_files(self, name: str, include_hidden: bool = False) -> dict[str, str | None]:
        """Resolve every reference inside a file.

        Args:
            name: File to scan.
            include_hidden: Also follow references inside hide[...] spans.

        Returns:
            Reference text -> resolved filename (None when unresolved).
        """
        content = self.read(name) or ""
        return {
            ref: self.resolve_reference(ref)
            for ref in extract_references(content, include_hidden=include_hidden)
        }
