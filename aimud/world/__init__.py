"""World state: the canonical file store and its text annotations."""

from aimud.world.annotations import Token, TokenKind, extract_references, strip_hidden, tokenize
from aimud.world.store import CanonicalStore, derive_display_name

__all__ = [
    "Token",
    "TokenKind",
    "extract_references",
    "strip_hidden",
    "tokenize",
    "CanonicalStore",
    "derive_display_name",
]
