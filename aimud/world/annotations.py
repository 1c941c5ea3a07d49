"""Text annotation pass for world file and narrative text.

Two micro-syntaxes are embedded in backend-authored text:

- ``[Reference]``: a link to another world file, by filename or display name
- ``hide[...]``: content the player should not see by default

Both are parsed once here into a flat token sequence. Rendering and
reference resolution consume the tokens instead of re-running regexes.
Hidden spans may themselves contain references; their raw text is kept so
callers can tokenize it again when revealing it.
"""

from dataclasses import dataclass
from enum import Enum


HIDE_OPEN = "hide["


class TokenKind(str, Enum):
    """Kind of annotated span."""

    TEXT = "text"
    REFERENCE = "reference"
    HIDDEN = "hidden"


@dataclass(frozen=True)
class Token:
    """One span of annotated text.

    Attributes:
        kind: Span kind.
        text: Plain text, the reference target, or the hidden content.
    """

    kind: TokenKind
    text: str


def _find_closing_bracket(text: str, start: int) -> int:
    """Index of the ']' closing a bracket opened just before ``start``.

    Nested brackets are balanced, so ``hide[trap near [Old Church]]`` hides
    the whole phrase. Returns -1 when the bracket is never closed.
    """
    depth = 1
    for index in range(start, len(text)):
        char = text[index]
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _starts_word(text: str, index: int) -> bool:
    """True when ``index`` is not preceded by a word character (``unhide[``)."""
    if index == 0:
        return True
    previous = text[index - 1]
    return not (previous.isalnum() or previous == "_")


def tokenize(text: str) -> list[Token]:
    """Split text into plain, reference and hidden tokens.

    Args:
        text: Narrative or file content.

    Returns:
        Tokens in document order. Adjacent plain text is merged.

    Examples:
        >>> [t.kind.value for t in tokenize("Meet [Guard] hide[he lies]")]
        ['text', 'reference', 'text', 'hidden']
    """
    tokens: list[Token] = []
    buffer: list[str] = []

    def flush() -> None:
        if buffer:
            tokens.append(Token(TokenKind.TEXT, "".join(buffer)))
            buffer.clear()

    index = 0
    length = len(text)
    while index < length:
        if text.startswith(HIDE_OPEN, index) and _starts_word(text, index):
            content_start = index + len(HIDE_OPEN)
            end = _find_closing_bracket(text, content_start)
            if end != -1:
                flush()
                tokens.append(Token(TokenKind.HIDDEN, text[content_start:end]))
                index = end + 1
                continue

        if text[index] == "[":
            end = text.find("]", index + 1)
            inner = text[index + 1 : end] if end != -1 else ""
            if inner and "[" not in inner:
                flush()
                tokens.append(Token(TokenKind.REFERENCE, inner))
                index = end + 1
                continue

        buffer.append(text[index])
        index += 1

    flush()
    return tokens


def extract_references(text: str, include_hidden: bool = False) -> list[str]:
    """List the distinct reference targets in text, in first-seen order.

    Args:
        text: Text to scan.
        include_hidden: Also collect references inside hide[...] spans.
    """
    seen: dict[str, None] = {}
    for token in tokenize(text):
        if token.kind == TokenKind.REFERENCE:
            seen.setdefault(token.text, None)
        elif token.kind == TokenKind.HIDDEN and include_hidden:
            for ref in extract_references(token.text, include_hidden=True):
                seen.setdefault(ref, None)
    return list(seen)


def strip_hidden(text: str, placeholder: str = "[hidden]") -> str:
    """Replace every hide[...] span with a placeholder.

    References are written back in their bracketed form.
    """
    parts: list[str] = []
    for token in tokenize(text):
        if token.kind == TokenKind.HIDDEN:
            parts.append(placeholder)
        elif token.kind == TokenKind.REFERENCE:
            parts.append(f"[{token.text}]")
        else:
            parts.append(token.text)
    return "".join(parts)
