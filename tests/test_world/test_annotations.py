"""Tests for the annotation tokenizer."""

from aimud.world.annotations import (
    Token,
    TokenKind,
    extract_references,
    strip_hidden,
    tokenize,
)


class TestTokenize:
    def test_plain_text(self):
        assert tokenize("Rain falls.") == [Token(TokenKind.TEXT, "Rain falls.")]

    def test_empty(self):
        assert tokenize("") == []

    def test_reference(self):
        assert tokenize("Meet [King's Guard] now") == [
            Token(TokenKind.TEXT, "Meet "),
            Token(TokenKind.REFERENCE, "King's Guard"),
            Token(TokenKind.TEXT, " now"),
        ]

    def test_hidden(self):
        assert tokenize("A door. hide[It is trapped]") == [
            Token(TokenKind.TEXT, "A door. "),
            Token(TokenKind.HIDDEN, "It is trapped"),
        ]

    def test_hidden_with_nested_reference(self):
        tokens = tokenize("hide[The [Old Church] hides a crypt]")
        assert tokens == [Token(TokenKind.HIDDEN, "The [Old Church] hides a crypt")]

    def test_hide_inside_a_word_is_not_hidden(self):
        assert tokenize("unhide[x]") == [
            Token(TokenKind.TEXT, "unhide"),
            Token(TokenKind.REFERENCE, "x"),
        ]

    def test_hide_after_punctuation_is_hidden(self):
        assert tokenize("(hide[x])") == [
            Token(TokenKind.TEXT, "("),
            Token(TokenKind.HIDDEN, "x"),
            Token(TokenKind.TEXT, ")"),
        ]

    def test_unclosed_hide_is_text(self):
        assert tokenize("hide[never closed") == [Token(TokenKind.TEXT, "hide[never closed")]

    def test_unclosed_bracket_is_text(self):
        assert tokenize("Look [here") == [Token(TokenKind.TEXT, "Look [here")]

    def test_empty_brackets_are_text(self):
        assert tokenize("[]") == [Token(TokenKind.TEXT, "[]")]

    def test_check_label_is_a_reference_token(self):
        tokens = tokenize("[Climb: Success] You make it.")
        assert tokens[0] == Token(TokenKind.REFERENCE, "Climb: Success")


class TestExtractReferences:
    def test_first_seen_order_and_unique(self):
        text = "[Player] meets [Guard]. [Player] waves."
        assert extract_references(text) == ["Player", "Guard"]

    def test_hidden_references_excluded_by_default(self):
        text = "[Player] hide[knows about [Crypt]]"
        assert extract_references(text) == ["Player"]

    def test_hidden_references_included_on_request(self):
        text = "[Player] hide[knows about [Crypt]]"
        assert extract_references(text, include_hidden=True) == ["Player", "Crypt"]


class TestStripHidden:
    def test_placeholder(self):
        assert strip_hidden("A door. hide[Trapped] [Player] looks.") == (
            "A door. [hidden] [Player] looks."
        )

    def test_custom_placeholder(self):
        assert strip_hidden("hide[x]", placeholder="???") == "???"

    def test_no_hidden_content(self):
        assert strip_hidden("Just [Player].") == "Just [Player]."
