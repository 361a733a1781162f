"""Test number, percentage, and dimension tokens."""

import pytest

from cssnest.errors import LexError
from cssnest.lexer import tokenize
from cssnest.parser import parse
from cssnest.tokens import TokenType

from tests.conftest import assert_types


class TestNumbers:
    @pytest.mark.parametrize("text", ["0", "42", "3.14", ".5", "+1", "-2", "-.25", "1e3", "2.5E-2"])
    def test_number_forms(self, lex, text):
        tokens = lex(text)
        assert_types(tokens, [TokenType.NUMBER])
        assert tokens[0].value == text
        assert tokens[0].unit == ""

    def test_number_followed_by_dot(self, lex):
        tokens = lex("1.")
        assert_types(tokens, [TokenType.NUMBER, TokenType.DELIM])

    def test_sign_without_digits_is_delim(self, lex):
        tokens = lex("+a")
        assert_types(tokens, [TokenType.DELIM, TokenType.IDENT])


class TestPercentage:
    def test_percentage(self, lex):
        tokens = lex("50%")
        assert_types(tokens, [TokenType.PERCENTAGE])
        assert tokens[0].value == "50"
        assert tokens[0].unit == "%"
        assert tokens[0].raw == "50%"

    def test_decimal_percentage(self, lex):
        tokens = lex("12.5%")
        assert tokens[0].type == TokenType.PERCENTAGE
        assert tokens[0].value == "12.5"


class TestDimension:
    def test_px(self, lex):
        tokens = lex("10px")
        assert_types(tokens, [TokenType.DIMENSION])
        assert tokens[0].value == "10"
        assert tokens[0].unit == "px"
        assert tokens[0].raw == "10px"

    def test_em_is_not_exponent(self, lex):
        tokens = lex("1em")
        assert_types(tokens, [TokenType.DIMENSION])
        assert tokens[0].value == "1"
        assert tokens[0].unit == "em"

    def test_exponent_then_unit(self, lex):
        tokens = lex("1e3px")
        assert_types(tokens, [TokenType.DIMENSION])
        assert tokens[0].value == "1e3"
        assert tokens[0].unit == "px"

    def test_negative_dimension(self, lex):
        tokens = lex("-0.5rem")
        assert tokens[0].type == TokenType.DIMENSION
        assert tokens[0].value == "-0.5"
        assert tokens[0].unit == "rem"

    def test_values_separated(self, lex):
        tokens = lex("0 .5em")
        assert_types(tokens, [TokenType.NUMBER, TokenType.WS, TokenType.DIMENSION])


class TestInvalidNumbers:
    def test_double_decimal_point(self):
        with pytest.raises(LexError, match="invalid number literal"):
            tokenize("1.2.3")

    def test_position_is_number_start(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a { width: 1.2.3px }")
        assert exc_info.value.position.column == 12

    def test_allowed_in_custom_property_value(self, lex):
        tokens = lex("--v: 1.2.3")
        assert_types(
            tokens,
            [
                TokenType.IDENT,
                TokenType.COLON,
                TokenType.WS,
                TokenType.NUMBER,
                TokenType.NUMBER,
            ],
        )
        assert [t.value for t in tokens[3:]] == ["1.2", ".3"]

    def test_custom_property_value_kept_verbatim(self):
        sheet = parse("a { --version: 1.2.3 }")
        assert sheet.children[0].block.children[0].value == "1.2.3"

    def test_nested_braces_stay_in_custom_value(self):
        sheet = parse("a { --m: { x: 1.2.3 }; }")
        assert sheet.children[0].block.children[0].value == "{ x: 1.2.3 }"

    def test_checked_again_after_custom_property(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a { --v: 1.2.3; width: 1.2.3px }")
        assert exc_info.value.position.column == 24
