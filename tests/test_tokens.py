"""Test punctuation, whitespace, names, and comments."""

from cssnest.tokens import TokenType

from tests.conftest import assert_types, assert_values


class TestPunctuation:
    def test_braces(self, lex):
        tokens = lex("{}")
        assert_types(tokens, [TokenType.LBRACE, TokenType.RBRACE])

    def test_colon_semicolon_comma(self, lex):
        tokens = lex(":;,")
        assert_types(tokens, [TokenType.COLON, TokenType.SEMICOLON, TokenType.COMMA])

    def test_parens_and_brackets(self, lex):
        tokens = lex("()[]")
        assert_types(
            tokens,
            [TokenType.LPAREN, TokenType.RPAREN, TokenType.LBRACKET, TokenType.RBRACKET],
        )

    def test_delims(self, lex):
        tokens = lex(">+~*&.")
        assert all(t.type == TokenType.DELIM for t in tokens)
        assert_values(tokens, [">", "+", "~", "*", "&", "."])

    def test_brace_position(self, lex):
        tokens = lex("{")
        assert tokens[0].span.start.line == 1
        assert tokens[0].span.start.column == 1
        assert tokens[0].span.end.column == 2


class TestWhitespace:
    def test_run_is_single_token(self, lex):
        tokens = lex(" \t\n\r\f ")
        assert_types(tokens, [TokenType.WS])
        assert tokens[0].value == " \t\n\r\f "

    def test_newline_advances_line(self, lex):
        tokens = lex("a\n  b")
        assert tokens[2].span.start.line == 2
        assert tokens[2].span.start.column == 3
        assert tokens[2].span.start.offset == 4

    def test_crlf_counts_as_one_line(self, lex):
        tokens = lex("a\r\nb")
        assert tokens[2].span.start.line == 2
        assert tokens[2].span.start.column == 1


class TestIdentifiers:
    def test_simple(self, lex):
        tokens = lex("color")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "color"

    def test_vendor_prefix(self, lex):
        tokens = lex("-webkit-transition")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "-webkit-transition"

    def test_custom_property(self, lex):
        tokens = lex("--main-bg")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "--main-bg"

    def test_underscore_and_digits(self, lex):
        tokens = lex("_col2")
        assert_types(tokens, [TokenType.IDENT])

    def test_non_ascii(self, lex):
        tokens = lex("café")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "café"

    def test_escaped_char(self, lex):
        tokens = lex("a\\:b")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "a:b"
        assert tokens[0].raw == "a\\:b"

    def test_hex_escape_eats_one_space(self, lex):
        tokens = lex("\\31 a")
        assert_types(tokens, [TokenType.IDENT])
        assert tokens[0].value == "1a"

    def test_lone_hyphen_is_delim(self, lex):
        tokens = lex("- ")
        assert_types(tokens, [TokenType.DELIM, TokenType.WS])


class TestHashAndAt:
    def test_hash(self, lex):
        tokens = lex("#main")
        assert_types(tokens, [TokenType.HASH])
        assert tokens[0].value == "main"
        assert tokens[0].raw == "#main"

    def test_hex_color_is_hash(self, lex):
        tokens = lex("#0af")
        assert_types(tokens, [TokenType.HASH])
        assert tokens[0].value == "0af"

    def test_lone_hash_is_delim(self, lex):
        tokens = lex("# ")
        assert_types(tokens, [TokenType.DELIM, TokenType.WS])

    def test_at_keyword(self, lex):
        tokens = lex("@media")
        assert_types(tokens, [TokenType.AT_KEYWORD])
        assert tokens[0].value == "media"

    def test_vendor_at_keyword(self, lex):
        tokens = lex("@-webkit-keyframes")
        assert_types(tokens, [TokenType.AT_KEYWORD])
        assert tokens[0].value == "-webkit-keyframes"

    def test_lone_at_is_delim(self, lex):
        tokens = lex("@ ")
        assert_types(tokens, [TokenType.DELIM, TokenType.WS])


class TestComments:
    def test_comment(self, lex):
        tokens = lex("/* hi */")
        assert_types(tokens, [TokenType.COMMENT])
        assert tokens[0].value == " hi "
        assert tokens[0].raw == "/* hi */"

    def test_comments_do_not_nest(self, lex):
        tokens = lex("/* a /* b */ c */")
        assert tokens[0].type == TokenType.COMMENT
        assert tokens[0].value == " a /* b "

    def test_multiline_comment_advances_line(self, lex):
        tokens = lex("/*\n\n*/a")
        assert tokens[1].span.start.line == 3

    def test_slash_alone_is_delim(self, lex):
        tokens = lex("a/b")
        assert_types(tokens, [TokenType.IDENT, TokenType.DELIM, TokenType.IDENT])


class TestUrl:
    def test_unquoted_url(self, lex):
        tokens = lex("url(img/a.png)")
        assert_types(tokens, [TokenType.URL])
        assert tokens[0].value == "img/a.png"

    def test_unquoted_url_with_semicolon(self, lex):
        tokens = lex("url(data:image/png;base64,AAA)")
        assert_types(tokens, [TokenType.URL])
        assert tokens[0].value == "data:image/png;base64,AAA"

    def test_url_inner_whitespace_trimmed(self, lex):
        tokens = lex("url(  a.png  )")
        assert_types(tokens, [TokenType.URL])
        assert tokens[0].value == "a.png"

    def test_quoted_url_is_function_form(self, lex):
        tokens = lex('url("a.png")')
        assert_types(
            tokens,
            [TokenType.IDENT, TokenType.LPAREN, TokenType.STRING, TokenType.RPAREN],
        )


class TestEof:
    def test_eof_always_last(self):
        from cssnest.lexer import tokenize

        tokens = tokenize("")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.EOF
        assert tokens[0].span.start.offset == 0

    def test_eof_position_at_end(self):
        from cssnest.lexer import tokenize

        tokens = tokenize("a {\n}")
        eof = tokens[-1]
        assert eof.type == TokenType.EOF
        assert eof.span.start.offset == 5
        assert eof.span.start.line == 2
        assert eof.span.start.column == 2
