"""Tests for the line helpers and the document lexer."""

from __future__ import annotations

from helium_dsl.core.scanner import (
    TokenKind,
    brace_delta,
    code_tokens,
    comment_start,
    group_by_line,
    in_literal_at,
    is_comment_line,
    split_lines,
    tokenize,
)


class TestLineHelpers:
    def test_split_lines_handles_crlf(self) -> None:
        assert split_lines("a\r\nb\nc") == ["a", "b", "c"]

    def test_offset_inside_double_quotes(self) -> None:
        assert in_literal_at('x = "a // b"', 7) is True

    def test_offset_before_string(self) -> None:
        assert in_literal_at('x = "a // b"', 0) is False

    def test_offset_inside_block_literal(self) -> None:
        assert in_literal_at("q = /% a += 1 %/;", 8) is True

    def test_escaped_quote_does_not_close_string(self) -> None:
        line = 's = "a\\"b + c";'
        assert in_literal_at(line, line.index("+")) is True

    def test_comment_start_after_code(self) -> None:
        assert comment_start("x = 1; // note") == 7

    def test_comment_start_skips_url_in_string(self) -> None:
        assert comment_start('x = "http://a"; // c') == 16

    def test_no_comment(self) -> None:
        assert comment_start('x = "//";') is None

    def test_comment_lines(self) -> None:
        assert is_comment_line("   // x") is True
        assert is_comment_line(" * doc") is True
        assert is_comment_line("/* start") is True
        assert is_comment_line("x = 1;") is False

    def test_brace_delta_ignores_strings(self) -> None:
        assert brace_delta('if (a) { s = "{"; }') == 0

    def test_brace_delta_opening(self) -> None:
        assert brace_delta("} else {") == 0
        assert brace_delta("else {") == 1

    def test_brace_delta_ignores_trailing_comment(self) -> None:
        assert brace_delta("} // {") == -1


class TestTokenize:
    def test_declaration(self) -> None:
        tokens = tokenize("int a = 1;")
        assert [t.kind for t in tokens] == [
            TokenKind.IDENT,
            TokenKind.IDENT,
            TokenKind.OP,
            TokenKind.NUMBER,
            TokenKind.OP,
        ]
        assert [t.text for t in tokens] == ["int", "a", "=", "1", ";"]
        assert [t.column for t in tokens] == [0, 4, 6, 8, 9]

    def test_two_char_operators(self) -> None:
        tokens = tokenize("a += 1; b == c")
        assert [t.text for t in tokens if t.kind is TokenKind.OP] == ["+=", ";", "=="]

    def test_decimal_number_is_one_token(self) -> None:
        tokens = tokenize("decimal rate = 0.25;")
        assert tokens[3].kind is TokenKind.NUMBER
        assert tokens[3].text == "0.25"

    def test_string_with_escaped_quote(self) -> None:
        tokens = tokenize('s = "a\\"b";')
        assert tokens[2].kind is TokenKind.STRING
        assert tokens[2].text == '"a\\"b"'
        assert tokens[3].text == ";"

    def test_unterminated_string_ends_at_line_end(self) -> None:
        tokens = tokenize('s = "open\nint a = 1;')
        assert tokens[2].kind is TokenKind.STRING
        assert tokens[3].text == "int"
        assert tokens[3].line == 1

    def test_block_literal_spans_lines(self) -> None:
        tokens = tokenize("x = /%\nline\n%/;")
        literal = tokens[2]
        assert literal.kind is TokenKind.BLOCK_LITERAL
        assert (literal.line, literal.column) == (0, 4)
        assert (literal.end_line, literal.end_column) == (2, 2)
        assert tokens[3].text == ";"
        assert (tokens[3].line, tokens[3].column) == (2, 2)

    def test_unclosed_block_comment_runs_to_end(self) -> None:
        tokens = tokenize("a = 1;\n/* never\nclosed")
        assert tokens[-1].kind is TokenKind.COMMENT
        assert tokens[-1].end_line == 2

    def test_line_comment(self) -> None:
        tokens = tokenize("a = 1; // a += 2")
        assert tokens[-1].kind is TokenKind.COMMENT
        assert tokens[-1].text == "// a += 2"

    def test_code_tokens_drop_comments(self) -> None:
        tokens = code_tokens(tokenize("/* doc */ int a; // trailing"))
        assert [t.text for t in tokens] == ["int", "a", ";"]

    def test_group_by_line(self) -> None:
        grouped = group_by_line(tokenize("int a;\n\nint b;"))
        assert sorted(grouped) == [0, 2]
        assert [t.text for t in grouped[2]] == ["int", "b", ";"]

    def test_is_word_without_arguments_matches_any_identifier(self) -> None:
        ident, op = tokenize("total =")
        assert ident.is_word() is True
        assert ident.is_word("count") is False
        assert op.is_word() is False
        assert op.is_op("=") is True
