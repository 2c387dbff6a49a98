"""
Тесты для сканера шаблонов.

Проверяет:
- литеральный текст и его слияние
- выражения <#= ... #> и блоки <# ... #>
- удвоенные разделители <#<# и #>#>
- явные и голые директивы
- ошибки незакрытых разделителей
"""

import pytest

from t4c.compiler.errors import InvalidDirectiveArgsError, UnterminatedDelimiterError
from t4c.compiler.scanner import TemplateScanner, scan_template
from t4c.compiler.tokens import TokenType
from t4c.config import CompilerOptions, Delimiters
from t4c.diagnostics import Span


def _types(tokens):
    return [t.type for t in tokens]


class TestLiteralText:

    def test_empty_template(self):
        """Пустой шаблон даёт только EOF."""
        tokens = scan_template("")

        assert _types(tokens) == [TokenType.EOF]
        assert tokens[0].span == Span(0, 0)

    def test_plain_text(self):
        tokens = scan_template("Hello, world!")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "Hello, world!"
        assert tokens[0].span == Span(0, 13)
        assert tokens[1].span == Span(13, 13)

    def test_doubled_open_is_literal(self):
        """<#<# в тексте — буквальный <#, сливается с соседним текстом."""
        tokens = scan_template("a<#<#b")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "a<#b"
        assert tokens[0].span == Span(0, 6)

    def test_doubled_open_disabled(self):
        options = CompilerOptions(doubled_delimiters=False)

        with pytest.raises(UnterminatedDelimiterError) as exc:
            scan_template("a<#<#b", options)

        assert exc.value.span == Span(1, 3)

    def test_lone_close_delimiter_is_text(self):
        tokens = scan_template("a #> b")

        assert _types(tokens) == [TokenType.TEXT, TokenType.EOF]
        assert tokens[0].value == "a #> b"


class TestDelimitedConstructs:

    def test_expression(self):
        tokens = scan_template("Hi <#= name #>!")

        assert _types(tokens) == [
            TokenType.TEXT,
            TokenType.EXPR_OPEN,
            TokenType.CODE,
            TokenType.EXPR_CLOSE,
            TokenType.TEXT,
            TokenType.EOF,
        ]
        assert tokens[0].value == "Hi "
        assert tokens[1].span == Span(3, 6)
        assert tokens[2].value == " name "
        assert tokens[2].span == Span(6, 12)
        assert tokens[3].span == Span(12, 14)
        assert tokens[4].value == "!"

    def test_block(self):
        tokens = scan_template("<# if x #>")

        assert _types(tokens) == [
            TokenType.BLOCK_OPEN, TokenType.CODE, TokenType.BLOCK_CLOSE, TokenType.EOF
        ]
        assert tokens[0].span == Span(0, 2)
        assert tokens[1].value == " if x "
        assert tokens[2].span == Span(8, 10)

    def test_first_closer_wins(self):
        """Разделители одного вида не вкладываются: закрывает первый #>."""
        tokens = scan_template("<#= a #> b #>")

        assert tokens[1].value == " a "
        assert tokens[3].value == " b #>"

    def test_doubled_close_inside_code(self):
        tokens = scan_template("<#= '#>#>' #>")

        assert tokens[1].type is TokenType.CODE
        assert tokens[1].value == " '#>' "
        assert tokens[1].span == Span(3, 11)
        assert tokens[2].span == Span(11, 13)

    def test_custom_delimiters(self):
        options = CompilerOptions(delimiters=Delimiters(open="{%", close="%}"))
        tokens = scan_template("x{%= y %}z", options)

        assert _types(tokens) == [
            TokenType.TEXT,
            TokenType.EXPR_OPEN,
            TokenType.CODE,
            TokenType.EXPR_CLOSE,
            TokenType.TEXT,
            TokenType.EOF,
        ]
        assert tokens[2].value == " y "

    @pytest.mark.parametrize("text", [
        "Hi <#= name #>!",
        "<# if x #>\n  A\n<# else #>B<# endif #>",
        "a<#<#b<#@ escape off #><#= '#>#>' #>tail",
        "<# cleanws #>\n<# for i in xs #><#= i #><# end #>\n",
    ])
    def test_spans_cover_source(self, text):
        """Токены покрывают исходник без пропусков и перекрытий."""
        tokens = scan_template(text)
        body = tokens[:-1]

        assert body[0].span.start == 0
        assert body[-1].span.end == len(text)
        for prev, cur in zip(body, body[1:]):
            assert prev.span.end == cur.span.start


class TestDirectiveTokens:

    def test_bare_directive(self):
        tokens = scan_template("<# escape off #>")

        assert _types(tokens) == [TokenType.DIRECTIVE, TokenType.EOF]
        assert tokens[0].value == "escape"
        assert tokens[0].args == ("off",)
        assert tokens[0].span == Span(0, 16)

    def test_explicit_directive_without_args(self):
        tokens = scan_template("<#@ cleanws #>")

        assert tokens[0].type is TokenType.DIRECTIVE
        assert tokens[0].value == "cleanws"
        assert tokens[0].args == ()

    def test_explicit_unknown_name_is_still_a_directive(self):
        """Имя проверяет процессор директив, а не сканер."""
        tokens = scan_template("<#@ include header #>")

        assert tokens[0].type is TokenType.DIRECTIVE
        assert tokens[0].value == "include"
        assert tokens[0].args == ("header",)

    def test_quoted_argument_is_normalized(self):
        tokens = scan_template('<#@ escape function="html.escape" #>')

        assert tokens[0].args == ("function=html.escape",)

    def test_quoted_argument_with_escapes(self):
        tokens = scan_template(r'<#@ escape function="a\"b" #>')

        assert tokens[0].args == ('function=a"b',)

    @pytest.mark.parametrize("code", [
        "escaped = 1",
        "escape(x)",
        "escape_html(x)",
        "cleanwsx",
        "print(escape)",
        "escape = html.escape",
        "cleanws sometimes",
        "escape on off",
    ])
    def test_block_that_only_looks_like_directive(self, code):
        tokens = scan_template(f"<# {code} #>")

        assert tokens[0].type is TokenType.BLOCK_OPEN
        assert tokens[1].value == f" {code} "

    def test_invalid_bare_directive_stays_code(self):
        tokens = scan_template("a<# escape = html.escape #>b")

        assert [t.type for t in tokens] == [
            TokenType.TEXT, TokenType.BLOCK_OPEN, TokenType.CODE,
            TokenType.BLOCK_CLOSE, TokenType.TEXT, TokenType.EOF,
        ]
        assert tokens[2].span == Span(3, 25)

    def test_bare_directives_disabled(self):
        options = CompilerOptions(bare_directives=False)
        tokens = scan_template("<# escape off #>", options)

        assert tokens[0].type is TokenType.BLOCK_OPEN

    def test_malformed_arguments(self):
        with pytest.raises(InvalidDirectiveArgsError) as exc:
            scan_template('xx<#@ escape function="x"y #>')

        assert exc.value.name == "escape"
        assert exc.value.span == Span(2, 29)


class TestUnterminated:

    def test_unterminated_expression(self):
        with pytest.raises(UnterminatedDelimiterError, match=r"Unterminated delimiter '<#='") as exc:
            scan_template("<#= missing")

        assert exc.value.span == Span(0, 3)
        assert exc.value.delimiter == "<#="

    def test_unterminated_block_reports_opener(self):
        with pytest.raises(UnterminatedDelimiterError) as exc:
            scan_template("abc <# if x")

        assert exc.value.span == Span(4, 6)

    def test_tokens_before_error_are_yielded(self):
        """Ленивое сканирование: всё, что до ошибки, уже выдано."""
        scanner = TemplateScanner("ok <#= x #> <# broken")
        seen = []

        with pytest.raises(UnterminatedDelimiterError):
            for token in scanner.iter_tokens():
                seen.append(token.type)

        assert seen[:4] == [
            TokenType.TEXT, TokenType.EXPR_OPEN, TokenType.CODE, TokenType.EXPR_CLOSE
        ]
