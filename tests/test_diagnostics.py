import pytest

from t4c.compiler import TemplateCompiler
from t4c.compiler.errors import TemplateCompileError, UnterminatedDelimiterError
from t4c.diagnostics import SourceLocation, SourceMap, Span, format_diagnostic


class TestSpan:

    def test_basics(self):
        span = Span(2, 5)

        assert len(span) == 3
        assert span.text_of("abcdefg") == "cde"
        assert repr(span) == "Span(2, 5)"

    def test_cover(self):
        assert Span(4, 6).cover(Span(1, 2)) == Span(1, 6)

    @pytest.mark.parametrize("start, end", [(-1, 2), (5, 3)])
    def test_invalid(self, start, end):
        with pytest.raises(ValueError, match="Invalid span"):
            Span(start, end)


class TestSourceMap:

    def setup_method(self):
        self.smap = SourceMap("ab\ncd\n\nef")

    def test_locate(self):
        assert self.smap.locate(0) == SourceLocation(1, 1)
        assert self.smap.locate(3) == SourceLocation(2, 1)
        assert self.smap.locate(4) == SourceLocation(2, 2)
        assert self.smap.locate(9) == SourceLocation(4, 3)
        assert str(self.smap.locate(7)) == "4:1"

    def test_locate_out_of_range(self):
        with pytest.raises(ValueError):
            self.smap.locate(100)

    def test_lines(self):
        assert self.smap.line_count == 4
        assert self.smap.line_text(2) == "cd"
        assert self.smap.line_text(3) == ""
        assert self.smap.line_text(4) == "ef"


class TestFormatDiagnostic:

    def test_caret_under_opener(self):
        source = "line one\nI like <#= food"

        with pytest.raises(UnterminatedDelimiterError) as exc:
            TemplateCompiler().compile(source)

        assert format_diagnostic(exc.value, source, "page.tt") == "\n".join([
            "page.tt:2:8: error: Unterminated delimiter '<#=' (expected '#>')",
            "    I like <#= food",
            "           ^^^",
        ])

    def test_multiline_span_is_clipped(self):
        source = "<# if a #>\nbody"

        with pytest.raises(TemplateCompileError) as exc:
            TemplateCompiler().compile(source)

        lines = format_diagnostic(exc.value, source).splitlines()
        assert lines[0] == "<template>:1:1: error: Unclosed block 'if a'"
        assert lines[2] == "    " + "^" * 10

    def test_blank_line_has_no_excerpt(self):
        error = TemplateCompileError("Something", Span(1, 1))

        assert format_diagnostic(error, "\n\n") == "<template>:2:1: error: Something"

    def test_error_str_has_offset(self):
        error = TemplateCompileError("Something", Span(7, 9))

        assert str(error) == "Something at offset 7"
        assert error.message == "Something"
