import pytest

from t4c.compiler import TemplateCompiler
from t4c.config import CompilerOptions
from t4c.types import WhitespaceMode


@pytest.fixture
def compiler() -> TemplateCompiler:
    return TemplateCompiler()


@pytest.fixture
def cleaning_compiler() -> TemplateCompiler:
    """Компилятор с cleanws=block с самого начала шаблона."""
    return TemplateCompiler(CompilerOptions(cleanws=WhitespaceMode.BLOCK))
