import blessed
import pytest

from modeline.context import ModelineContext
from modeline.settings import ModelineSettings


@pytest.fixture
def term():
    """A terminal that emits no escape sequences, so widths are easy to read."""
    return blessed.Terminal(force_styling=None)


@pytest.fixture
def bare_context(term):
    """Context without built-in segments or a bar."""
    ctx = ModelineContext(
        settings=ModelineSettings(bar_visible=False),
        term=term,
        install_builtins=False,
    )
    ctx.start()
    yield ctx
    ctx.shutdown()


@pytest.fixture
def context(term):
    """Context with the built-in segments and presets, bar hidden."""
    ctx = ModelineContext(settings=ModelineSettings(bar_visible=False), term=term)
    ctx.start()
    yield ctx
    ctx.shutdown()
