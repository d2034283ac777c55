"""Test status line assembly and padding."""

from modeline.assembler import compute_padding
from modeline.state import Buffer, Surface


def _surface(ctx, width=40, surface_id="w1", preset="minimal"):
    surface = Surface(id=surface_id, buffer=Buffer(id=f"{surface_id}-buf", name="a.txt"), width=width)
    ctx.add_surface(surface, preset=preset)
    return surface


def test_compute_padding():
    assert compute_padding(40, 5, 4) == 31
    assert compute_padding(10, 6, 6) == 0
    assert compute_padding(0, 0, 0) == 0


def test_minimal_preset_padding(bare_context):
    ctx = bare_context
    ctx.declare_segment("id", lambda c: "a.txt", triggers=["file-opened"])
    ctx.declare_segment("mode", lambda c: "Text", triggers=["mode-changed"])
    ctx.declare_preset("minimal", left=["id"], right=["mode"])
    _surface(ctx)

    line = ctx.redraw()["w1"]

    assert line == "a.txt" + " " * 31 + "Text"
    assert ctx.assembler.widths(ctx.surfaces["w1"]) == {
        'bar': 0, 'left': 5, 'right': 4, 'padding': 31,
    }


def test_segments_concatenate_without_separator(bare_context):
    ctx = bare_context
    ctx.declare_segment("a", lambda c: "[a]")
    ctx.declare_segment("b", lambda c: "[b]")
    ctx.declare_preset("two", left=["a", "b"], right=[])
    _surface(ctx, width=10, preset="two")

    assert ctx.render("w1") == "[a][b]    "


def test_wide_glyphs_measured_in_cells(bare_context):
    ctx = bare_context
    ctx.declare_segment("id", lambda c: "日本.txt")  # 4 + 4 cells
    ctx.declare_segment("mode", lambda c: "Text")
    ctx.declare_preset("minimal", left=["id"], right=["mode"])
    surface = _surface(ctx, width=20)

    line = ctx.render("w1")

    assert ctx.term.length(line) == surface.width
    assert line == "日本.txt" + " " * 8 + "Text"


def test_overflow_is_not_padded(bare_context):
    ctx = bare_context
    ctx.declare_segment("id", lambda c: "x" * 30)
    ctx.declare_segment("mode", lambda c: "y" * 30)
    ctx.declare_preset("minimal", left=["id"], right=["mode"])
    _surface(ctx, width=40)

    assert ctx.render("w1") == "x" * 30 + "y" * 30


def test_rendered_width_never_exceeds_surface_when_content_fits(bare_context):
    ctx = bare_context
    ctx.declare_segment("id", lambda c: "abc")
    ctx.declare_segment("mode", lambda c: "de")
    ctx.declare_preset("minimal", left=["id"], right=["mode"])
    for width in range(5, 30):
        surface = _surface(ctx, width=width, surface_id=f"w{width}")
        assert ctx.term.length(ctx.render(surface.id)) == width


def test_empty_sides_render_as_padding(bare_context):
    ctx = bare_context
    ctx.declare_preset("empty", left=[], right=[])
    _surface(ctx, width=8, preset="empty")

    assert ctx.render("w1") == " " * 8


def test_missing_segment_renders_empty(bare_context):
    ctx = bare_context
    ctx.declare_segment("mode", lambda c: "Text")
    ctx.declare_preset("minimal", left=["does-not-exist"], right=["mode"])
    _surface(ctx, width=10)

    assert ctx.render("w1") == " " * 6 + "Text"


def test_surface_without_format_state(bare_context):
    ctx = bare_context
    surface = Surface(id="lonely", width=5)
    assert ctx.assembler.render_sides(surface) == ("", "")
    assert ctx.assembler.render(surface) == " " * 5


def test_bar_counts_toward_width(bare_context):
    ctx = bare_context
    ctx.bar.configure(visible=True, width=2, position="start")
    ctx.declare_segment("id", lambda c: "a.txt")
    ctx.declare_segment("mode", lambda c: "Text")
    ctx.declare_preset("minimal", left=["id"], right=["mode"])
    _surface(ctx, width=40)

    line = ctx.render("w1")

    assert line == "  a.txt" + " " * 29 + "Text"
    assert ctx.term.length(line) == 40


def test_bar_at_end(bare_context):
    ctx = bare_context
    ctx.bar.configure(visible=True, width=1, position="end")
    ctx.declare_segment("id", lambda c: "id")
    ctx.declare_preset("p", left=["id"], right=[])
    _surface(ctx, width=6, preset="p")

    assert ctx.render("w1") == "id" + "   " + " "


def test_custom_measure_function(term):
    from modeline.context import ModelineContext
    from modeline.settings import ModelineSettings

    # Pretend every string is twice as wide as it is long
    ctx = ModelineContext(
        settings=ModelineSettings(bar_visible=False),
        term=term,
        measure=lambda s: 2 * len(s),
        install_builtins=False,
    )
    ctx.declare_segment("id", lambda c: "ab")
    ctx.declare_preset("p", left=["id"], right=[])
    _surface(ctx, width=10, preset="p")

    assert ctx.render("w1") == "ab" + " " * 6


def test_unstyled_face_leaves_text_plain(bare_context):
    ctx = bare_context
    ctx.declare_segment("id", lambda c: "a", styled=True)
    ctx.declare_segment("raw", lambda c: "b", styled=False)
    ctx.declare_preset("p", left=["id", "raw"], right=[])
    _surface(ctx, width=2, preset="p")
    ctx.enter_surface("w1")

    # The fixture terminal does no styling, so faces add nothing
    assert ctx.render("w1") == "ab"
