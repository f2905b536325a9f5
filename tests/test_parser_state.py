from indent_alignment.models import ParserContext, ParserState
from indent_alignment.parser import _html_block_start, _try_close_fence, _try_open_fence


def test_try_open_fence_sets_context_fields():
    ctx = ParserContext()

    opened = _try_open_fence(ctx, "   ```python\n")

    assert opened is True
    assert ctx.state is ParserState.IN_FENCED_CODE
    assert ctx.fence_char == "`"
    assert ctx.fence_length == 3
    assert ctx.fence_indent_columns == 3


def test_try_open_fence_ignored_when_already_in_code():
    ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="~", fence_length=3)

    assert _try_open_fence(ctx, "```") is False
    assert ctx.fence_char == "~"
    assert ctx.fence_length == 3


def test_try_open_fence_rejects_backtick_in_info_string():
    ctx = ParserContext()

    assert _try_open_fence(ctx, "``` a`b") is False
    assert ctx.state is ParserState.NORMAL


def test_try_close_fence_respects_indent_limit():
    ctx = ParserContext(
        state=ParserState.IN_FENCED_CODE,
        fence_char="`",
        fence_length=3,
        fence_indent_columns=0,
    )

    assert _try_close_fence(ctx, "    ```\n") is False
    assert _try_close_fence(ctx, "``") is False
    assert _try_close_fence(ctx, "~~~") is False
    assert _try_close_fence(ctx, "```` trailing") is False


def test_try_close_fence_resets_fence_fields():
    ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="~", fence_length=3)

    assert _try_close_fence(ctx, "  ~~~~  ") is True
    assert ctx.fence_char is None
    assert ctx.fence_length == 0


def test_html_block_start_conditions():
    assert _html_block_start("<div class='x'>", interrupting=False) == (True, None)
    assert _html_block_start("<!-- note", interrupting=False) == (True, "-->")
    assert _html_block_start("<pre>", interrupting=True)[0] is True
    assert _html_block_start("<span>", interrupting=False) == (True, None)
    assert _html_block_start("<span>", interrupting=True) == (False, None)
    assert _html_block_start("<span>text", interrupting=False) == (False, None)
    assert _html_block_start("text", interrupting=False) == (False, None)
