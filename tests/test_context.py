"""Tests for the render context stack."""

import pytest

from markweave import convert
from markweave.services.context import (
    BlockquoteScope,
    CodeScope,
    ListScope,
    RenderContext,
    TableScope,
)


class TestListScope:
    """Tests for ListScope markers."""

    def test_bullet_marker_is_constant(self):
        """Test bullet lists repeat their marker."""
        frame = ListScope(ordered=False, marker="*")
        assert frame.next_marker() == "*"
        assert frame.next_marker() == "*"
        assert frame.width == 2

    def test_ordered_markers_count_from_start(self):
        """Test ordered markers start at index and increment."""
        frame = ListScope(ordered=True, index=5)
        assert frame.next_marker() == "5."
        assert frame.next_marker() == "6."
        assert frame.index == 7

    def test_width_follows_marker_length(self):
        """Test width aligns continuation lines with item content."""
        frame = ListScope(ordered=True, index=9)
        assert frame.width == 3
        frame.next_marker()
        assert frame.width == 3
        frame.next_marker()
        assert frame.width == 4


class TestRenderContext:
    """Tests for RenderContext."""

    def test_push_and_pop(self):
        """Test frames come off in reverse order."""
        context = RenderContext()
        quote = BlockquoteScope()
        code = CodeScope()
        context.push(quote)
        context.push(code)
        assert context.depth == 2
        assert context.pop() is code
        assert context.pop() is quote
        assert context.depth == 0

    def test_scope_pops_on_exception(self):
        """Test the scope manager restores depth when the body raises."""
        context = RenderContext()
        with pytest.raises(RuntimeError):
            with context.scope(ListScope(ordered=False)):
                assert context.depth == 1
                raise RuntimeError("boom")
        assert context.depth == 0

    def test_scope_yields_frame(self):
        """Test the frame pushed is the one yielded."""
        context = RenderContext()
        frame = TableScope()
        with context.scope(frame) as entered:
            assert entered is frame
            assert context.in_table

    def test_innermost_finds_nearest_frame(self):
        """Test innermost returns the deepest frame of a kind."""
        context = RenderContext()
        outer = ListScope(ordered=False)
        inner = ListScope(ordered=True)
        with context.scope(outer), context.scope(BlockquoteScope()), context.scope(inner):
            assert context.innermost(ListScope) is inner
        assert context.innermost(ListScope) is None

    def test_in_code(self):
        """Test in_code reflects an open code frame."""
        context = RenderContext()
        assert not context.in_code
        with context.scope(CodeScope()):
            assert context.in_code
        assert not context.in_code

    def test_blockquote_depth(self):
        """Test blockquote depth comes from the innermost quote frame."""
        context = RenderContext()
        with context.scope(BlockquoteScope(depth=1)), context.scope(BlockquoteScope(depth=2)):
            assert context.blockquote_depth == 2
        assert context.blockquote_depth == 0

    def test_nested_lists_indent_through_rendering(self):
        """Test nested list content is indented by each enclosing item."""
        md = convert("<ul><li>a<blockquote><ol><li>b</li></ol></blockquote></li></ul>")
        assert md == "- a\n\n  > 1. b"
