"""Tests for inline rendering."""

import pytest

from markweave import ConversionOptions, convert
from markweave.services.inline import join_inline, single_line, trim_inline, wrap_inline


class TestInlineHelpers:
    """Tests for the inline joining helpers."""

    def test_join_inline_collapses_boundary_spaces(self):
        """Test spaces at piece boundaries are not doubled."""
        assert join_inline(["a ", " **b** ", " c"]) == "a **b** c"

    def test_join_inline_keeps_leading_space(self):
        """Test the first piece keeps its leading space for emphasis handling."""
        assert join_inline([" x"]) == " x"

    def test_join_inline_no_space_before_break(self):
        """Test a space before a hard break is dropped."""
        assert join_inline(["a ", "\\\n", "b"]) == "a\\\nb"

    def test_wrap_inline_moves_spaces_outside(self):
        """Test delimiters hug the content."""
        assert wrap_inline(" bold ", "**") == " **bold** "

    def test_wrap_inline_whitespace_only(self):
        """Test whitespace-only content collapses to a space."""
        assert wrap_inline("  ", "**") == " "
        assert wrap_inline("", "**") == ""

    def test_trim_inline_strips_breaks(self):
        """Test leading and trailing hard breaks are stripped."""
        assert trim_inline("\\\n a\\\nb \\\n") == "a\\\nb"

    def test_trim_inline_keeps_escaped_backslash(self):
        """Test an escaped backslash at the end is not a break."""
        assert trim_inline("a\\\\") == "a\\\\"

    def test_single_line(self):
        """Test breaks fold into spaces."""
        assert single_line("a \\\n b") == "a b"

    def test_join_inline_escapes_bang_before_link(self):
        """Test a bang ending one piece cannot turn the next link into an image."""
        assert join_inline(["Wow!", "[pic](x)"]) == "Wow\\![pic](x)"


class TestEmphasis:
    """Tests for emphasis elements."""

    @pytest.mark.parametrize(
        ("html", "expected"),
        [
            ("<strong>x</strong>", "**x**"),
            ("<b>x</b>", "**x**"),
            ("<em>x</em>", "*x*"),
            ("<i>x</i>", "*x*"),
            ("<del>x</del>", "~~x~~"),
            ("<s>x</s>", "~~x~~"),
            ("<strike>x</strike>", "~~x~~"),
        ],
    )
    def test_markers(self, html, expected):
        """Test each emphasis tag's marker."""
        assert convert(f"<p>{html}</p>") == expected

    def test_whitespace_moved_outside(self):
        """Test inner edge whitespace ends up outside the markers."""
        assert convert("<p>a<b> x </b>c</p>") == "a **x** c"

    def test_nested_identical_not_doubled(self):
        """Test strong inside b renders a single pair of markers."""
        assert convert("<p><strong>a <b>b</b></strong></p>") == "**a b**"

    def test_mixed_nesting(self):
        """Test different emphasis kinds nest."""
        assert convert("<p><b>a <i>b</i></b></p>") == "**a *b***"

    def test_empty_emphasis(self):
        """Test empty emphasis produces nothing."""
        assert convert("<p>a<b></b>b</p>") == "ab"


class TestText:
    """Tests for text escaping and whitespace."""

    def test_escapes_markdown(self):
        """Test literal Markdown characters are escaped."""
        assert convert("<p>*not emphasis* and [x]</p>") == r"\*not emphasis\* and \[x\]"

    def test_whitespace_collapsed(self):
        """Test runs of whitespace and nbsp collapse to one space."""
        assert convert("<p>a \n\t b&nbsp;&nbsp;c</p>") == "a b c"

    def test_entities_decoded(self):
        """Test entities become characters, escaped where needed."""
        assert convert("<p>&lt;tag&gt; &amp; &copy;</p>") == "\\<tag\\> & ©"

    def test_line_start_escapes(self):
        """Test text that would start a block is escaped."""
        assert convert("<p>1. Not a list</p>") == r"1\. Not a list"
        assert convert("<p># Not heading</p>") == r"\# Not heading"
        assert convert("<p>- not a bullet</p>") == r"\- not a bullet"

    def test_comments_ignored(self):
        """Test comments produce nothing."""
        assert convert("<p>a<!-- hidden -->b</p>") == "ab"

    def test_bang_before_link_is_not_an_image(self):
        """Test text ending in a bang before a link keeps the link a link."""
        assert convert('<p>Wow!<a href="https://x.com/p">pic</a></p>') == "Wow\\![pic](https://x.com/p)"
        assert convert('<p>Wow! <a href="https://x.com/p">pic</a></p>') == "Wow! [pic](https://x.com/p)"
        assert convert('<p><b>Wow!</b><a href="https://x.com/p">pic</a></p>') == "**Wow!**[pic](https://x.com/p)"

    def test_escaped_entity_text_stays_literal(self):
        """Test decoded text that looks like an entity is not decoded again."""
        assert convert("<p>Write &amp;copy; to get the sign</p>") == "Write \\&copy; to get the sign"
        assert convert("<p>&amp;<span>copy;</span></p>") == "\\&copy;"
        assert convert("<p>AT&amp;T</p>") == "AT&T"


class TestCodeSpans:
    """Tests for inline code."""

    def test_simple(self):
        """Test code content is not escaped."""
        assert convert("<p>Use <code>*args</code></p>") == "Use `*args`"

    def test_backticks_in_content(self):
        """Test the delimiter outgrows backtick runs in the content."""
        assert convert("<p><code>a`b</code></p>") == "``a`b``"

    def test_padding(self):
        """Test content starting with a backtick is padded."""
        assert convert("<p><code>`x</code></p>") == "`` `x ``"

    def test_newlines_folded(self):
        """Test newlines in inline code become spaces."""
        assert convert("<p><code>a\nb</code></p>") == "`a b`"

    def test_markup_inside_code_is_literal(self):
        """Test nested elements inside code contribute plain text."""
        assert convert("<p><code><b>x</b>_y</code></p>") == "`x_y`"

    def test_tt_is_code(self):
        """Test tt renders as code."""
        assert convert("<p><tt>x</tt></p>") == "`x`"


class TestBreaks:
    """Tests for line breaks."""

    def test_hard_break(self):
        """Test br is a backslash hard break."""
        assert convert("<p>a<br>b</p>") == "a\\\nb"

    def test_edge_breaks_dropped(self):
        """Test breaks at the start or end of a paragraph are dropped."""
        assert convert("<p><br>a<br></p>") == "a"

    def test_break_in_heading(self):
        """Test br in a heading becomes a space."""
        assert convert("<h2>a<br>b</h2>") == "## a b"


class TestLinks:
    """Tests for links."""

    def test_inline_link(self):
        """Test the inline link form."""
        assert convert('<a href="https://example.com">Link</a>') == "[Link](https://example.com)"

    def test_title(self):
        """Test titles are quoted and escaped."""
        md = convert('<a href="https://x.com" title=\'Say "hi"\'>X</a>')
        assert md == '[X](https://x.com "Say \\"hi\\"")'

    def test_relative_link_resolved(self):
        """Test relative hrefs resolve against base_url."""
        md = convert('<a href="/docs">Docs</a>', base_url="https://example.com/a/")
        assert md == "[Docs](https://example.com/docs)"

    def test_relative_link_without_base(self):
        """Test relative hrefs pass through without base_url."""
        assert convert('<a href="docs/x.html">X</a>') == "[X](docs/x.html)"

    def test_url_encoding(self):
        """Test spaces and parentheses are percent-encoded."""
        md = convert('<a href="https://example.com/path (1)">x</a>')
        assert md == "[x](https://example.com/path%20%281%29)"

    def test_autolink(self):
        """Test a link whose text is its URL becomes an autolink."""
        assert convert('<a href="https://example.com">https://example.com</a>') == "<https://example.com>"

    def test_email_autolink(self):
        """Test a mailto link whose text is the address becomes an autolink."""
        assert convert('<a href="mailto:a@b.com">a@b.com</a>') == "<a@b.com>"

    def test_mailto_with_other_text(self):
        """Test mailto links with other text stay links."""
        assert convert('<a href="mailto:test@example.com">Email</a>') == "[Email](mailto:test@example.com)"

    def test_title_disables_autolink(self):
        """Test titled links keep the full form."""
        md = convert('<a href="https://e.com" title="t">https://e.com</a>')
        assert md == '[https://e.com](https://e.com "t")'

    def test_relative_text_is_not_autolinked(self):
        """Test autolinks need an absolute URL."""
        assert convert('<a href="/x">/x</a>') == "[/x](/x)"

    def test_missing_or_fragment_href(self):
        """Test links without a target render their text."""
        assert convert("<p><a>Plain</a> and <a href='#'>Top</a></p>") == "Plain and Top"

    def test_empty_text(self):
        """Test links without text produce nothing."""
        assert convert('<p>a<a href="https://x.com"></a>b</p>') == "ab"

    def test_javascript_links_dropped(self):
        """Test javascript: links are removed with their text, any case."""
        assert convert('<p><a href=" JavaScript:void(0) ">Print</a></p>') == ""

    def test_spacing_kept_outside(self):
        """Test spaces inside link text move outside the link."""
        assert convert('<p>see<a href="https://x.com"> here </a>now</p>') == "see [here](https://x.com) now"

    def test_image_in_link(self):
        """Test an image can be the link text."""
        md = convert('<a href="https://x.com"><img src="https://x.com/i.png" alt="I"></a>')
        assert md == "[![I](https://x.com/i.png)](https://x.com)"


class TestReferencedLinks:
    """Tests for the referenced link style."""

    def test_references_and_appendix(self):
        """Test links become references listed at the end, deduplicated by URL."""
        html = (
            '<p><a href="https://a.com">A</a> <a href="https://b.com" title="B">B</a> '
            '<a href="https://a.com">again</a></p>'
        )
        md = convert(html, link_style="referenced")
        assert md == '[A][1] [B][2] [again][1]\n\n[1]: https://a.com\n[2]: https://b.com "B"'

    def test_autolinks_not_referenced(self):
        """Test autolinks stay inline and add no reference."""
        assert convert('<a href="https://a.com">https://a.com</a>', link_style="referenced") == "<https://a.com>"

    def test_options_object(self):
        """Test the style can come from an options object."""
        options = ConversionOptions(link_style="referenced")
        assert convert('<a href="https://a.com">A</a>', options) == "[A][1]\n\n[1]: https://a.com"


class TestImages:
    """Tests for images."""

    def test_image(self):
        """Test images render with alt text and resolved source."""
        md = convert('<img src="/i.png" alt="A [b]">', base_url="https://e.com/docs/")
        assert md == "![A \\[b\\]](https://e.com/i.png)"

    def test_image_title(self):
        """Test image titles."""
        assert convert('<img src="x.png" alt="a" title="T">') == '![a](x.png "T")'

    def test_missing_src(self):
        """Test images without src produce nothing."""
        assert convert('<p>a<img alt="x">b</p>') == "ab"


class TestPassthrough:
    """Tests for elements kept as HTML."""

    def test_kbd(self):
        """Test kbd is kept."""
        assert convert("<p>Press <kbd>Ctrl</kbd></p>") == "Press <kbd>Ctrl</kbd>"

    def test_abbr_keeps_title(self):
        """Test abbr keeps an escaped title attribute."""
        md = convert('<p><abbr title="HyperText &quot;ML&quot;">HTML</abbr></p>')
        assert md == '<abbr title="HyperText &quot;ML&quot;">HTML</abbr>'

    def test_sub_sup(self):
        """Test sub and sup are kept."""
        assert convert("<p>H<sub>2</sub>O x<sup>2</sup></p>") == "H<sub>2</sub>O x<sup>2</sup>"

    def test_unknown_tag(self):
        """Test unknown tags are kept with rendered content."""
        assert convert("<p><custom-el>*x*</custom-el></p>") == "<custom-el>\\*x\\*</custom-el>"

    def test_empty_passthrough(self):
        """Test empty passthrough elements produce nothing."""
        assert convert("<p>a<mark></mark>b</p>") == "ab"

    def test_transparent_wrappers(self):
        """Test wrappers such as span add no markup."""
        assert convert("<p><span>a</span> <u>b</u> <small>c</small></p>") == "a b c"
