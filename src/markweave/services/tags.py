"""Tag classification tables shared by the inline and block renderers."""

from bs4 import Tag

# Subtrees that never produce output
SKIP_TAGS = frozenset(
    [
        # Document metadata and scripting
        "head",
        "title",
        "meta",
        "link",
        "base",
        "script",
        "style",
        "noscript",
        "template",
        # Embedded content
        "svg",
        "canvas",
        "object",
        "embed",
        "param",
        "source",
        "track",
        "iframe",
        "video",
        "audio",
        # Forms
        "form",
        "input",
        "button",
        "select",
        "option",
        "optgroup",
        "textarea",
        "datalist",
        "output",
        "progress",
        "meter",
        "fieldset",
        "legend",
        "label",
        "map",
        "area",
    ]
)

# Block constructs with a dedicated Markdown rendering
BLOCK_HANDLERS = {
    "h1": "block_heading",
    "h2": "block_heading",
    "h3": "block_heading",
    "h4": "block_heading",
    "h5": "block_heading",
    "h6": "block_heading",
    "blockquote": "block_blockquote",
    "ul": "block_list",
    "ol": "block_list",
    "pre": "block_code",
    "table": "block_table",
    "hr": "block_rule",
    "dl": "block_definitions",
    "details": "block_details",
    "figure": "block_figure",
}

# Block boundaries that add no markup of their own
BLOCK_CONTAINERS = frozenset(
    [
        "html",
        "body",
        "p",
        "div",
        "section",
        "article",
        "main",
        "header",
        "footer",
        "nav",
        "aside",
        "address",
        "hgroup",
        "center",
        "search",
        # Structural parts met outside their usual parent
        "li",
        "dt",
        "dd",
        "summary",
        "figcaption",
        "caption",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "td",
        "th",
    ]
)

BLOCK_TAGS = frozenset(BLOCK_HANDLERS) | BLOCK_CONTAINERS

# Inline wrappers rendered as their content
INLINE_WRAPPERS = frozenset(
    [
        "span",
        "font",
        "small",
        "big",
        "cite",
        "time",
        "data",
        "bdi",
        "bdo",
        "nobr",
        "u",
        "ins",
        "q",
        "dfn",
        "picture",
    ]
)

INLINE_HANDLERS = {
    "a": "inline_link",
    "img": "inline_image",
    "br": "inline_break",
    "wbr": "inline_nothing",
    "code": "inline_code",
    "tt": "inline_code",
    "strong": "inline_emphasis",
    "b": "inline_emphasis",
    "em": "inline_emphasis",
    "i": "inline_emphasis",
    "del": "inline_emphasis",
    "s": "inline_emphasis",
    "strike": "inline_emphasis",
}

EMPHASIS_MARKERS = {
    "strong": "**",
    "b": "**",
    "em": "*",
    "i": "*",
    "del": "~~",
    "s": "~~",
    "strike": "~~",
}

# Tags sharing a marker; nesting one inside another does not double it
EMPHASIS_GROUPS = {
    "**": ["strong", "b"],
    "*": ["em", "i"],
    "~~": ["del", "s", "strike"],
}


def has_block_child(node: Tag) -> bool:
    """True if any direct child is a block-level element."""
    return any(isinstance(child, Tag) and child.name in BLOCK_TAGS for child in node.children)
