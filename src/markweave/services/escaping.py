"""Markdown escaping, whitespace and fence helpers."""

import html
import re

_ESCAPE_RE = re.compile(r"([\\*_`\[\]<>|])")
_WHITESPACE_RE = re.compile(r"\s+")

# Body of a character reference (``copy;``, ``#169;``, ``#xA9;``) following an ``&``
_ENTITY_BODY = r"(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});"
_ENTITY_RE = re.compile(rf"&(?={_ENTITY_BODY})")
_ENTITY_TAIL_RE = re.compile(_ENTITY_BODY)

# Unescaped ``!`` / ``&`` ending a piece of inline Markdown
_TRAILING_BANG_RE = re.compile(r"(?<!\\)((?:\\\\)*)!$")
_TRAILING_AMP_RE = re.compile(r"(?<!\\)((?:\\\\)*)&$")

# Constructs that only mean something at the start of a line
_LINE_START_RE = re.compile(r"^([#+=-])", re.MULTILINE)
_LINE_START_TILDES_RE = re.compile(r"^(~)(?=~~)", re.MULTILINE)
_LINE_START_ORDERED_RE = re.compile(r"^(\d{1,9})([.)])(?=\s|$)", re.MULTILINE)


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace (including newlines and nbsp) to one space."""
    return _WHITESPACE_RE.sub(" ", text)


def escape_text(text: str) -> str:
    """Backslash-escape Markdown-significant characters in literal text.

    Args:
        text: Literal text from a text node

    Returns:
        Escaped text; already-escaped input gains one more level, so
        rendering the literal text of the output again gives the same result
    """
    return _ENTITY_RE.sub(r"\\&", _ESCAPE_RE.sub(r"\\\1", text))


def escape_boundary(previous: str, following: str) -> str:
    """Escape the end of ``previous`` if ``following`` would complete a construct with it.

    Text ending in ``!`` directly before a link would turn the link into an
    image, and text ending in ``&`` before ``copy;`` would form a character
    reference. Both pieces are rendered separately, so neither sees the other
    when it is escaped.

    Examples:
        >>> escape_boundary("Wow!", "[pic](https://x.com)")
        'Wow\\\\!'
    """
    if following.startswith("["):
        return _TRAILING_BANG_RE.sub(r"\1\\!", previous)
    if _ENTITY_TAIL_RE.match(following):
        return _TRAILING_AMP_RE.sub(r"\1\\&", previous)
    return previous


def escape_line_starts(text: str) -> str:
    """Escape characters that would open a block construct at a line start.

    Covers ATX headings (``#``), bullets (``-``, ``+``), setext underlines
    (``=``), tilde fences and ordered-list markers (``1.`` / ``1)``).
    """
    text = _LINE_START_RE.sub(r"\\\1", text)
    text = _LINE_START_TILDES_RE.sub(r"\\\1", text)
    return _LINE_START_ORDERED_RE.sub(r"\1\\\2", text)


def escape_title(text: str) -> str:
    """Escape a link or image title for use inside double quotes."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def escape_alt(text: str) -> str:
    """Escape image alt text for use inside ``![...]``."""
    return _ENTITY_RE.sub(r"\\&", re.sub(r"([\\\[\]])", r"\\\1", text))


def escape_attribute(text: str) -> str:
    """Escape a value for an HTML attribute in passthrough markup."""
    return html.escape(text, quote=True)


def escape_unescaped_pipes(text: str) -> str:
    """Escape ``|`` characters that are not already backslash-escaped."""
    return re.sub(r"(?<!\\)\|", r"\\|", text)


def longest_run(text: str, char: str) -> int:
    """Length of the longest run of ``char`` in ``text``."""
    longest = 0
    current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest


def code_fence(code: str, char: str = "`", minimum: int = 3) -> str:
    """Fence string long enough that nothing inside the code can close it.

    Args:
        code: Code block content
        char: Fence character (backtick or tilde)
        minimum: Shortest fence allowed

    Returns:
        ``char`` repeated max(minimum, longest run in code + 1) times
    """
    return char * max(minimum, longest_run(code, char) + 1)


def code_span(code: str) -> str:
    """Wrap inline code in a backtick delimiter longer than any run inside it."""
    delimiter = "`" * (longest_run(code, "`") + 1)
    if code.startswith("`") or code.endswith("`"):
        code = f" {code} "
    return f"{delimiter}{code}{delimiter}"
