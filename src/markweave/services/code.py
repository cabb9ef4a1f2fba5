"""Code block helpers: language detection, gutter detection, text collection."""

import logging

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

from markweave.services.selectors import class_list

LOGGER = logging.getLogger(__name__)

# Class prefixes that carry a language name, in precedence order
LANGUAGE_PREFIXES = ("language-", "lang-", "highlight-", "hljs-")

# Highlight.js token categories; ``hljs-keyword`` etc. are not language labels
HLJS_TOKEN_CLASSES = frozenset(
    {
        "addition",
        "attr",
        "attribute",
        "built_in",
        "bullet",
        "char",
        "class",
        "code",
        "comment",
        "deletion",
        "doctag",
        "emphasis",
        "formula",
        "function",
        "keyword",
        "label",
        "link",
        "literal",
        "meta",
        "meta-keyword",
        "meta-string",
        "name",
        "number",
        "operator",
        "params",
        "property",
        "punctuation",
        "quote",
        "regexp",
        "section",
        "selector-attr",
        "selector-class",
        "selector-id",
        "selector-pseudo",
        "selector-tag",
        "string",
        "strong",
        "subst",
        "symbol",
        "tag",
        "template-tag",
        "template-variable",
        "title",
        "type",
        "variable",
    }
)

# Bare class names accepted as a language when no prefixed class is present
KNOWN_LANGUAGES = frozenset(
    {
        "bash",
        "c",
        "clojure",
        "cpp",
        "csharp",
        "css",
        "dart",
        "diff",
        "dockerfile",
        "elixir",
        "erlang",
        "go",
        "graphql",
        "groovy",
        "haskell",
        "html",
        "ini",
        "java",
        "javascript",
        "js",
        "json",
        "jsx",
        "julia",
        "kotlin",
        "latex",
        "lua",
        "makefile",
        "markdown",
        "matlab",
        "nginx",
        "objectivec",
        "perl",
        "php",
        "plaintext",
        "powershell",
        "python",
        "r",
        "ruby",
        "rust",
        "scala",
        "scss",
        "shell",
        "sh",
        "sql",
        "swift",
        "toml",
        "ts",
        "tsx",
        "typescript",
        "xml",
        "yaml",
        "yml",
        "zsh",
    }
)

# Case-insensitive substrings marking line-number gutters
GUTTER_MARKERS = ("gutter", "line-number", "line-numbers", "lineno", "linenumber")


def language_from_classes(classes: list[str]) -> str | None:
    """Pick a language label from a class list.

    Prefixed classes are tried in ``LANGUAGE_PREFIXES`` order, then bare
    classes naming a known language.

    Args:
        classes: Class names of one element

    Returns:
        Language label, or None
    """
    for prefix in LANGUAGE_PREFIXES:
        for cls in classes:
            if not cls.startswith(prefix) or len(cls) == len(prefix):
                continue
            language = cls[len(prefix) :]
            if prefix == "hljs-" and language in HLJS_TOKEN_CLASSES:
                LOGGER.debug(f"Ignoring highlight token class '{cls}'")
                continue
            return language
    for cls in classes:
        if cls.lower() in KNOWN_LANGUAGES:
            return cls.lower()
    return None


def detect_language(*nodes: Tag | None) -> str | None:
    """Detect the language of a code block.

    Nodes are checked in the order given, normally the ``code`` element and
    then its ``pre``; the first one with a language label wins.
    """
    for node in nodes:
        if node is None:
            continue
        language = language_from_classes(class_list(node))
        if language:
            LOGGER.debug(f"Detected code language '{language}' on <{node.name}>")
            return language
    return None


def is_gutter(node: Tag) -> bool:
    """True for line-number gutter elements."""
    for cls in class_list(node):
        lowered = cls.lower()
        if any(marker in lowered for marker in GUTTER_MARKERS):
            return True
    return False


def is_text(node) -> bool:
    """True for ordinary text nodes (not comments, doctypes or CDATA)."""
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def collect_code_text(node: Tag) -> str:
    """Literal text of a code element, skipping gutters and turning ``br`` into newlines."""
    parts: list[str] = []
    _collect(node, parts)
    return "".join(parts)


def _collect(node: Tag, parts: list[str]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name == "br":
                parts.append("\n")
            elif not is_gutter(child):
                _collect(child, parts)
        elif is_text(child):
            parts.append(str(child))
