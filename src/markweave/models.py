"""Data models for markweave."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from markweave.utils import parse_comma_separated

# =============================================================================
# Output Style Enumerations
# =============================================================================


class HeadingStyle(str, Enum):
    """Heading syntax: ``# Title`` (atx) or underlined (setext)."""

    ATX = "atx"
    SETEXT = "setext"


class LinkStyle(str, Enum):
    """Link syntax: ``[text](url)`` (inline) or ``[text][1]`` (referenced)."""

    INLINE = "inline"
    REFERENCED = "referenced"


class CodeFence(str, Enum):
    """Character used to fence code blocks."""

    BACKTICK = "backtick"
    TILDE = "tilde"

    @property
    def char(self) -> str:
        """The fence character itself."""
        return "`" if self is CodeFence.BACKTICK else "~"


class Alignment(str, Enum):
    """Table column alignment."""

    NONE = "none"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @property
    def separator(self) -> str:
        """Separator-row cell for this alignment."""
        return _SEPARATORS[self]


_SEPARATORS = {
    Alignment.NONE: "---",
    Alignment.LEFT: ":---",
    Alignment.CENTER: ":---:",
    Alignment.RIGHT: "---:",
}

# Aliases accepted besides the enum values
_STYLE_ALIASES = {"`": "backtick", "~": "tilde", "reference": "referenced"}


class ConversionOptions(BaseModel):
    """Immutable options for one HTML to Markdown conversion.

    Usage:
        options = ConversionOptions(heading_style="setext", exclude_selectors=["nav", ".ad"])
        markdown = convert(html, options)

    Include selectors always win over exclude selectors for the same node.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    heading_style: HeadingStyle = HeadingStyle.ATX
    link_style: LinkStyle = LinkStyle.INLINE
    code_fence: CodeFence = CodeFence.BACKTICK
    bullet_marker: Literal["-", "*", "+"] = "-"

    # Base URL for resolving relative links and image sources
    base_url: str | None = None

    # Simple selectors (tag, .class, #id)
    exclude_selectors: frozenset[str] = Field(default_factory=frozenset)
    include_selectors: frozenset[str] = Field(default_factory=frozenset)

    # BeautifulSoup parser used when raw HTML is passed in
    parser: str = "html.parser"

    @field_validator("heading_style", "link_style", "code_fence", mode="before")
    @classmethod
    def normalise_enum_value(cls, v: Any) -> Any:
        """Accept enum values case-insensitively plus literal fence characters."""
        if isinstance(v, str) and not isinstance(v, Enum):
            lowered = v.strip().lower()
            return _STYLE_ALIASES.get(lowered, lowered)
        return v

    @field_validator("exclude_selectors", "include_selectors", mode="before")
    @classmethod
    def parse_selectors(cls, v: Any) -> Any:
        """Accept comma-separated strings as well as iterables of selectors."""
        if v is None:
            return frozenset()
        if isinstance(v, str):
            return frozenset(parse_comma_separated(v))
        return frozenset(parse_comma_separated([s for s in v if s]))

    @field_validator("base_url")
    @classmethod
    def blank_base_url_is_none(cls, v: str | None) -> str | None:
        """Treat an empty base URL as unset."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v
