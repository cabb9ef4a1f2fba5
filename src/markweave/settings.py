"""
Environment configuration for markweave.

Uses Pydantic Settings for type-safe environment variable loading. Values
come from ``MARKWEAVE_*`` variables or a ``.env`` file in the working
directory and act as defaults beneath explicit CLI flags.
"""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from markweave.exceptions import ConfigurationError
from markweave.models import ConversionOptions

load_dotenv()


class MarkweaveSettings(BaseSettings):
    """markweave settings."""

    model_config = ConfigDict(
        env_prefix="MARKWEAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Output style
    heading_style: str = Field(default="atx", description="Heading syntax: atx or setext")
    link_style: str = Field(default="inline", description="Link syntax: inline or referenced")
    code_fence: str = Field(default="backtick", description="Code fence character: backtick or tilde")
    bullet_marker: str = Field(default="-", description="Bullet list marker: -, * or +")

    # Links
    base_url: str | None = Field(default=None, description="Base URL for relative links and images")

    # Filtering (comma-separated simple selectors)
    exclude: str = Field(default="", description="Selectors for elements to drop, e.g. nav,.ad")
    include: str = Field(default="", description="Selectors for elements to keep regardless of --exclude")

    # Parsing
    parser: str = Field(default="html.parser", description="BeautifulSoup parser name")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper

    def to_options(self, **overrides) -> ConversionOptions:
        """
        Build conversion options from these settings.

        Args:
            **overrides: Option fields that take precedence, such as CLI flags.
                None values are ignored.

        Returns:
            ConversionOptions

        Raises:
            ConfigurationError: If a setting or override is not a valid option.
        """
        values = {
            "heading_style": self.heading_style,
            "link_style": self.link_style,
            "code_fence": self.code_fence,
            "bullet_marker": self.bullet_marker,
            "base_url": self.base_url,
            "exclude_selectors": self.exclude,
            "include_selectors": self.include,
            "parser": self.parser,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return ConversionOptions(**values)
        except PydanticValidationError as e:
            env_file = Path(".env")
            raise ConfigurationError(
                f"Invalid markweave configuration: {e.errors()[0].get('msg', e)}",
                config_path=str(env_file) if env_file.exists() else None,
                context={"fields": [".".join(str(p) for p in err.get("loc", ())) for err in e.errors()]},
            ) from e


@lru_cache
def get_settings() -> MarkweaveSettings:
    """Get cached settings instance."""
    return MarkweaveSettings()
