"""Exceptions raised by markweave.

Every error carries a short correlation id, which the CLI repeats in its log
records, and a ``context`` dict of details shown with ``--verbose``.
"""

import uuid
from typing import Any


def generate_correlation_id() -> str:
    """Generate an 8-character correlation ID."""
    return uuid.uuid4().hex[:8]


class MarkweaveError(Exception):
    """Base exception for markweave."""

    def __init__(
        self,
        message: str,
        correlation_id: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.correlation_id = correlation_id or generate_correlation_id()
        self.context = dict(context or {})
        super().__init__(f"{message} [correlation_id={self.correlation_id}]")


class ValidationError(MarkweaveError):
    """A conversion option failed validation; ``field`` names the option."""

    def __init__(self, message: str, field: str | None = None, value: Any = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        if field is not None:
            self.context.setdefault("field", field)


class ConfigurationError(MarkweaveError):
    """Settings or parser choice cannot be turned into a working converter."""

    def __init__(self, message: str, config_path: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.config_path = config_path
        if config_path is not None:
            self.context.setdefault("config_path", str(config_path))


class InputFileNotFoundError(MarkweaveError):
    """The HTML input file does not exist."""

    def __init__(self, message: str, file_path: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.file_path = file_path
