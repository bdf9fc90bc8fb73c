"""Exception hierarchy shared by adapters, the script service and the wizard.

Every failure a user can hit is a ``ScriptAlchemistError`` whose message is
suitable for display as-is.
"""

from __future__ import annotations

from typing import List, Optional


class ScriptAlchemistError(Exception):
    """Base class for all ScriptAlchemist errors."""


class ConfigurationError(ScriptAlchemistError):
    """Missing or invalid provider configuration, raised before any network I/O."""


class TransportError(ScriptAlchemistError):
    """The request never reached the provider (DNS, refused connection, proxy...)."""


class ProviderError(ScriptAlchemistError):
    """The provider answered with a non-2xx status or an unusable body."""

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


class AnalysisParseError(ScriptAlchemistError):
    """The model's analysis output is not a JSON object."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


class AnalysisValidationError(ScriptAlchemistError):
    """A parsed analysis does not match the expected shape (strict mode only)."""

    def __init__(self, errors: List[str]):
        super().__init__("Invalid analysis: " + "; ".join(errors))
        self.errors = errors


class EmptyResultError(ScriptAlchemistError):
    """The model returned no text."""
