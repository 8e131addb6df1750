"""
appseed.errors - Exception Hierarchy
====================================

Every failure raised by appseed derives from :class:`ScaffoldError`, so
callers can catch one type. Each subclass also derives from the closest
built-in exception so generic handlers (``except ValueError``) keep working.

    ScaffoldError
    ├── TemplateNotFoundError     (LookupError)  unknown ecosystem key
    ├── TemplateConfigError       (ValueError)   broken template metadata
    ├── TemplateSyntaxError       (ValueError)   malformed markers
    ├── UnresolvedReferenceError  (LookupError)  placeholder not in context
    ├── DescriptorError           (ValueError)   invalid application input
    └── EmitError                 (OSError)      file system failure
"""

from __future__ import annotations


class ScaffoldError(Exception):
    """Base class for all appseed errors."""


class TemplateNotFoundError(ScaffoldError, LookupError):
    """Raised when no template is registered for an ecosystem key."""

    def __init__(self, key: str, available: list[str] | None = None) -> None:
        self.key = key
        self.available = available or []
        msg = f"No template registered for '{key}'"
        if self.available:
            msg += f". Available: {', '.join(self.available)}"
        super().__init__(msg)

    def __str__(self) -> str:
        # LookupError would otherwise repr() the message
        return self.args[0]


class TemplateConfigError(ScaffoldError, ValueError):
    """Raised when a template's metadata file is missing or invalid."""


class TemplateSyntaxError(ScaffoldError, ValueError):
    """Raised when a template body contains malformed markers."""

    def __init__(self, message: str, template: str | None = None) -> None:
        self.template = template
        if template:
            message = f"{template}: {message}"
        super().__init__(message)


class UnresolvedReferenceError(ScaffoldError, LookupError):
    """Raised when a placeholder path does not exist in the render context."""

    def __init__(self, path: str, template: str | None = None) -> None:
        self.path = path
        self.template = template
        msg = f"Unresolved reference '.{path}'"
        if template:
            msg += f" in template '{template}'"
        super().__init__(msg)

    def __str__(self) -> str:
        return self.args[0]


class DescriptorError(ScaffoldError, ValueError):
    """Raised when the application descriptor fails validation."""


class EmitError(ScaffoldError, OSError):
    """Raised when a rendered file cannot be written."""
