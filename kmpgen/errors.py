"""Exception hierarchy for template loading and module generation.

Fatal errors (``ConfigurationError``, ``DirectoryAccessError``) stop a
generation run before anything is written.  Recoverable ones
(``FileGenerationError``, ``ManifestUpdateError``) are collected as warnings
on the result, and ``TemplateParseError`` only ever takes down the one
template it belongs to.
"""

from __future__ import annotations


class KmpGenError(Exception):
    """Base class for every error raised by the generator."""


class ConfigurationError(KmpGenError):
    """Raised when variable values fail required-field or custom validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class TemplateParseError(KmpGenError):
    """Raised when a template folder cannot be turned into a definition."""

    def __init__(self, template: str, message: str) -> None:
        self.template = template
        super().__init__(f"Template '{template}': {message}")


class FileGenerationError(KmpGenError):
    """Raised when a single directory or file cannot be written."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"Error generating file {path}: {message}")


class ManifestUpdateError(KmpGenError):
    """Raised when the module-inclusion manifest cannot be read or written."""


class DirectoryAccessError(KmpGenError):
    """Raised when the generation target directory cannot be created or used."""
