"""Pydantic v2 models for parsed module templates.

Defines the immutable template model built from a template folder: the
parameter schema read from ``template.xml`` and the file tree scanned from
``root/``.  Parse problems that do not sink the whole template are carried
alongside as ``ParseDiagnostic`` records rather than raised.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ParameterType(str, Enum):
    """Kind of value a template parameter accepts.

    Values match the ``<type>`` spellings used in ``template.xml`` exactly.
    """
    TEXT = "TEXT"
    PACKAGE = "PACKAGE"
    BOOLEAN = "BOOLEAN"
    DROPDOWN = "DROPDOWN"
    NUMBER = "NUMBER"
    MULTILINE_TEXT = "MULTILINE_TEXT"


class Severity(str, Enum):
    """How bad a parse diagnostic is."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ValidationResult(BaseModel):
    """Outcome of a per-parameter validator: valid, or invalid with a message."""

    model_config = ConfigDict(frozen=True)

    valid: bool = Field(..., description="Whether the value passed")
    message: str = Field(default="", description="Why the value was rejected")

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)


Validator = Callable[[str], ValidationResult]


# ---------------------------------------------------------------------------
# Parameter schema
# ---------------------------------------------------------------------------

class ParameterSpec(BaseModel):
    """A user-configurable template variable."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Substitution key, e.g. 'moduleName'")
    display_name: str = Field(default="", description="Label shown to the user")
    description: str = Field(default="", description="Help text")
    type: ParameterType = Field(default=ParameterType.TEXT)
    default_value: str = Field(default="")
    required: bool = Field(default=True)
    options: Optional[list[str]] = Field(
        default=None, description="Choices for DROPDOWN parameters"
    )
    validator_name: Optional[str] = Field(
        default=None, description="Name of the validator declared in template.xml"
    )
    validator: Optional[Validator] = Field(default=None, exclude=True, repr=False)

    @property
    def label(self) -> str:
        """Display name, falling back to the parameter name."""
        return self.display_name or self.name


# ---------------------------------------------------------------------------
# File tree
# ---------------------------------------------------------------------------

class DirectoryEntry(BaseModel):
    """A directory to create, relative to the target; may contain placeholders."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Template-relative path, e.g. '${moduleName}/src'")


class FileEntry(BaseModel):
    """A file to render, relative to the target; path and content may contain placeholders."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Output path with the template suffix stripped")
    content: str = Field(default="", description="Raw template content")
    encoding: str = Field(default="utf-8")


class FileTree(BaseModel):
    """Directories and file templates scanned from a template's ``root/`` folder."""

    model_config = ConfigDict(frozen=True)

    directories: list[DirectoryEntry] = Field(default_factory=list)
    files: list[FileEntry] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Template
# ---------------------------------------------------------------------------

class TemplateInfo(BaseModel):
    """Header metadata of a template, read without scanning its tree."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""


class TemplateDefinition(BaseModel):
    """A fully parsed template.  Immutable; rebuilt from disk on reload."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identifier, defaults to the folder name")
    name: str = Field(..., description="Display name, defaults to the id")
    description: str = Field(default="")
    parameters: list[ParameterSpec] = Field(default_factory=list)
    file_tree: FileTree = Field(default_factory=FileTree)
    build_fragment: str = Field(
        default="", description="Content of the template-level build.gradle.kts.ftl"
    )
    module_markers: list[str] = Field(
        default_factory=list,
        description="Template-relative paths of build files inside the tree",
    )


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

class ParseDiagnostic(BaseModel):
    """A non-fatal problem found while loading a template."""

    model_config = ConfigDict(frozen=True)

    template: str = Field(..., description="Template folder name")
    message: str
    severity: Severity = Field(default=Severity.WARNING)

    def __str__(self) -> str:
        return f"[{self.severity.value}] {self.template}: {self.message}"
