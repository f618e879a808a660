"""Result models returned by generation and preview."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class GenerationSuccess(BaseModel):
    """Every directory and file was written and the manifest is up to date."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    module_label: str
    module_directory: Path
    generated_files: list[Path] = Field(default_factory=list)


class GenerationWarning(BaseModel):
    """Generation finished, but some files or the manifest update failed.

    Everything listed in ``generated_files`` is on disk; nothing is rolled
    back.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["warning"] = "warning"
    module_label: str
    module_directory: Path
    generated_files: list[Path] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GenerationFailure(BaseModel):
    """Nothing was generated."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failure"] = "failure"
    error: str


GenerationResult = Union[GenerationSuccess, GenerationWarning, GenerationFailure]


# ---------------------------------------------------------------------------
# Preview
# ---------------------------------------------------------------------------

class PreviewDirectory(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    level: int


class PreviewFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    size: int = Field(..., description="Length of the resolved content")
    level: int


class GenerationPreview(BaseModel):
    """What :meth:`GenerationEngine.generate` would do, computed without writing."""

    model_config = ConfigDict(frozen=True)

    directories: list[PreviewDirectory] = Field(default_factory=list)
    files: list[PreviewFile] = Field(default_factory=list)
    manifest_changes: list[str] = Field(default_factory=list)
    missing_variables: list[str] = Field(
        default_factory=list,
        description="Placeholders still unresolved after substitution",
    )
    validation_errors: list[str] = Field(default_factory=list)
    rejected: list[str] = Field(
        default_factory=list,
        description="Directories and files generation would refuse to write, with the reason",
    )
