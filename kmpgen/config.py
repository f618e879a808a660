"""KMP Module Generator configuration.

Typed settings for template discovery and the fixed file-name conventions the
generator relies on.  Settings use a Pydantic v2 model so they validate at
construction time and round-trip through JSON or environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# File-name conventions
# ---------------------------------------------------------------------------

DESCRIPTOR_FILENAME = "template.xml"
TEMPLATE_ROOT_DIRNAME = "root"
TEMPLATE_SUFFIX = ".ftl"
BUILD_FRAGMENT_FILENAME = "build.gradle.kts.ftl"
MODULE_MARKER_FILENAMES: tuple[str, ...] = ("build.gradle", "build.gradle.kts")
# Checked in order; the first one found wins.
MANIFEST_FILENAMES: tuple[str, ...] = ("settings.gradle.kts", "settings.gradle")

DEFAULT_TEMPLATE_FOLDER = Path(".idea") / "kmp-templates"
SETTINGS_FILENAME = Path(".idea") / "kmpgen.json"


class Settings(BaseModel):
    """Per-project generator settings.

    Holds the project root and the template-folder override.  Instances are
    created by the CLI (or by an embedding tool) and passed to the registry,
    the engine and the preview.
    """

    project_root: Path = Field(default=Path("."))
    custom_template_folder: Optional[Path] = Field(
        default=None, description="Template folder used when use_custom_folder is set"
    )
    use_custom_folder: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def default_template_folder(self) -> Path:
        """``<project_root>/.idea/kmp-templates``."""
        return self.project_root / DEFAULT_TEMPLATE_FOLDER

    @property
    def template_folder(self) -> Path:
        """Folder that holds one subfolder per template."""
        if self.use_custom_folder and self.custom_template_folder is not None:
            return self.custom_template_folder
        return self.default_template_folder

    @property
    def settings_path(self) -> Path:
        """Default location of the persisted settings file."""
        return self.project_root / SETTINGS_FILENAME

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def set_custom_template_folder(self, folder: Path | None) -> None:
        """Point template discovery at *folder*, or back at the default for ``None``."""
        if folder is not None:
            self.custom_template_folder = Path(folder)
            self.use_custom_folder = True
        else:
            self.custom_template_folder = None
            self.use_custom_folder = False

    def ensure_template_folder(self) -> Path:
        """Create the template folder if it is missing and return it."""
        folder = self.template_folder
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path | None = None) -> Path:
        """Persist the settings to a JSON file.

        Args:
            path: Destination file. Defaults to ``<project_root>/.idea/kmpgen.json``.

        Returns:
            The path where the file was written.
        """
        target = path or self.settings_path
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def for_project(cls, project_root: Path) -> "Settings":
        """Load the project's saved settings, or defaults when none exist.

        Environment overrides from :meth:`from_env` are applied on top.
        """
        stored = Path(project_root) / SETTINGS_FILENAME
        settings = cls.load(stored) if stored.is_file() else cls()
        settings.project_root = Path(project_root)
        folder = os.environ.get("KMPGEN_TEMPLATE_FOLDER")
        if folder:
            settings.set_custom_template_folder(Path(folder))
        return settings

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            KMPGEN_PROJECT_ROOT, KMPGEN_TEMPLATE_FOLDER.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("KMPGEN_PROJECT_ROOT"):
            kwargs["project_root"] = Path(os.environ["KMPGEN_PROJECT_ROOT"])
        if os.environ.get("KMPGEN_TEMPLATE_FOLDER"):
            kwargs["custom_template_folder"] = Path(os.environ["KMPGEN_TEMPLATE_FOLDER"])
            kwargs["use_custom_folder"] = True
        return cls(**kwargs)
