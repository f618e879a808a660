"""Dry-run preview of a generation request.

Uses the same path resolution, module derivation and manifest entry
conversion as :class:`~kmpgen.scaffolder.generator.GenerationEngine`, and
reads the manifest only to tell new entries from existing ones.  Nothing is
ever written.
"""

from __future__ import annotations

import logging

from kmpgen.config import Settings
from kmpgen.errors import FileGenerationError

from .configuration import ModuleConfiguration
from .generator import checked_relative_path
from .modules import (
    anchored_module_paths,
    find_manifest,
    include_statement,
    is_included,
    module_entries,
)
from .resolver import missing_variables, resolve
from .results import GenerationPreview, PreviewDirectory, PreviewFile

logger = logging.getLogger(__name__)

UNKNOWN_MANIFEST_NAME = "settings.gradle(.kts)"


def _level(path: str) -> int:
    return path.count("/")


class PreviewEngine:
    """Computes a ``GenerationPreview`` for a configuration."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def preview(self, config: ModuleConfiguration) -> GenerationPreview:
        variables = config.effective_variables()
        tree = config.template.file_tree
        unresolved: set[str] = set()
        rejected: list[str] = []

        directories: list[PreviewDirectory] = []
        for entry in tree.directories:
            try:
                path = checked_relative_path(entry.path, variables)
            except FileGenerationError as exc:
                rejected.append(str(exc))
                continue
            unresolved.update(missing_variables(path, variables))
            directories.append(PreviewDirectory(path=path, level=_level(path)))

        files: list[PreviewFile] = []
        for entry in tree.files:
            try:
                path = checked_relative_path(entry.path, variables, is_file=True)
            except FileGenerationError as exc:
                rejected.append(str(exc))
                continue
            content = resolve(entry.content, variables)
            unresolved.update(missing_variables(path, variables))
            unresolved.update(missing_variables(content, variables))
            files.append(PreviewFile(path=path, size=len(content), level=_level(path)))

        return GenerationPreview(
            directories=directories,
            files=files,
            manifest_changes=self._manifest_changes(config, variables),
            missing_variables=sorted(unresolved),
            validation_errors=config.validate_values(),
            rejected=rejected,
        )

    def _manifest_changes(self, config: ModuleConfiguration, variables: dict[str, str]) -> list[str]:
        project_root = self.settings.project_root
        anchored = anchored_module_paths(
            config.template.module_markers, variables, config.target_path
        )
        entries = module_entries(project_root, anchored)
        if not entries:
            return []

        manifest = find_manifest(project_root)
        existing = ""
        if manifest is not None:
            try:
                existing = manifest.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                logger.warning("Cannot read %s for preview: %s", manifest, exc)
        name = manifest.name if manifest is not None else UNKNOWN_MANIFEST_NAME

        changes: list[str] = []
        for entry in entries:
            statement = include_statement(entry)
            if is_included(existing, entry):
                changes.append(f"Already included in {name}: {statement}")
            else:
                changes.append(f"Add to {name}: {statement}")
        return changes
