"""Idempotent module registration in the project manifest.

The manifest (``settings.gradle.kts`` or ``settings.gradle``) is only ever
appended to.  The read-then-append is not guarded against other processes;
callers are expected to run one generation at a time per project.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from kmpgen.errors import ManifestUpdateError

from .modules import anchored_module_paths, include_statement, is_included, module_entries

logger = logging.getLogger(__name__)


class ManifestUpdater:
    """Appends missing ``include(...)`` lines to a manifest file."""

    def update(
        self,
        manifest_file: str | Path | None,
        project_root: str | Path,
        target_path: str | Path,
        module_paths: Iterable[str],
    ) -> list[str]:
        """Register *module_paths* (relative to *target_path*) in *manifest_file*.

        Args:
            manifest_file: The manifest to update.  ``None`` or a missing
                file makes the call a no-op.
            project_root: Root the module entries are computed against.
            target_path: Directory the module paths are relative to.
            module_paths: Forward-slash module paths, e.g. ``["feature/api"]``.

        Returns:
            The entries that were appended, in order.  Empty when every
            entry was already present.

        Raises:
            ManifestUpdateError: If the manifest cannot be read or written.
        """
        target = Path(target_path)
        anchored = [(target, module_path) for module_path in module_paths]
        return self.update_anchored(manifest_file, project_root, anchored)

    def update_anchored(
        self,
        manifest_file: str | Path | None,
        project_root: str | Path,
        anchored: Iterable[tuple[Path, str]],
    ) -> list[str]:
        """Like :meth:`update`, for ``(anchor_dir, module_path)`` pairs."""
        if manifest_file is None or not Path(manifest_file).is_file():
            logger.info("No manifest found under %s; skipping module registration", project_root)
            return []

        manifest = Path(manifest_file)
        try:
            text = manifest.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestUpdateError(f"Cannot read {manifest.name}: {exc}") from exc

        added = [
            entry for entry in module_entries(project_root, anchored)
            if not is_included(text, entry)
        ]
        if not added:
            logger.debug("All modules already included in %s", manifest.name)
            return []

        lines = [include_statement(entry) for entry in added]
        prefix = "\n" if text and not text.endswith("\n") else ""
        try:
            with manifest.open("a", encoding="utf-8") as fh:
                fh.write(prefix + "\n".join(lines) + "\n")
        except OSError as exc:
            raise ManifestUpdateError(f"Cannot write {manifest.name}: {exc}") from exc

        for entry in added:
            logger.debug("Registered %s in %s", entry, manifest.name)
        return added

    def update_from_markers(
        self,
        manifest_file: str | Path | None,
        project_root: str | Path,
        target_path: str | Path,
        markers: Iterable[str],
        variables: dict[str, str],
    ) -> list[str]:
        """Derive module paths from *markers* and register them."""
        anchored = anchored_module_paths(markers, variables, target_path)
        return self.update_anchored(manifest_file, project_root, anchored)
