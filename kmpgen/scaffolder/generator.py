"""Module generation orchestrator.

Takes a ``ModuleConfiguration`` and materialises the template's directory
and file tree under the target directory, then registers the derived
modules in the project manifest.

Fatal problems (invalid variables, unusable target directory) produce a
``GenerationFailure`` before anything is written.  Problems with a single
file or with the manifest are collected as warnings while the rest of the
run carries on; partial output is never rolled back.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path, PureWindowsPath

from kmpgen.config import Settings
from kmpgen.errors import (
    ConfigurationError,
    DirectoryAccessError,
    FileGenerationError,
    ManifestUpdateError,
)
from kmpgen.parser.models import DirectoryEntry, FileEntry
from kmpgen.utils import escapes_root, to_posix

from .configuration import ModuleConfiguration
from .manifest import ManifestUpdater
from .modules import anchored_module_paths, find_manifest
from .resolver import resolve
from .results import (
    GenerationFailure,
    GenerationResult,
    GenerationSuccess,
    GenerationWarning,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Path resolution shared with the preview engine
# ---------------------------------------------------------------------------


def resolve_relative_path(template_path: str, variables: dict[str, str]) -> str:
    """Resolve a template-relative path and normalise it to forward slashes.

    Absolute results keep their leading separator so callers can reject them.
    """
    resolved = to_posix(resolve(template_path, variables))
    if _is_absolute(resolved):
        return resolved
    return resolved.strip("/")


def _is_absolute(path: str) -> bool:
    if path.startswith(("/", "\\")):
        return True
    return os.name == "nt" and bool(PureWindowsPath(path).drive)


def checked_relative_path(
    template_path: str, variables: dict[str, str], *, is_file: bool = False
) -> str:
    """Resolve *template_path* and reject results generation refuses to write.

    Raises:
        FileGenerationError: The path is absolute, climbs out of the target,
            contains a NUL character, or (for files) resolves to nothing.
    """
    relative = resolve_relative_path(template_path, variables)
    if _is_absolute(relative) or escapes_root(relative):
        raise FileGenerationError(template_path, f"resolved path '{relative}' leaves the target directory")
    if "\x00" in relative:
        raise FileGenerationError(template_path, "resolved path contains a NUL character")
    if is_file and not relative:
        raise FileGenerationError(template_path, "resolved to an empty file name")
    return relative


def _checked_output(
    target: Path, template_path: str, variables: dict[str, str], *, is_file: bool = False
) -> Path:
    relative = checked_relative_path(template_path, variables, is_file=is_file)
    return target / relative if relative else target


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class GenerationEngine:
    """Generates modules from templates.

    One engine can serve any number of requests; it keeps no state between
    calls beyond its settings.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        manifest_updater: ManifestUpdater | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.manifest_updater = manifest_updater or ManifestUpdater()

    # -- Public API --------------------------------------------------------

    async def generate(self, config: ModuleConfiguration) -> GenerationResult:
        """Generate the module described by *config*.

        Returns:
            ``GenerationSuccess`` when everything was written,
            ``GenerationWarning`` when some files or the manifest failed,
            ``GenerationFailure`` when nothing could be generated.
        """
        try:
            config.require_valid()
            variables = config.effective_variables()
        except ConfigurationError as exc:
            logger.warning("%s", exc)
            return GenerationFailure(error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error preparing generation")
            return GenerationFailure(error=f"Generation failed: {exc}")

        target = config.target_path
        try:
            await asyncio.to_thread(self._ensure_target, target)
        except DirectoryAccessError as exc:
            logger.error("%s", exc)
            return GenerationFailure(error=str(exc))
        except Exception as exc:
            logger.exception("Unexpected error preparing target %s", target)
            return GenerationFailure(error=f"Cannot create target directory {target}: {exc}")

        warnings: list[str] = []
        generated: list[Path] = []
        tree = config.template.file_tree

        # 1. Directories first so that empty directories exist even when
        #    no file lands in them.
        for directory in tree.directories:
            try:
                await asyncio.to_thread(self._create_directory, target, directory, variables)
            except FileGenerationError as exc:
                logger.warning("%s", exc)
                warnings.append(str(exc))
            except Exception as exc:
                logger.exception("Unexpected error creating directory %s", directory.path)
                warnings.append(f"Failed to create directory {directory.path}: {exc}")

        # 2. Files
        for entry in tree.files:
            try:
                path = await asyncio.to_thread(self._write_file, target, entry, variables)
            except FileGenerationError as exc:
                logger.warning("%s", exc)
                warnings.append(str(exc))
                continue
            except Exception as exc:
                logger.exception("Unexpected error writing %s", entry.path)
                warnings.append(f"Failed to generate {entry.path}: {exc}")
                continue
            generated.append(path)

        # 3. Manifest
        try:
            await asyncio.to_thread(self._update_manifest, config, variables)
        except ManifestUpdateError as exc:
            logger.warning("Manifest update failed: %s", exc)
            warnings.append(f"Failed to update manifest: {exc}")
        except Exception as exc:
            logger.exception("Unexpected error updating manifest")
            warnings.append(f"Failed to update manifest: {exc}")

        label = config.module_label
        if warnings:
            return GenerationWarning(
                module_label=label,
                module_directory=target,
                generated_files=generated,
                warnings=warnings,
            )
        logger.info("Generated %d files for %s", len(generated), label)
        return GenerationSuccess(
            module_label=label,
            module_directory=target,
            generated_files=generated,
        )

    # -- Internal helpers (run in worker threads) --------------------------

    @staticmethod
    def _ensure_target(target: Path) -> None:
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as exc:
            raise DirectoryAccessError(f"Cannot create target directory {target}: {exc}") from exc
        if not target.is_dir():
            raise DirectoryAccessError(f"Target path {target} is not a directory")

    @staticmethod
    def _create_directory(target: Path, entry: DirectoryEntry, variables: dict[str, str]) -> Path:
        path = _checked_output(target, entry.path, variables)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (OSError, ValueError) as exc:
            raise FileGenerationError(entry.path, str(exc)) from exc
        return path

    @staticmethod
    def _write_file(target: Path, entry: FileEntry, variables: dict[str, str]) -> Path:
        path = _checked_output(target, entry.path, variables, is_file=True)
        content = resolve(entry.content, variables)
        try:
            data = content.encode(entry.encoding)
        except (LookupError, UnicodeEncodeError) as exc:
            raise FileGenerationError(entry.path, f"cannot encode as {entry.encoding}: {exc}") from exc
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except (OSError, ValueError) as exc:
            raise FileGenerationError(entry.path, str(exc)) from exc
        return path

    def _update_manifest(self, config: ModuleConfiguration, variables: dict[str, str]) -> list[str]:
        project_root = self.settings.project_root
        anchored = anchored_module_paths(
            config.template.module_markers, variables, config.target_path
        )
        if not anchored:
            return []
        return self.manifest_updater.update_anchored(
            find_manifest(project_root), project_root, anchored
        )
