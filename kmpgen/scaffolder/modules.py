"""Module-path derivation and manifest entry conversion.

Shared by the generation engine, the preview engine and the manifest
updater so that a preview is an exact forecast of what generation does.

A *module path* is a forward-slash path naming a module directory, e.g.
``feature/api``.  A *module entry* is the manifest spelling of a module
path prefixed with the target's location in the project, e.g.
``:modules:feature:api``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from kmpgen.config import MANIFEST_FILENAMES, MODULE_MARKER_FILENAMES
from kmpgen.utils import escapes_root, relative_posix, to_posix

from .resolver import resolve

logger = logging.getLogger(__name__)

MODULE_SEPARATOR = ":"


def _strip_marker(resolved_marker: str) -> str:
    """Drop the trailing build-file name from a resolved marker path."""
    path = to_posix(resolved_marker).strip("/")
    parent, _, name = path.rpartition("/")
    if name not in MODULE_MARKER_FILENAMES:
        return path
    return parent


def anchored_module_paths(
    markers: Iterable[str],
    variables: Mapping[str, str],
    target_path: str | Path,
) -> list[tuple[Path, str]]:
    """Resolve *markers* into ``(anchor_dir, module_path)`` pairs.

    A marker nested under the target (``feature/api/build.gradle.kts``) is
    anchored at the target itself.  A bare marker (``build.gradle.kts``)
    means the module *is* the target, so its path is the target's own name
    anchored at the target's parent.  Duplicates are dropped; the first
    occurrence keeps its position.  Markers that resolve outside the target
    are never written, so they contribute no module.
    """
    target = Path(target_path)
    seen: set[tuple[Path, str]] = set()
    result: list[tuple[Path, str]] = []
    for marker in markers:
        resolved = to_posix(resolve(marker, variables))
        if escapes_root(resolved) or "\x00" in resolved:
            logger.debug("Ignoring marker %s resolved outside the target: %r", marker, resolved)
            continue
        module_dir = _strip_marker(resolved)
        if module_dir:
            pair = (target, module_dir)
        else:
            pair = (target.parent, target.name)
        if pair not in seen:
            seen.add(pair)
            result.append(pair)
    return result


def derive_module_paths(
    markers: Iterable[str],
    variables: Mapping[str, str],
    target_path: str | Path,
) -> list[str]:
    """Module paths for *markers*, without their anchors.

    Examples::

        derive_module_paths(["feature/api/build.gradle.kts"], {}, "/p/feature")
            -> ["feature/api"]
        derive_module_paths(["build.gradle.kts"], {}, "/p/feature")
            -> ["feature"]
    """
    return [module for _, module in anchored_module_paths(markers, variables, target_path)]


def module_entry(project_root: str | Path, anchor: str | Path, module_path: str) -> str:
    """Convert *module_path* anchored at *anchor* into a manifest entry.

    The anchor's location relative to *project_root* becomes the entry
    prefix.  An anchor outside the project contributes no prefix.
    """
    prefix = relative_posix(anchor, project_root) or ""
    joined = f"{prefix}/{module_path}" if prefix else module_path
    segments = [segment for segment in to_posix(joined).split("/") if segment]
    return MODULE_SEPARATOR + MODULE_SEPARATOR.join(segments)


def module_entries(
    project_root: str | Path,
    anchored: Iterable[tuple[Path, str]],
) -> list[str]:
    """Manifest entries for anchored module paths, deduplicated in order."""
    entries: list[str] = []
    for anchor, module_path in anchored:
        entry = module_entry(project_root, anchor, module_path)
        if entry not in entries:
            entries.append(entry)
    return entries


def include_statement(entry: str) -> str:
    return f'include("{entry}")'


def is_included(manifest_text: str, entry: str) -> bool:
    """True when *manifest_text* already includes *entry* in either quoting style."""
    return f'include("{entry}")' in manifest_text or f"include('{entry}')" in manifest_text


def find_manifest(project_root: str | Path) -> Path | None:
    """The project's manifest file, preferring ``settings.gradle.kts``."""
    root = Path(project_root)
    for name in MANIFEST_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None
