"""Template ``root/`` tree scanner.

Walks a template's output tree and builds the in-memory ``FileTree``: every
subdirectory becomes a ``DirectoryEntry`` and every ``.ftl`` file a
``FileEntry`` with the suffix stripped.  Other files are ignored.  Content is
read verbatim; placeholders are resolved later by the engine.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kmpgen.config import MODULE_MARKER_FILENAMES, TEMPLATE_SUFFIX

from .models import DirectoryEntry, FileEntry, FileTree, ParseDiagnostic

logger = logging.getLogger(__name__)


def is_module_marker(output_path: str) -> bool:
    """True when the last segment of *output_path* is a build-file name."""
    return output_path.rsplit("/", 1)[-1] in MODULE_MARKER_FILENAMES


class TemplateStructureScanner:
    """Scans one template root directory.

    Output is sorted by path so that two scans of the same tree always
    produce the same ``FileTree``.
    """

    def __init__(
        self,
        root: str | Path,
        *,
        template_name: str = "",
        suffix: str = TEMPLATE_SUFFIX,
    ) -> None:
        self.root = Path(root)
        self.template_name = template_name or self.root.parent.name
        self.suffix = suffix
        self.diagnostics: list[ParseDiagnostic] = []

    # -- Public API --------------------------------------------------------

    def scan(self) -> FileTree:
        """Build the ``FileTree`` for the root directory.

        An unreadable template file is skipped and recorded in
        :attr:`diagnostics`.  A missing root yields an empty tree.
        """
        if not self.root.is_dir():
            return FileTree()

        directories: list[DirectoryEntry] = []
        files: list[FileEntry] = []

        for path in sorted(self.root.rglob("*")):
            rel = path.relative_to(self.root).as_posix()
            if path.is_dir():
                directories.append(DirectoryEntry(path=rel))
            elif path.name.endswith(self.suffix):
                try:
                    content = path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    logger.warning("Skipping unreadable template file %s: %s", rel, exc)
                    self.diagnostics.append(ParseDiagnostic(
                        template=self.template_name,
                        message=f"Skipped unreadable file {rel}: {exc}",
                    ))
                    continue
                files.append(FileEntry(path=rel[: -len(self.suffix)], content=content))

        return FileTree(directories=directories, files=files)

    def find_module_markers(self) -> list[str]:
        """Return output paths of build files (``build.gradle``/``build.gradle.kts``).

        Paths are template-relative with the suffix stripped and may still
        contain placeholders, e.g. ``${moduleName}/api/build.gradle.kts``.
        """
        if not self.root.is_dir():
            return []
        markers: list[str] = []
        for path in sorted(self.root.rglob(f"*{self.suffix}")):
            if not path.is_file():
                continue
            output_path = path.relative_to(self.root).as_posix()[: -len(self.suffix)]
            if is_module_marker(output_path):
                markers.append(output_path)
        return markers
