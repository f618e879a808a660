"""Template folder loading.

Combines the descriptor parser and the structure scanner into a single
``TemplateDefinition`` per folder.  A folder without a readable
``template.xml`` raises ``TemplateParseError``; everything softer comes back
as diagnostics.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kmpgen.config import (
    BUILD_FRAGMENT_FILENAME,
    DESCRIPTOR_FILENAME,
    TEMPLATE_ROOT_DIRNAME,
)
from kmpgen.errors import TemplateParseError

from .descriptor import parse_descriptor, parse_template_info
from .models import ParseDiagnostic, TemplateDefinition, TemplateInfo
from .scanner import TemplateStructureScanner

logger = logging.getLogger(__name__)


def _read_descriptor(folder: Path) -> str:
    descriptor = folder / DESCRIPTOR_FILENAME
    if not descriptor.is_file():
        raise TemplateParseError(folder.name, f"{DESCRIPTOR_FILENAME} not found")
    try:
        return descriptor.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateParseError(folder.name, f"cannot read {DESCRIPTOR_FILENAME}: {exc}") from exc


def load_template(folder: str | Path) -> tuple[TemplateDefinition, list[ParseDiagnostic]]:
    """Load the template stored in *folder*.

    Args:
        folder: A template folder containing ``template.xml`` and, usually,
            a ``root/`` tree and a ``build.gradle.kts.ftl`` fragment.

    Returns:
        ``(definition, diagnostics)``.

    Raises:
        TemplateParseError: If the descriptor is missing or unreadable.
    """
    folder = Path(folder)
    content = _read_descriptor(folder)
    info, parameters, diagnostics = parse_descriptor(content, folder.name)

    scanner = TemplateStructureScanner(folder / TEMPLATE_ROOT_DIRNAME, template_name=folder.name)
    file_tree = scanner.scan()
    module_markers = scanner.find_module_markers()
    diagnostics.extend(scanner.diagnostics)

    fragment_file = folder / BUILD_FRAGMENT_FILENAME
    build_fragment = ""
    if fragment_file.is_file():
        try:
            build_fragment = fragment_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            diagnostics.append(ParseDiagnostic(
                template=folder.name,
                message=f"Ignored unreadable {BUILD_FRAGMENT_FILENAME}: {exc}",
            ))

    for diagnostic in diagnostics:
        logger.warning("%s", diagnostic)

    definition = TemplateDefinition(
        id=info.id,
        name=info.name,
        description=info.description,
        parameters=parameters,
        file_tree=file_tree,
        build_fragment=build_fragment,
        module_markers=module_markers,
    )
    return definition, diagnostics


def list_template_infos(template_folder: str | Path) -> list[TemplateInfo]:
    """Read just the header of every template under *template_folder*.

    Subfolders without a ``template.xml`` are not templates and are passed
    over silently; unreadable descriptors are logged and skipped.
    """
    base = Path(template_folder)
    if not base.is_dir():
        return []

    infos: list[TemplateInfo] = []
    for folder in sorted(p for p in base.iterdir() if p.is_dir()):
        if not (folder / DESCRIPTOR_FILENAME).is_file():
            continue
        try:
            infos.append(parse_template_info(_read_descriptor(folder), folder.name))
        except TemplateParseError as exc:
            logger.warning("Failed to parse template config: %s", exc)
    return infos
