"""Creating and editing templates on disk.

New templates get a ``template.xml`` describing their parameters, a
``root/`` tree seeded with a starter ``build.gradle.kts.ftl``, and a
README listing the placeholders the template can use.
"""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence
from pathlib import Path

from kmpgen.config import (
    BUILD_FRAGMENT_FILENAME,
    DESCRIPTOR_FILENAME,
    TEMPLATE_ROOT_DIRNAME,
)
from kmpgen.errors import KmpGenError
from kmpgen.parser.models import ParameterSpec, ParameterType, TemplateInfo
from kmpgen.parser.validators import get_validator

from .templates import TemplateRenderer

logger = logging.getLogger(__name__)

_TEMPLATE_ID_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")

DEFAULT_PARAMETERS: tuple[ParameterSpec, ...] = (
    ParameterSpec(
        name="moduleName",
        display_name="Module Name",
        description="Name of the module",
        type=ParameterType.TEXT,
        validator_name="module-name",
        validator=get_validator("module-name"),
    ),
    ParameterSpec(
        name="packageName",
        display_name="Package Name",
        description="Base package",
        type=ParameterType.PACKAGE,
        default_value="com.example",
        validator_name="package-name",
        validator=get_validator("package-name"),
    ),
)


class TemplateAuthoringError(KmpGenError):
    """Raised when a template cannot be created or rewritten."""


def _check_parameters(parameters: Sequence[ParameterSpec]) -> None:
    seen: set[str] = set()
    for spec in parameters:
        if not spec.name.strip():
            raise TemplateAuthoringError("Parameter name cannot be empty")
        if spec.name in seen:
            raise TemplateAuthoringError(f"Duplicate parameter name '{spec.name}'")
        seen.add(spec.name)


def render_descriptor(
    info: TemplateInfo,
    parameters: Sequence[ParameterSpec],
    renderer: TemplateRenderer | None = None,
) -> str:
    """Return the ``template.xml`` text for *info* and *parameters*."""
    renderer = renderer or TemplateRenderer()
    return renderer.render(
        "template.xml.j2", {"info": info, "parameters": list(parameters)}
    )


async def write_descriptor(
    template_folder: str | Path,
    info: TemplateInfo,
    parameters: Sequence[ParameterSpec],
) -> Path:
    """Rewrite ``template.xml`` of an existing template folder.

    The ``root/`` tree is left untouched.
    """
    folder = Path(template_folder)
    if not folder.is_dir():
        raise TemplateAuthoringError(f"Template folder {folder} does not exist")
    _check_parameters(parameters)
    renderer = TemplateRenderer()
    return await renderer.render_to_file(
        "template.xml.j2",
        folder / DESCRIPTOR_FILENAME,
        {"info": info, "parameters": list(parameters)},
    )


async def create_template(
    template_folder: str | Path,
    template_id: str,
    name: str,
    description: str = "",
    parameters: Sequence[ParameterSpec] | None = None,
) -> Path:
    """Create a new template folder under *template_folder*.

    Args:
        template_folder: Folder holding one subfolder per template.
        template_id: New template id; also the subfolder name.
        name: Display name.
        description: Free-text description.
        parameters: Parameter schema.  Defaults to ``moduleName`` and
            ``packageName``.

    Returns:
        Path of the created template folder.

    Raises:
        TemplateAuthoringError: On an invalid id, an existing folder or
            duplicate parameter names.
    """
    if not _TEMPLATE_ID_PATTERN.match(template_id):
        raise TemplateAuthoringError(
            "Template ID must start with lowercase letter and contain only "
            "lowercase letters, numbers, and hyphens"
        )
    if not name.strip():
        raise TemplateAuthoringError("Template name is required")

    params = list(parameters) if parameters is not None else list(DEFAULT_PARAMETERS)
    _check_parameters(params)

    folder = Path(template_folder) / template_id
    if folder.exists():
        raise TemplateAuthoringError(f"Template '{template_id}' already exists at {folder}")

    info = TemplateInfo(id=template_id, name=name, description=description)
    package_param = next((p.name for p in params if p.type is ParameterType.PACKAGE), None)
    module_dir = Path(TEMPLATE_ROOT_DIRNAME)
    if any(p.name == "moduleName" for p in params):
        module_dir = module_dir / "${moduleName}"

    context = {"info": info, "parameters": params, "package_param": package_param}
    renderer = TemplateRenderer()
    await asyncio.to_thread(folder.mkdir, parents=True)
    await renderer.render_to_file("template.xml.j2", folder / DESCRIPTOR_FILENAME, context)
    await renderer.render_to_file(
        "build.gradle.kts.ftl.j2", folder / module_dir / BUILD_FRAGMENT_FILENAME, context
    )
    await renderer.render_to_file("README.md.j2", folder / "README.md", context)

    logger.info("Created template %s at %s", template_id, folder)
    return folder
