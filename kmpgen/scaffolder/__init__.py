"""KMP Module Generator scaffolder -- turns templates into modules on disk.

Resolves placeholders in a template's paths and contents, writes the
resulting tree under a target directory and registers the new module(s) in
the project's ``settings.gradle(.kts)``.  A preview computes the same
outcome without writing anything.

Quick usage::

    from kmpgen.config import Settings
    from kmpgen.scaffolder import GenerationEngine, TemplateRegistry

    settings = Settings(project_root=Path("/work/app"))
    registry = TemplateRegistry(settings)
    registry.reload()
    config = registry.create_configuration(
        "feature", {"moduleName": "payments"}, "/work/app/modules"
    )
    result = await GenerationEngine(settings).generate(config)
"""

from kmpgen.scaffolder.authoring import create_template, render_descriptor, write_descriptor
from kmpgen.scaffolder.configuration import ModuleConfiguration, create_configuration
from kmpgen.scaffolder.generator import GenerationEngine
from kmpgen.scaffolder.manifest import ManifestUpdater
from kmpgen.scaffolder.modules import derive_module_paths, module_entry
from kmpgen.scaffolder.preview import PreviewEngine
from kmpgen.scaffolder.registry import TemplateRegistry
from kmpgen.scaffolder.resolver import find_variables, missing_variables, resolve
from kmpgen.scaffolder.results import (
    GenerationFailure,
    GenerationPreview,
    GenerationResult,
    GenerationSuccess,
    GenerationWarning,
)
from kmpgen.scaffolder.templates import TemplateRenderer

__all__ = [
    "GenerationEngine",
    "PreviewEngine",
    "ManifestUpdater",
    "TemplateRegistry",
    "ModuleConfiguration",
    "create_configuration",
    "resolve",
    "find_variables",
    "missing_variables",
    "derive_module_paths",
    "module_entry",
    "GenerationResult",
    "GenerationSuccess",
    "GenerationWarning",
    "GenerationFailure",
    "GenerationPreview",
    "TemplateRenderer",
    "create_template",
    "write_descriptor",
    "render_descriptor",
]
