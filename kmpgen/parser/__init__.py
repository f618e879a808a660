"""KMP Module Generator template parser.

Turns a template folder (``template.xml`` + ``root/`` tree) into an immutable
``TemplateDefinition``, collecting non-fatal problems as diagnostics.

Usage::

    from kmpgen.parser import load_template

    definition, diagnostics = load_template("path/to/templates/feature")
    print(definition.parameters)
    print(definition.module_markers)
"""

from kmpgen.parser.descriptor import parse_descriptor
from kmpgen.parser.loader import list_template_infos, load_template
from kmpgen.parser.models import (
    DirectoryEntry,
    FileEntry,
    FileTree,
    ParameterSpec,
    ParameterType,
    ParseDiagnostic,
    TemplateDefinition,
    TemplateInfo,
    ValidationResult,
)
from kmpgen.parser.scanner import TemplateStructureScanner

__all__ = [
    "load_template",
    "list_template_infos",
    "parse_descriptor",
    "TemplateStructureScanner",
    "TemplateDefinition",
    "TemplateInfo",
    "ParameterSpec",
    "ParameterType",
    "FileTree",
    "DirectoryEntry",
    "FileEntry",
    "ParseDiagnostic",
    "ValidationResult",
]
