"""In-process registry of loaded templates."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from kmpgen.config import DESCRIPTOR_FILENAME, Settings
from kmpgen.errors import TemplateParseError
from kmpgen.parser.loader import load_template
from kmpgen.parser.models import ParseDiagnostic, Severity, TemplateDefinition

from .configuration import ModuleConfiguration, create_configuration

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Templates found in the configured template folder, keyed by id.

    :meth:`reload` parses every template into a fresh mapping and then
    publishes it in one assignment, so readers see either the old set or
    the new one.  Published mappings are read-only.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()
        self._templates: Mapping[str, TemplateDefinition] = MappingProxyType({})
        self.diagnostics: list[ParseDiagnostic] = []

    def reload(self) -> list[TemplateDefinition]:
        """Discard every loaded template and parse the template folder again."""
        folder = self.settings.ensure_template_folder()
        logger.info("Loading templates from %s", folder)

        templates: dict[str, TemplateDefinition] = {}
        diagnostics: list[ParseDiagnostic] = []
        for subfolder in sorted(p for p in folder.iterdir() if p.is_dir()):
            if not (subfolder / DESCRIPTOR_FILENAME).is_file():
                continue
            try:
                definition, found = load_template(subfolder)
            except TemplateParseError as exc:
                logger.warning("Skipping template %s: %s", subfolder.name, exc)
                diagnostics.append(ParseDiagnostic(
                    template=subfolder.name, message=str(exc), severity=Severity.ERROR
                ))
                continue
            diagnostics.extend(found)
            if definition.id in templates:
                logger.warning("Duplicate template id '%s' in %s; keeping the first", definition.id, subfolder.name)
                diagnostics.append(ParseDiagnostic(
                    template=subfolder.name,
                    message=f"Duplicate template id '{definition.id}' ignored",
                ))
                continue
            templates[definition.id] = definition
            logger.info("Loaded template %s (%d parameters)", definition.id, len(definition.parameters))

        self._templates = MappingProxyType(templates)
        self.diagnostics = diagnostics
        return list(templates.values())

    def all(self) -> list[TemplateDefinition]:
        return list(self._templates.values())

    def get(self, template_id: str) -> TemplateDefinition | None:
        return self._templates.get(template_id)

    def unregister(self, template_id: str) -> bool:
        """Drop *template_id* from the published set.  Returns whether it was present."""
        if template_id not in self._templates:
            return False
        remaining = {k: v for k, v in self._templates.items() if k != template_id}
        self._templates = MappingProxyType(remaining)
        return True

    def create_configuration(
        self,
        template: TemplateDefinition | str,
        variables: Mapping[str, str],
        target_path: str | Path,
    ) -> ModuleConfiguration:
        """Bind a template (or a registered template id) to values and a target.

        Raises:
            KeyError: If *template* is an id that is not registered.
        """
        if isinstance(template, str):
            definition = self.get(template)
            if definition is None:
                raise KeyError(f"Unknown template '{template}'")
            template = definition
        return create_configuration(template, variables, target_path)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates
