"""Binding of a template to concrete variable values and a target directory."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from kmpgen.errors import ConfigurationError
from kmpgen.parser.models import ParameterType, TemplateDefinition
from kmpgen.parser.validators import package_to_path

from .resolver import missing_variables

# Suffix of the derived slash-path variable exposed for PACKAGE parameters.
PACKAGE_PATH_SUFFIX = "Path"


class ModuleConfiguration(BaseModel):
    """A single generation or preview request.  Transient, never persisted."""

    model_config = ConfigDict(frozen=True)

    template: TemplateDefinition
    variables: dict[str, str] = Field(default_factory=dict)
    target_path: Path

    # -- Validation ----------------------------------------------------------

    def validate_values(self) -> list[str]:
        """Return every required-field and validator failure, in parameter order.

        Values are checked after defaults are applied, so a required
        parameter with a non-empty default is never reported missing.
        Validators only see non-blank values.
        """
        values = self.effective_variables()
        errors: list[str] = []
        for spec in self.template.parameters:
            value = values.get(spec.name)
            if spec.required and (value is None or not value.strip()):
                errors.append(f"{spec.label} is required")
                continue
            if value is not None and value.strip() and spec.validator is not None:
                result = spec.validator(value)
                if not result.valid:
                    errors.append(result.message)
        return errors

    def require_valid(self) -> None:
        """Raise ``ConfigurationError`` if :meth:`validate_values` finds anything."""
        errors = self.validate_values()
        if errors:
            raise ConfigurationError(errors)

    # -- Variables ---------------------------------------------------------

    def effective_variables(self) -> dict[str, str]:
        """Supplied values merged over parameter defaults, plus derived paths.

        For every PACKAGE parameter with a value, ``<name>Path`` holds the
        slash form (``com.example`` -> ``com/example``) unless the caller
        supplied that key directly.
        """
        values: dict[str, str] = {
            spec.name: spec.default_value
            for spec in self.template.parameters
            if spec.default_value
        }
        values.update(self.variables)
        for spec in self.template.parameters:
            value = values.get(spec.name)
            if spec.type is ParameterType.PACKAGE and value:
                values.setdefault(spec.name + PACKAGE_PATH_SUFFIX, package_to_path(value))
        return values

    def unresolved_placeholders(self) -> list[str]:
        """Pre-flight check: placeholder names used by the tree but never supplied."""
        values = self.effective_variables()
        tree = self.template.file_tree
        texts: list[str] = [d.path for d in tree.directories]
        for entry in tree.files:
            texts.extend((entry.path, entry.content))
        texts.extend(self.template.module_markers)
        missing: set[str] = set()
        for text in texts:
            missing.update(missing_variables(text, values))
        return sorted(missing)

    @property
    def module_label(self) -> str:
        """Name used in results: the ``moduleName`` value, else the target's name."""
        return self.effective_variables().get("moduleName") or self.target_path.name


def create_configuration(
    template: TemplateDefinition,
    variables: Mapping[str, str],
    target_path: str | Path,
) -> ModuleConfiguration:
    """Bind *template* to *variables* and *target_path*."""
    return ModuleConfiguration(
        template=template,
        variables={key: str(value) for key, value in variables.items()},
        target_path=Path(target_path),
    )
