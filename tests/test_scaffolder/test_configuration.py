"""Tests for ModuleConfiguration (kmpgen.scaffolder.configuration)."""

from __future__ import annotations

from pathlib import Path

import pytest

from kmpgen.errors import ConfigurationError
from kmpgen.parser.models import (
    FileEntry,
    FileTree,
    ParameterSpec,
    ParameterType,
    TemplateDefinition,
    ValidationResult,
)
from kmpgen.scaffolder.configuration import create_configuration


pytestmark = pytest.mark.unit


def _template(*params: ParameterSpec, files: list[FileEntry] | None = None) -> TemplateDefinition:
    return TemplateDefinition(
        id="t", name="T", parameters=list(params), file_tree=FileTree(files=files or [])
    )


class TestValidation:
    def test_valid(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {"moduleName": "payments"}, tmp_path)
        assert config.validate_values() == []
        config.require_valid()

    def test_required_missing(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {}, tmp_path)
        assert config.validate_values() == ["Module Name is required"]

    def test_required_blank(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {"moduleName": "   "}, tmp_path)
        assert config.validate_values() == ["Module Name is required"]

    def test_validator_failure(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {"moduleName": "Payments"}, tmp_path)
        errors = config.validate_values()
        assert len(errors) == 1
        assert "lowercase" in errors[0]

    def test_require_valid_raises(self, payments_template, tmp_path):
        config = create_configuration(payments_template, {}, tmp_path)
        with pytest.raises(ConfigurationError) as exc_info:
            config.require_valid()
        assert exc_info.value.errors == ["Module Name is required"]
        assert str(exc_info.value) == "Validation failed: Module Name is required"

    def test_default_satisfies_required(self, tmp_path):
        template = _template(ParameterSpec(name="flavor", default_value="free"))
        assert create_configuration(template, {}, tmp_path).validate_values() == []

    def test_optional_blank_skips_validator(self, tmp_path):
        calls: list[str] = []

        def never_valid(value: str) -> ValidationResult:
            calls.append(value)
            return ValidationResult.invalid("nope")

        template = _template(ParameterSpec(name="x", required=False, validator=never_valid))
        assert create_configuration(template, {"x": ""}, tmp_path).validate_values() == []
        assert calls == []

    def test_errors_in_parameter_order(self, tmp_path):
        template = _template(
            ParameterSpec(name="b", display_name="B"),
            ParameterSpec(name="a", display_name="A"),
        )
        errors = create_configuration(template, {}, tmp_path).validate_values()
        assert errors == ["B is required", "A is required"]


class TestEffectiveVariables:
    def test_defaults_fill_missing(self, module_template, tmp_path):
        values = create_configuration(module_template, {"moduleName": "core"}, tmp_path).effective_variables()
        assert values["packageName"] == "com.example"

    def test_user_value_wins_over_default(self, module_template, tmp_path):
        config = create_configuration(
            module_template, {"moduleName": "core", "packageName": "io.app"}, tmp_path
        )
        assert config.effective_variables()["packageName"] == "io.app"

    def test_package_path_derived(self, module_template, tmp_path):
        config = create_configuration(
            module_template, {"moduleName": "core", "packageName": "io.app.core"}, tmp_path
        )
        assert config.effective_variables()["packageNamePath"] == "io/app/core"

    def test_user_supplied_path_wins(self, module_template, tmp_path):
        config = create_configuration(
            module_template,
            {"moduleName": "core", "packageName": "io.app", "packageNamePath": "custom"},
            tmp_path,
        )
        assert config.effective_variables()["packageNamePath"] == "custom"

    def test_values_coerced_to_str(self, module_template, tmp_path):
        config = create_configuration(module_template, {"moduleName": 7}, tmp_path)
        assert config.variables["moduleName"] == "7"

    def test_target_path_is_path(self, module_template, tmp_path):
        config = create_configuration(module_template, {}, str(tmp_path))
        assert isinstance(config.target_path, Path)


class TestPreflight:
    def test_unresolved_placeholders(self, tmp_path):
        template = _template(
            ParameterSpec(name="moduleName"),
            files=[FileEntry(path="${moduleName}/${extra}.kt", content="{{other}} ${moduleName}")],
        )
        config = create_configuration(template, {"moduleName": "m"}, tmp_path)
        assert config.unresolved_placeholders() == ["extra", "other"]

    def test_module_label(self, payments_template, tmp_path):
        assert create_configuration(payments_template, {"moduleName": "pay"}, tmp_path).module_label == "pay"
        assert create_configuration(payments_template, {}, tmp_path / "fallback").module_label == "fallback"
