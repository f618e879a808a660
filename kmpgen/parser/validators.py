"""Built-in parameter validators.

Validators are plain functions from the raw string value to a
``ValidationResult``.  Templates reference them by name through a
``<validator>`` tag; ``PACKAGE`` parameters get the package-name validator
without asking.
"""

from __future__ import annotations

import re

from .models import ParameterType, ValidationResult, Validator


# ---------------------------------------------------------------------------
# Module names
# ---------------------------------------------------------------------------

_MODULE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9-]*$")


def validate_module_name(value: str) -> ValidationResult:
    """Check a Gradle module name such as ``payments`` or ``feature-api``."""
    if not value.strip():
        return ValidationResult.invalid("Module name cannot be empty")
    if len(value) < 2:
        return ValidationResult.invalid("Module name must be at least 2 characters long")
    if len(value) > 50:
        return ValidationResult.invalid("Module name should not exceed 50 characters")
    if not _MODULE_NAME_PATTERN.match(value):
        return ValidationResult.invalid(
            "Module name must start with lowercase letter and contain only "
            "lowercase letters, numbers, and hyphens"
        )
    if value.endswith("-"):
        return ValidationResult.invalid("Module name cannot start or end with a hyphen")
    if "--" in value:
        return ValidationResult.invalid("Module name cannot contain consecutive hyphens")
    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Package names
# ---------------------------------------------------------------------------

_PACKAGE_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*(\.[a-z][a-z0-9_]*)*$")

KOTLIN_KEYWORDS = frozenset({
    "abstract", "as", "break", "class", "continue", "do", "else", "false",
    "for", "fun", "if", "in", "interface", "is", "null", "object", "package",
    "return", "super", "this", "throw", "true", "try", "typealias", "typeof",
    "val", "var", "when", "while",
})


def validate_package_name(value: str) -> ValidationResult:
    """Check a dotted package name such as ``com.example.payments``."""
    if not value.strip():
        return ValidationResult.invalid("Package name cannot be empty")
    if not _PACKAGE_NAME_PATTERN.match(value):
        return ValidationResult.invalid(
            "Package name must start with lowercase letter and contain only "
            "lowercase letters, numbers, underscores, and dots"
        )
    segments = value.split(".")
    reserved = next((s for s in segments if s in KOTLIN_KEYWORDS), None)
    if reserved is not None:
        return ValidationResult.invalid(f"Package name contains reserved keyword: {reserved}")
    if any(len(s) > 100 for s in segments):
        return ValidationResult.invalid("Package name parts should not exceed 100 characters")
    return ValidationResult.ok()


def package_to_path(package_name: str) -> str:
    """``com.example.app`` -> ``com/example/app``."""
    return package_name.replace(".", "/")


def path_to_package(path: str) -> str:
    """``com/example/app`` -> ``com.example.app``."""
    return path.replace("/", ".")


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------

VALIDATORS: dict[str, Validator] = {
    "module-name": validate_module_name,
    "package-name": validate_package_name,
}

_TYPE_DEFAULTS: dict[ParameterType, str] = {
    ParameterType.PACKAGE: "package-name",
}


def get_validator(name: str) -> Validator | None:
    """Return the validator registered under *name*, or ``None``."""
    return VALIDATORS.get(name)


def default_validator_name(param_type: ParameterType) -> str | None:
    """Validator applied to a parameter type when the template names none."""
    return _TYPE_DEFAULTS.get(param_type)
