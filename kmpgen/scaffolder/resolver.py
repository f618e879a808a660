"""Placeholder substitution for template paths and contents.

Two interchangeable syntaxes are recognised: ``${name}`` and ``{{name}}``.
Substitution is a single left-to-right pass, so a value that itself looks
like a placeholder is inserted verbatim and never expanded again, and the
iteration order of the variable mapping cannot change the result.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

_PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]+)\}|\{\{([^}]+)\}\}")


def resolve(text: str, variables: Mapping[str, str]) -> str:
    """Replace every ``${name}`` / ``{{name}}`` whose name is in *variables*.

    Placeholders for names that are not supplied are left untouched.

    Examples::

        resolve("${moduleName}/src", {"moduleName": "payments"}) -> "payments/src"
        resolve("{{a}}-${b}", {"a": "x"})                       -> "x-${b}"
    """
    if not variables:
        return text

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1) if match.group(1) is not None else match.group(2)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(_substitute, text)


def find_variables(text: str) -> set[str]:
    """Return every placeholder name referenced in *text*, in either syntax."""
    names: set[str] = set()
    for match in _PLACEHOLDER_PATTERN.finditer(text):
        names.add(match.group(1) if match.group(1) is not None else match.group(2))
    return names


def missing_variables(text: str, variables: Mapping[str, str]) -> list[str]:
    """Return the referenced names absent from *variables*, sorted."""
    return sorted(name for name in find_variables(text) if name not in variables)
