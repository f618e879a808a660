"""``template.xml`` parser.

Reads the template header (id, name, description) and the ``<parameter>``
blocks with plain regex extraction -- no XML library -- so that one broken
block never takes the rest of the file down with it.  Every problem is
returned as a ``ParseDiagnostic`` next to whatever did parse.
"""

from __future__ import annotations

import re
from xml.sax.saxutils import unescape

from .models import (
    ParameterSpec,
    ParameterType,
    ParseDiagnostic,
    Severity,
    TemplateInfo,
)
from .validators import default_validator_name, get_validator


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# ``\b`` keeps ``<parameter`` from matching ``<parameters``.
_PARAMETER_OPEN_PATTERN = re.compile(r"<parameter\b[^>]*>")
_PARAMETER_CLOSE = "</parameter>"
_PARAMETERS_SECTION_PATTERN = re.compile(r"<parameters\b[^>]*>.*?</parameters>", re.DOTALL)
_PARAMETER_BLOCK_PATTERN = re.compile(r"<parameter\b[^>]*>.*?</parameter>", re.DOTALL)
_ENTITIES = {"&quot;": '"', "&apos;": "'", "&#34;": '"', "&#39;": "'"}


# ---------------------------------------------------------------------------
# Low-level extraction
# ---------------------------------------------------------------------------

def _extract_tag(xml: str, tag: str) -> str | None:
    """Return the trimmed, unescaped text of the first ``<tag>`` element."""
    match = re.search(rf"<{tag}>(.*?)</{tag}>", xml, re.DOTALL)
    if match is None:
        return None
    return unescape(match.group(1).strip(), _ENTITIES)


def _extract_attribute(xml: str, attribute: str) -> str | None:
    """Return the value of the first ``attribute="..."`` occurrence."""
    match = re.search(rf'\b{attribute}="([^"]*)"', xml)
    if match is None:
        return None
    return unescape(match.group(1), _ENTITIES)


def _parse_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return default


def _parse_options(raw: str | None) -> list[str] | None:
    if raw is None or not raw.strip():
        return None
    options = [token.strip() for token in raw.split(",")]
    return [token for token in options if token] or None


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def parse_template_info(content: str, folder_name: str) -> TemplateInfo:
    """Read the template header, applying the folder-name fallbacks.

    Parameter blocks are cut out first so that a parameter's
    ``<description>`` is never mistaken for the template's own.
    """
    header = _PARAMETERS_SECTION_PATTERN.sub("", content)
    header = _PARAMETER_BLOCK_PATTERN.sub("", header)

    template_id = _extract_tag(header, "id") or folder_name
    name = _extract_tag(header, "name") or template_id
    description = _extract_tag(header, "description") or ""
    return TemplateInfo(id=template_id, name=name, description=description)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

def _split_parameter_blocks(content: str) -> tuple[list[tuple[str, str]], int]:
    """Cut *content* into ``(opening_tag, body)`` pairs.

    A block ends at its ``</parameter>``; a self-closing ``<parameter .../>``
    has an empty body.  An opening tag whose body runs into the next opening
    tag (or the end of the text) before closing is counted as unterminated
    and dropped.
    """
    blocks: list[tuple[str, str]] = []
    unterminated = 0
    openings = list(_PARAMETER_OPEN_PATTERN.finditer(content))
    for index, opening in enumerate(openings):
        if opening.group(0).endswith("/>"):
            blocks.append((opening.group(0), ""))
            continue
        limit = openings[index + 1].start() if index + 1 < len(openings) else len(content)
        close_at = content.find(_PARAMETER_CLOSE, opening.end(), limit)
        if close_at == -1:
            unterminated += 1
            continue
        blocks.append((opening.group(0), content[opening.end():close_at]))
    return blocks, unterminated


def _parse_parameter(
    head: str, block: str, folder_name: str
) -> tuple[ParameterSpec | None, list[ParseDiagnostic]]:
    """Turn one ``<parameter>`` block into a spec, or explain why not."""
    diagnostics: list[ParseDiagnostic] = []
    name = _extract_attribute(head, "name")
    if not name or not name.strip():
        diagnostics.append(ParseDiagnostic(
            template=folder_name,
            message="Skipped <parameter> without a name attribute",
        ))
        return None, diagnostics
    name = name.strip()

    raw_type = _extract_tag(block, "type")
    if raw_type is None:
        param_type = ParameterType.TEXT
    else:
        try:
            param_type = ParameterType(raw_type)
        except ValueError:
            param_type = ParameterType.TEXT
            diagnostics.append(ParseDiagnostic(
                template=folder_name,
                message=f"Parameter '{name}': unknown type '{raw_type}', using TEXT",
                severity=Severity.INFO,
            ))

    validator_name = _extract_tag(block, "validator") or default_validator_name(param_type)
    validator = None
    if validator_name:
        validator = get_validator(validator_name)
        if validator is None:
            diagnostics.append(ParseDiagnostic(
                template=folder_name,
                message=f"Parameter '{name}': unknown validator '{validator_name}'",
            ))
            validator_name = None

    spec = ParameterSpec(
        name=name,
        display_name=_extract_tag(block, "displayName") or name,
        description=_extract_tag(block, "description") or "",
        type=param_type,
        default_value=_extract_tag(block, "default") or "",
        required=_parse_bool(_extract_tag(block, "required"), default=True),
        options=_parse_options(_extract_tag(block, "options")),
        validator_name=validator_name,
        validator=validator,
    )
    return spec, diagnostics


def parse_parameters(
    content: str, folder_name: str
) -> tuple[list[ParameterSpec], list[ParseDiagnostic]]:
    """Parse every ``<parameter>`` block in declaration order.

    Blocks without a name, duplicate names and unterminated blocks are
    skipped with a diagnostic; the rest still parse.
    """
    parameters: list[ParameterSpec] = []
    diagnostics: list[ParseDiagnostic] = []
    seen: set[str] = set()

    blocks, unterminated = _split_parameter_blocks(content)
    for head, block in blocks:
        spec, block_diagnostics = _parse_parameter(head, block, folder_name)
        diagnostics.extend(block_diagnostics)
        if spec is None:
            continue
        if spec.name in seen:
            diagnostics.append(ParseDiagnostic(
                template=folder_name,
                message=f"Skipped duplicate parameter '{spec.name}'",
            ))
            continue
        seen.add(spec.name)
        parameters.append(spec)

    if unterminated:
        diagnostics.append(ParseDiagnostic(
            template=folder_name,
            message=f"Skipped {unterminated} unterminated <parameter> block(s)",
        ))

    return parameters, diagnostics


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def parse_descriptor(
    content: str, folder_name: str
) -> tuple[TemplateInfo, list[ParameterSpec], list[ParseDiagnostic]]:
    """Parse a whole ``template.xml``.

    Args:
        content: Raw descriptor text.
        folder_name: Name of the enclosing template folder (the id fallback).

    Returns:
        ``(info, parameters, diagnostics)``.  Never raises for malformed
        content; problems come back as diagnostics.
    """
    info = parse_template_info(content, folder_name)
    parameters, diagnostics = parse_parameters(content, folder_name)
    return info, parameters, diagnostics
