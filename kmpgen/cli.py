"""``kmpgen`` command-line interface.

Lists, previews and generates modules from the templates in the project's
template folder, and scaffolds new templates.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from rich.table import Table
from rich.tree import Tree

from kmpgen import __version__
from kmpgen.config import Settings
from kmpgen.errors import KmpGenError
from kmpgen.parser.models import TemplateDefinition
from kmpgen.scaffolder import (
    GenerationEngine,
    GenerationFailure,
    GenerationSuccess,
    PreviewEngine,
    TemplateRegistry,
    create_template,
)
from kmpgen.utils import (
    console,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    setup_logging,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_assignments(pairs: list[str] | None) -> dict[str, str]:
    """Turn ``["a=1", "b=x=y"]`` into ``{"a": "1", "b": "x=y"}``.

    Raises:
        ValueError: If an item has no ``=`` or an empty key.
    """
    values: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        values[key.strip()] = value
    return values


def _load_registry(settings: Settings) -> TemplateRegistry:
    registry = TemplateRegistry(settings)
    registry.reload()
    for diagnostic in registry.diagnostics:
        logger.debug("%s", diagnostic)
    return registry


def _require_template(registry: TemplateRegistry, template_id: str) -> TemplateDefinition:
    template = registry.get(template_id)
    if template is None:
        raise KmpGenError(
            f"Unknown template '{template_id}' in {registry.settings.template_folder}"
        )
    return template


def _target_path(settings: Settings, target: str | None) -> Path:
    path = Path(target) if target else settings.project_root
    if not path.is_absolute():
        path = settings.project_root / path
    return path


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_list(settings: Settings, args: argparse.Namespace) -> int:
    registry = _load_registry(settings)
    templates = registry.all()
    if not templates:
        print_warning(f"No templates found in {settings.template_folder}")
        return 0

    table = Table(title="Templates", show_header=True, header_style="bold cyan")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Parameters", justify="right")
    table.add_column("Description", style="dim")
    for template in templates:
        table.add_row(template.id, template.name, str(len(template.parameters)), template.description)
    console.print(table)

    for diagnostic in registry.diagnostics:
        print_warning(str(diagnostic))
    return 0


def cmd_show(settings: Settings, args: argparse.Namespace) -> int:
    template = _require_template(_load_registry(settings), args.template)

    print_summary_table(
        {
            "ID": template.id,
            "Name": template.name,
            "Description": template.description or "-",
            "Directories": str(len(template.file_tree.directories)),
            "Files": str(len(template.file_tree.files)),
            "Module markers": ", ".join(template.module_markers) or "-",
        },
        title=f"Template: {template.name}",
    )

    table = Table(title="Parameters", show_header=True, header_style="bold cyan")
    table.add_column("Name", no_wrap=True)
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Default")
    table.add_column("Options")
    table.add_column("Validator", style="dim")
    for spec in template.parameters:
        table.add_row(
            spec.name,
            spec.type.value,
            "yes" if spec.required else "no",
            spec.default_value,
            ", ".join(spec.options or []),
            spec.validator_name or "",
        )
    console.print(table)
    return 0


def cmd_preview(settings: Settings, args: argparse.Namespace) -> int:
    registry = _load_registry(settings)
    template = _require_template(registry, args.template)
    target = _target_path(settings, args.target)
    config = registry.create_configuration(template, parse_assignments(args.set), target)
    preview = PreviewEngine(settings).preview(config)

    tree = Tree(f"[bold]{target}[/bold]")
    for directory in preview.directories:
        tree.add(f"[blue]{directory.path}/[/blue] [dim](level {directory.level})[/dim]")
    for file in preview.files:
        tree.add(f"{file.path} [dim]({file.size} chars, level {file.level})[/dim]")
    console.print(tree)

    for change in preview.manifest_changes:
        console.print(f"  [cyan]{change}[/cyan]")
    if preview.missing_variables:
        print_warning("Unresolved placeholders: " + ", ".join(preview.missing_variables))
    for reason in preview.rejected:
        print_warning(f"Skipped: {reason}")
    for error in preview.validation_errors:
        print_error(error)
    return 1 if preview.validation_errors else 0


def cmd_generate(settings: Settings, args: argparse.Namespace) -> int:
    registry = _load_registry(settings)
    template = _require_template(registry, args.template)
    target = _target_path(settings, args.target)
    config = registry.create_configuration(template, parse_assignments(args.set), target)
    unresolved = config.unresolved_placeholders()
    if unresolved:
        print_warning("Unresolved placeholders: " + ", ".join(unresolved))

    result = asyncio.run(GenerationEngine(settings).generate(config))

    if isinstance(result, GenerationFailure):
        print_error(result.error)
        return 1

    for path in result.generated_files:
        console.print(f"  [green]+[/green] {path}")
    if isinstance(result, GenerationSuccess):
        print_success(f"Module '{result.module_label}' generated in {result.module_directory}")
    else:
        for warning in result.warnings:
            print_warning(f"  {warning}")
        print_warning(
            f"Module '{result.module_label}' generated in {result.module_directory} "
            f"with {len(result.warnings)} warning(s)"
        )
    return 0


def cmd_new_template(settings: Settings, args: argparse.Namespace) -> int:
    folder = asyncio.run(create_template(
        settings.ensure_template_folder(),
        args.template,
        args.name or args.template,
        args.description,
    ))
    print_success(f"Template created at {folder}")
    console.print("  Add your files to the [bold]root/[/bold] folder (use the .ftl extension).")
    return 0


def cmd_settings(settings: Settings, args: argparse.Namespace) -> int:
    if args.template_folder or args.reset:
        settings.set_custom_template_folder(Path(args.template_folder) if args.template_folder else None)
        path = settings.save()
        print_success(f"Settings saved to {path}")

    print_summary_table(
        {
            "Project root": str(settings.project_root),
            "Template folder": str(settings.template_folder),
            "Custom folder": "yes" if settings.use_custom_folder else "no",
        },
        title="Settings",
    )
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kmpgen",
        description="KMP Module Generator -- scaffold modules from templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  kmpgen list\n"
            "  kmpgen preview feature --target modules --set moduleName=payments\n"
            "  kmpgen generate feature --target modules --set moduleName=payments\n"
            "  kmpgen new-template feature --name 'Feature module'\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--project-root", "-p",
        default=".",
        help="Project root containing settings.gradle(.kts) (default: .)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List available templates")
    p_list.set_defaults(handler=cmd_list)

    p_show = sub.add_parser("show", help="Show a template's parameters")
    p_show.add_argument("template", help="Template ID")
    p_show.set_defaults(handler=cmd_show)

    for name, handler, help_text in (
        ("preview", cmd_preview, "Show what would be generated"),
        ("generate", cmd_generate, "Generate a module"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("template", help="Template ID")
        p.add_argument(
            "--target", "-t",
            default=None,
            help="Directory to generate into (default: project root)",
        )
        p.add_argument(
            "--set", "-s",
            action="append",
            metavar="NAME=VALUE",
            help="Variable value; may be repeated",
        )
        p.set_defaults(handler=handler)

    p_new = sub.add_parser("new-template", help="Create a new template")
    p_new.add_argument("template", help="Template ID (lowercase, digits, hyphens)")
    p_new.add_argument("--name", default=None, help="Display name (default: the ID)")
    p_new.add_argument("--description", default="", help="Template description")
    p_new.set_defaults(handler=cmd_new_template)

    p_settings = sub.add_parser("settings", help="Show or change settings")
    group = p_settings.add_mutually_exclusive_group()
    group.add_argument("--template-folder", default=None, help="Use a custom template folder")
    group.add_argument("--reset", action="store_true", help="Go back to the default template folder")
    p_settings.set_defaults(handler=cmd_settings)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for ``kmpgen`` / ``python -m kmpgen.cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    settings = Settings.for_project(Path(args.project_root))
    try:
        return args.handler(settings, args)
    except (KmpGenError, ValueError) as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
