"""Shared utility functions for the KMP Module Generator.

Provides Rich-based console output, logging setup, and the small path helpers
used to keep template-relative paths in forward-slash form regardless of the
host separator.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


def setup_logging(level: str = "WARNING") -> None:
    """Route every ``kmpgen`` logger through a single Rich handler.

    Library modules only ever call ``logging.getLogger(__name__)``; the CLI
    calls this once at startup.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=numeric_level <= logging.DEBUG,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(numeric_level)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def to_posix(path: str | Path) -> str:
    """Return *path* with ``/`` separators and no leading ``./``.

    Examples::

        to_posix("feature\\api")   -> "feature/api"
        to_posix(Path("a") / "b")  -> "a/b"
    """
    text = str(path).replace("\\", "/")
    while text.startswith("./"):
        text = text[2:]
    return text


def relative_posix(path: str | Path, base: str | Path) -> str | None:
    """Return *path* relative to *base* in forward-slash form.

    Both paths are resolved first.  Returns ``""`` when they are the same
    directory and ``None`` when *path* is not inside *base*.
    """
    resolved = Path(path).resolve()
    resolved_base = Path(base).resolve()
    if not resolved.is_relative_to(resolved_base):
        return None
    rel = resolved.relative_to(resolved_base)
    return "" if rel == Path(".") else rel.as_posix()


def escapes_root(relative: str) -> bool:
    """True when a forward-slash relative path is absolute or climbs out with ``..``."""
    pure = PurePosixPath(relative)
    if pure.is_absolute():
        return True
    depth = 0
    for part in pure.parts:
        if part == "..":
            depth -= 1
            if depth < 0:
                return True
        elif part not in ("", "."):
            depth += 1
    return False


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table.

    Args:
        data: Mapping of label -> value.
        title: Table title.
    """
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")
