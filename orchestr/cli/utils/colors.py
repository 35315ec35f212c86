"""
Orchestr CLI - styled output primitives built on Click.

    error(), info()
    banner()        - branded header with box drawing
    kv()            - key-value pair, aligned
    table()         - minimal aligned table

click.style handles NO_COLOR and dumb terminals.
"""

import shutil
from typing import Optional, Sequence

import click

_TERM_WIDTH: Optional[int] = None

_H_TL = "┏"
_H_TR = "┓"
_H_BL = "┗"
_H_BR = "┛"
_H_H = "━"
_H_V = "┃"
_L_H = "─"

_CHECK = "✓"


def _tw() -> int:
    """Terminal width, cached and clamped."""
    global _TERM_WIDTH
    if _TERM_WIDTH is None:
        _TERM_WIDTH = max(40, min(shutil.get_terminal_size((80, 24)).columns, 120))
    return _TERM_WIDTH


def error(message: str) -> None:
    """Print an error message in red on stderr."""
    click.echo(click.style(message, fg="red"), err=True)


def info(message: str) -> None:
    click.echo(click.style(message, fg="cyan"))


def banner(title: str = "Orchestr", subtitle: str = "", *, width: Optional[int] = None, fg: str = "cyan") -> None:
    """
    Print a bordered banner with centred title.

        ┏━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┓
        ┃               Orchestr               ┃
        ┗━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━┛
    """
    w = width or min(_tw(), 60)
    inner = w - 2
    click.echo(click.style(f"{_H_TL}{_H_H * inner}{_H_TR}", fg=fg))
    click.echo(click.style(f"{_H_V}{title.center(inner)}{_H_V}", fg=fg, bold=True))
    if subtitle:
        click.echo(click.style(f"{_H_V}{subtitle.center(inner)}{_H_V}", fg=fg))
    click.echo(click.style(f"{_H_BL}{_H_H * inner}{_H_BR}", fg=fg))


def kv(key: str, value: str, *, key_width: int = 20, indent: int = 2, val_fg: str = "cyan") -> None:
    """
    Print an aligned key-value pair.

        Bindings:           12
        Listeners:          4
    """
    prefix = " " * indent
    padding = " " * max(1, key_width - len(key) - 1)
    click.echo(f"{prefix}{click.style(f'{key}:', fg='white')}{padding}{click.style(str(value), fg=val_fg)}")


def table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    *,
    header_fg: str = "cyan",
    row_fg: str = "white",
    indent: int = 2,
) -> None:
    """
    Print a minimal aligned table.

        Abstract        Kind       Shared
        ─────────────── ────────── ──────
        events          factory    yes
    """
    prefix = " " * indent
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row[:len(headers)]):
            widths[i] = max(widths[i], len(str(cell)))
    widths = [w + 2 for w in widths]

    header = "".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    click.echo(f"{prefix}{click.style(header, fg=header_fg, bold=True)}")
    click.echo(f"{prefix}{click.style(''.join(_L_H * w for w in widths), dim=True)}")

    for row in rows:
        line = "".join(str(cell).ljust(widths[i]) for i, cell in enumerate(row[:len(headers)]))
        click.echo(f"{prefix}{click.style(line, fg=row_fg)}")
