"""Shared UI utilities: colors, styling, status log, and interactive selection."""

from __future__ import annotations

import click
from InquirerPy import inquirer

# Colors using click.style
CYAN = "cyan"
GREEN = "green"
YELLOW = "yellow"
RED = "red"
DIM = "bright_black"

# Width of the label column in log lines
_LABEL_WIDTH = 10

LOG_COLORS: dict[str, str] = {
    "clone": GREEN,
    "update": GREEN,
    "exists": DIM,
    "skip": YELLOW,
    "warn": YELLOW,
    "error": RED,
    "cd": CYAN,
    "import": CYAN,
}


def style_error(msg: str) -> str:
    """Style an error message."""
    return click.style(f"✗ {msg}", fg=RED)


def style_success(msg: str) -> str:
    """Style a success message."""
    return click.style(f"✓ {msg}", fg=GREEN)


def style_warn(msg: str) -> str:
    """Style a warning message."""
    return click.style(f"! {msg}", fg=YELLOW)


def style_dim(msg: str) -> str:
    """Style dim/muted text."""
    return click.style(msg, fg=DIM)


def log(label: str, message: str) -> None:
    """Print a labelled status line to stderr; stdout carries command results."""
    color = LOG_COLORS.get(label, CYAN)
    styled = click.style(label.rjust(_LABEL_WIDTH), fg=color, bold=True)
    click.echo(f"{styled} {message}", err=True)


def fuzzy_select(options: list[str], message: str) -> int | None:
    """Show fuzzy select menu. Returns index or None if cancelled.

    Uses exact substring matching which gives predictable results -
    typing a character shows only options containing that character,
    with matches at the start appearing first.
    """
    try:
        prompt = inquirer.fuzzy(  # type: ignore[attr-defined]
            message=message,
            choices=options,
            match_exact=True,  # Substring match gives more predictable results
        )
        result = prompt.execute()
        if result is None:
            return None
        return options.index(result)
    except KeyboardInterrupt:
        return None
