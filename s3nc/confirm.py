from __future__ import annotations
import logging
from typing import Callable

import click
import typer

from .models import DiffSet
from .utils import format_ts

log = logging.getLogger(__name__)

PROMPT = "Do you want to [c]ontinue, [l]ist the files to be copied or quit (any other key)?"


def _read_line(text: str) -> str:
    # default="" lets a bare Enter through as "quit" instead of re-asking
    try:
        return typer.prompt(text, default="", show_default=False, prompt_suffix=" ")
    except click.exceptions.Abort:
        # closed stdin or Ctrl-C counts as "quit"
        return ""


def confirm(
    diff: DiffSet,
    prompt: Callable[[str], str] = _read_line,
    echo: Callable[[str], None] = typer.echo,
) -> bool:
    """
    Ask the operator whether to go ahead with copying `diff`.
    'c…' continues, 'l…' lists every entry and asks again, anything else quits.
    Must run before any copy worker exists.
    """
    while True:
        answer = (prompt(PROMPT) or "").strip().lower()
        echo("")
        if answer.startswith("c"):
            return True
        if answer.startswith("l"):
            for key in diff.values():
                echo(f"[{format_ts(key.last_modified)}] {key.name}")
            echo("")
            continue
        log.debug("Operator declined with %r", answer)
        return False
