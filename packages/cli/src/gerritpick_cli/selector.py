"""Console item selector.

Lists candidates in a numbered table and reads a selection expression:

    1,3-5   pick rows 1, 3, 4 and 5
    all     pick every row
    ?2      show the preview of row 2
    q       abort
"""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gerritpick_core.models import SelectorItem

console = Console()

T = TypeVar("T")


def parse_selection(expression: str, count: int) -> list[int] | None:
    """Turn "1,3-5" into zero-based indices; None when the expression is invalid."""
    indices: list[int] = []
    for part in expression.replace(" ", "").split(","):
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                start, end = int(start_s), int(end_s)
            else:
                start = end = int(part)
        except ValueError:
            return None
        if start < 1 or end > count or start > end:
            return None
        for i in range(start - 1, end):
            if i not in indices:
                indices.append(i)
    return indices or None


def select_items(
    candidates: Iterable[T],
    render: Callable[[T], SelectorItem],
    multi: bool = True,
    select_all: bool = False,
) -> list[T] | None:
    """Let the user choose from candidates.

    Returns the chosen subset, an empty list when there was nothing to choose
    from, or None when the user aborted.
    """
    entries: list[tuple[T, SelectorItem]] = []
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", width=4)
    table.add_column("Change")
    for candidate in candidates:
        item = render(candidate)
        entries.append((candidate, item))
        table.add_row(str(len(entries)), escape(item.display_text))

    if not entries:
        return []
    if len(entries) == 1 or (select_all and multi):
        return [candidate for candidate, _ in entries]

    console.print(table)
    hint = "e.g. 1,3-4 or all" if multi else "a single number"
    while True:
        answer = click.prompt(f"Select change(s) ({hint}; ?N to preview, q to abort)").strip().lower()
        if answer in ("q", "quit"):
            return None
        if answer.startswith("?"):
            chosen = parse_selection(answer[1:], len(entries))
            if chosen and len(chosen) == 1:
                console.rule(escape(entries[chosen[0]][1].display_text))
                console.print(entries[chosen[0]][1].preview_text, markup=False, highlight=False)
                console.rule()
            else:
                console.print("[yellow]Preview takes one row number, e.g. ?2[/yellow]")
            continue
        if answer == "all" and multi:
            return [candidate for candidate, _ in entries]
        chosen = parse_selection(answer, len(entries))
        if chosen is None or (not multi and len(chosen) != 1):
            console.print(f"[yellow]Invalid selection {answer!r}.[/yellow]")
            continue
        return [entries[i][0] for i in chosen]
