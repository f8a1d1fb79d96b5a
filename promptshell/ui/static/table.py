#!/usr/bin/env python3
# promptshell/ui/static/table.py
from __future__ import annotations

from itertools import zip_longest
from typing import List, Optional, Sequence

from promptshell.ui.utils import strip_ansi


def _visible_len(cell: str) -> int:
    return len(strip_ansi(cell))


def _column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    """Widest visible cell per column; short rows simply contribute nothing."""
    widths: List[int] = []
    for column in zip_longest(*rows, fillvalue=""):
        widths.append(max(_visible_len(cell) for cell in column))
    return widths


def format_table(
    rows: Sequence[Sequence[object]],
    headers: Optional[Sequence[object]] = None,
    *,
    padding: int = 1,
) -> str:
    """
    Render rows as aligned columns without borders.

    With `headers`, a dashed rule separates them from the body. Widths are
    measured without ANSI sequences so colored cells stay aligned.
    """
    body = [[str(cell) for cell in row] for row in rows]
    head = [str(title) for title in headers] if headers is not None else None
    widths = _column_widths(([head] if head else []) + body)
    separator = " " * (2 * padding)

    def _line(cells: Sequence[str]) -> str:
        padded = (cell + " " * (width - _visible_len(cell))
                  for cell, width in zip(cells, widths))
        return separator.join(padded).rstrip()

    out: List[str] = []
    if head is not None:
        out.append(_line(head))
        out.append(_line(["-" * width for width in widths]))
    out.extend(_line(cells) for cells in body)
    return "\n".join(out)
