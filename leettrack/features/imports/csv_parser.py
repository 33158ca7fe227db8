"""Lenient cell and line parsing for spreadsheet exports.

The weekly sheets are filled in by hand, so numeric cells carry all kinds of
noise: blanks, spreadsheet errors (``#VALUE!``), remarks such as
``Went home`` or ``Leave``, quotes, thousands separators and ``~``/``+``
decorations. Only the leading number of a cell is read, so ``"20 + 5"`` is
20. Anything that does not start with a number counts as 0.
"""

from __future__ import annotations

import csv
import io
import re
from typing import List, Sequence

_LEADING_INT = re.compile(r"^-?\d+")
_GROUPED_INT = re.compile(r"^-?\d{1,3}(?:,\d{3})+(?!\d)")
_EDGE_DECORATIONS = "\"'~+ \t"


def parse_number(cell) -> int:
    if cell is None:
        return 0
    if isinstance(cell, bool):
        return int(cell)
    if isinstance(cell, (int, float)):
        return int(cell)
    cleaned = str(cell).strip().strip(_EDGE_DECORATIONS)
    grouped = _GROUPED_INT.match(cleaned)
    if grouped:
        return int(grouped.group(0).replace(",", ""))
    match = _LEADING_INT.match(cleaned)
    return int(match.group(0)) if match else 0


def parse_numbers(cells: Sequence) -> List[int]:
    return [parse_number(c) for c in cells]


def read_rows(text: str, skip_header: bool = True) -> List[List[str]]:
    """Split CSV text into rows of stripped cells, dropping blank lines."""
    rows = [
        [cell.strip() for cell in row]
        for row in csv.reader(io.StringIO(text))
        if any(cell.strip() for cell in row)
    ]
    return rows[1:] if skip_header and rows else rows
