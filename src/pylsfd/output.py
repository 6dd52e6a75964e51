"""Table output: human-readable, raw and JSON."""

import json
from collections.abc import Sequence
from typing import TextIO

from pylsfd.columns import COLUMN_INFO, Column
from pylsfd.kinds import Cell

TABLE_NAME = "lsfd"


def format_cell(value: Cell) -> str:
    """Text form of a cell; empty for missing values."""
    return "" if value is None else str(value)


def printable(text: str) -> str:
    """
    Make `text` safe to encode as UTF-8.

    Names read from the kernel carry undecodable bytes as surrogate
    escapes; those bytes are written as \\xHH.
    """
    try:
        raw = text.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        return text.encode("utf-8", "backslashreplace").decode("utf-8")
    return raw.decode("utf-8", "backslashreplace")


def raw_escape(text: str) -> str:
    """Escape blanks, backslashes and non-printable characters as \\xHH."""
    out = []
    for ch in text:
        if ch == " " or ch == "\\" or not ch.isprintable():
            out.extend(f"\\x{byte:02x}" for byte in ch.encode("utf-8", "surrogateescape"))
        else:
            out.append(ch)
    return "".join(out)


def _human_lines(
    columns: Sequence[Column], rows: Sequence[Sequence[Cell]], headings: bool
) -> list[str]:
    infos = [COLUMN_INFO[column] for column in columns]
    text_rows = [[printable(format_cell(value)) for value in row] for row in rows]
    if headings:
        text_rows.insert(0, [info.name for info in infos])

    widths = [0] * len(columns)
    for row in text_rows:
        for i, text in enumerate(row):
            widths[i] = max(widths[i], len(text))

    lines = []
    for row in text_rows:
        cells = [
            text.rjust(widths[i]) if infos[i].right else text.ljust(widths[i])
            for i, text in enumerate(row)
        ]
        lines.append(" ".join(cells).rstrip())
    return lines


def _raw_lines(
    columns: Sequence[Column], rows: Sequence[Sequence[Cell]], headings: bool
) -> list[str]:
    lines = []
    if headings:
        lines.append(" ".join(COLUMN_INFO[column].name for column in columns))
    for row in rows:
        lines.append(" ".join(raw_escape(format_cell(value)) for value in row))
    return lines


def _json_value(number: bool, value: Cell) -> str:
    if number:
        return json.dumps(value if isinstance(value, int) else None)
    return json.dumps(None if value is None else str(value))


def _json_document(columns: Sequence[Column], rows: Sequence[Sequence[Cell]]) -> str:
    """
    JSON table with one member per selected column.

    Records are written from ordered pairs so a repeated column keeps
    every occurrence, as in the table formats.
    """
    infos = [COLUMN_INFO[column] for column in columns]
    if not rows:
        return "{\n" + f"  {json.dumps(TABLE_NAME)}: []\n" + "}"
    records = []
    for row in rows:
        members = [
            f"      {json.dumps(info.name.lower())}: {_json_value(info.json_number, value)}"
            for info, value in zip(infos, row)
        ]
        records.append("    {\n" + ",\n".join(members) + "\n    }")
    return "{\n" + f"  {json.dumps(TABLE_NAME)}: [\n" + ",\n".join(records) + "\n  ]\n}"


def write_table(
    out: TextIO,
    columns: Sequence[Column],
    rows: Sequence[Sequence[Cell]],
    *,
    noheadings: bool = False,
    raw: bool = False,
    json_output: bool = False,
) -> None:
    """
    Write rows to `out`.

    The whole document is formatted before anything is written. JSON takes
    precedence over raw; headings do not apply to JSON.
    """
    if json_output:
        document = _json_document(columns, rows) + "\n"
    else:
        if raw:
            lines = _raw_lines(columns, rows, not noheadings)
        else:
            lines = _human_lines(columns, rows, not noheadings)
        document = "".join(line + "\n" for line in lines)
    out.write(document)
