"""Column dispatch: turn classified files into table rows."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from pylsfd.columns import Column
from pylsfd.idcache import IdCache
from pylsfd.kinds import DECLINED, Cell, kind_chain
from pylsfd.models import File, Process


@dataclass(slots=True)
class RenderContext:
    """Lookup state shared by every cell rendered in one run."""

    idcache: IdCache = field(default_factory=IdCache)


def render_cell(file: File, column: Column, ctx: RenderContext) -> Cell:
    """
    Produce the value of `column` for `file`.

    Walks the file's kind chain until a kind answers. The generic kind at
    the end of every chain answers all columns, so this never fails for a
    known column.
    """
    for kind in kind_chain(file.kind):
        value = kind.fill_column(file, column, ctx)
        if value is not DECLINED:
            return value
    raise LookupError(f"no kind answered column {column.value} for {file.kind!r}")


def render_rows(
    processes: Iterable[Process],
    columns: Sequence[Column],
    ctx: RenderContext,
) -> list[list[Cell]]:
    """One row per file of every process, cells in `columns` order."""
    return [
        [render_cell(file, column, ctx) for column in columns]
        for proc in processes
        for file in proc.files
    ]
