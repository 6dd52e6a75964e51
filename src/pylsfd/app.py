"""pylsfd - interactive snapshot viewer."""

from collections.abc import Sequence

from textual.app import App, ComposeResult
from textual.containers import Container
from textual.css.query import NoMatches
from textual.widgets import DataTable, Footer, Static

from pylsfd.columns import COLUMN_INFO, Column
from pylsfd.kinds import Cell
from pylsfd.output import format_cell, printable


def sort_key_for(column: Column):
    """Key function ordering rows by one cell; numeric columns sort as numbers."""
    if COLUMN_INFO[column].json_number:
        return lambda value: (value is None, value if isinstance(value, int) else 0)
    return lambda value: format_cell(value).lower()


class SummaryBar(Static):
    """One-line summary of the snapshot."""

    DEFAULT_CSS = """
    SummaryBar {
        height: 1;
        padding: 0 1;
        background: $surface;
    }
    """


class FileTable(Container):
    """Container for the file data table."""

    DEFAULT_CSS = """
    FileTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Sequence[Sequence[Cell]],
        *args,
        **kwargs,
    ) -> None:
        """Initialize FileTable."""
        super().__init__(*args, **kwargs)
        self._table_columns = list(columns)
        self._table_rows = [list(row) for row in rows]
        self._sort_index: int | None = None

    @property
    def sort_column(self) -> Column | None:
        """Column the rows are currently sorted by, or None for discovery order."""
        if self._sort_index is None:
            return None
        return self._table_columns[self._sort_index]

    @property
    def row_count(self) -> int:
        """Number of rows shown."""
        return len(self._table_rows)

    def cycle_sort(self) -> Column | None:
        """Sort by the next column; after the last, go back to discovery order."""
        if not self._table_columns:
            return None
        if self._sort_index is None:
            self._sort_index = 0
        elif self._sort_index + 1 < len(self._table_columns):
            self._sort_index += 1
        else:
            self._sort_index = None
        self._refresh_rows()
        return self.sort_column

    def compose(self) -> ComposeResult:
        """Compose the file table."""
        yield DataTable(id="file-table")

    def on_mount(self) -> None:
        """Add columns and rows when mounted."""
        table = self.query_one("#file-table", DataTable)
        table.cursor_type = "row"
        # Columns may repeat, so keys are positional.
        for i, column in enumerate(self._table_columns):
            table.add_column(COLUMN_INFO[column].name, key=f"col-{i}")
        self._refresh_rows()

    def sorted_rows(self) -> list[list[Cell]]:
        """Rows in the current sort order."""
        if self._sort_index is None:
            return self._table_rows
        index = self._sort_index
        key = sort_key_for(self._table_columns[index])
        return sorted(self._table_rows, key=lambda row: key(row[index]))

    def _refresh_rows(self) -> None:
        try:
            table = self.query_one("#file-table", DataTable)
        except NoMatches:
            return  # Not mounted yet
        table.clear()
        for row in self.sorted_rows():
            table.add_row(*(printable(format_cell(value)) for value in row))


class SnapshotApp(App):
    """Browse one collected snapshot."""

    TITLE = "pylsfd"
    SUB_TITLE = "Open files snapshot"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("s", "sort", "Sort"),
    ]

    def __init__(self, columns: Sequence[Column], rows: Sequence[Sequence[Cell]]) -> None:
        """Initialize the SnapshotApp."""
        super().__init__()
        self._table_columns = list(columns)
        self._table_rows = rows

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield SummaryBar(f"{len(self._table_rows)} files", id="summary")
        yield FileTable(self._table_columns, self._table_rows)
        yield Footer()

    def action_sort(self) -> None:
        """Cycle the sort column."""
        table = self.query_one(FileTable)
        column = table.cycle_sort()
        label = column.value if column is not None else "none"
        self.notify(f"Sort: {label}")
