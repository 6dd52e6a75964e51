"""Tests for the interactive snapshot viewer."""

import pytest

from pylsfd.app import FileTable, SnapshotApp, sort_key_for
from pylsfd.columns import Column

COLUMNS = [Column.COMMAND, Column.PROCESS_ID, Column.NAME]
ROWS = [
    ["sshd", 900, "/dev/null"],
    ["bash", 12, "/home/user"],
    ["init", 1, "/"],
]


def test_sort_key_numeric_columns():
    """Test numeric columns sort as numbers with blanks last."""
    key = sort_key_for(Column.PROCESS_ID)

    assert sorted([900, None, 12, 1], key=key) == [1, 12, 900, None]


def test_sort_key_text_columns():
    """Test text columns sort case-insensitively."""
    key = sort_key_for(Column.COMMAND)

    assert sorted(["b", "A", "c"], key=key) == ["A", "b", "c"]


@pytest.mark.asyncio
async def test_app_creation():
    """Test SnapshotApp can be instantiated."""
    app = SnapshotApp(COLUMNS, ROWS)
    assert app.title == "pylsfd"
    assert app.sub_title == "Open files snapshot"


@pytest.mark.asyncio
async def test_app_compose():
    """Test SnapshotApp composes the summary and the table."""
    app = SnapshotApp(COLUMNS, ROWS)
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#summary") is not None
        table = pilot.app.query_one("#file-table")
        assert table.row_count == 3
        assert len(table.columns) == 3


@pytest.mark.asyncio
async def test_app_duplicate_columns():
    """Test repeated columns get their own table columns."""
    app = SnapshotApp([Column.NAME, Column.NAME], [["/a", "/a"]])
    async with app.run_test() as pilot:
        assert len(pilot.app.query_one("#file-table").columns) == 2


@pytest.mark.asyncio
async def test_app_quit_binding():
    """Test that 'q' binding triggers quit."""
    app = SnapshotApp(COLUMNS, ROWS)
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert pilot.app._exit


@pytest.mark.asyncio
async def test_app_sort_binding():
    """Test that 's' cycles the sort column."""
    app = SnapshotApp(COLUMNS, ROWS)
    async with app.run_test() as pilot:
        file_table = pilot.app.query_one(FileTable)
        assert file_table.sort_column is None

        await pilot.press("s")

        assert file_table.sort_column is Column.COMMAND


@pytest.mark.asyncio
async def test_file_table_cycle_sort():
    """Test FileTable cycles through every column and back to discovery order."""
    app = SnapshotApp(COLUMNS, ROWS)
    async with app.run_test() as pilot:
        file_table = pilot.app.query_one(FileTable)

        assert file_table.cycle_sort() is Column.COMMAND
        assert [row[0] for row in file_table.sorted_rows()] == ["bash", "init", "sshd"]

        assert file_table.cycle_sort() is Column.PROCESS_ID
        assert [row[1] for row in file_table.sorted_rows()] == [1, 12, 900]

        assert file_table.cycle_sort() is Column.NAME
        assert file_table.cycle_sort() is None
        assert file_table.sorted_rows() == ROWS
        assert file_table.row_count == 3


@pytest.mark.asyncio
async def test_empty_snapshot():
    """Test the viewer opens with no rows."""
    app = SnapshotApp(COLUMNS, [])
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#file-table").row_count == 0
