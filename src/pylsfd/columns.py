"""Output column registry for pylsfd."""

from dataclasses import dataclass
from enum import Enum

from pylsfd.errors import UnknownColumnError


class Column(Enum):
    """Output columns, valued by their display name."""

    ASSOCIATION = "ASSOCIATION"
    COMMAND = "COMMAND"
    DEVICE = "DEVICE"
    FILE_DESCRIPTOR = "FILE-DESCRIPTOR"
    INODE = "INODE"
    NAME = "NAME"
    PROCESS_ID = "PROCESS-ID"
    TYPE = "TYPE"
    USER_ID = "USER-ID"
    USER = "USER"


@dataclass(slots=True, frozen=True)
class ColumnInfo:
    """Static description of an output column."""

    name: str
    width_hint: float
    right: bool
    json_number: bool
    help: str


COLUMN_INFO: dict[Column, ColumnInfo] = {
    Column.ASSOCIATION: ColumnInfo(
        "ASSOCIATION", 0, True, False, "association between file and process"
    ),
    Column.COMMAND: ColumnInfo(
        "COMMAND", 0, False, False, "command of the process opening the file"
    ),
    Column.DEVICE: ColumnInfo("DEVICE", 0, True, False, "device major and minor number"),
    Column.FILE_DESCRIPTOR: ColumnInfo(
        "FILE-DESCRIPTOR", 0, True, True, "file descriptor for the file"
    ),
    Column.INODE: ColumnInfo("INODE", 0, True, True, "inode number"),
    Column.NAME: ColumnInfo("NAME", 0, False, False, "name of the file"),
    Column.PROCESS_ID: ColumnInfo(
        "PROCESS-ID", 0, True, True, "PID of the process opening the file"
    ),
    Column.TYPE: ColumnInfo("TYPE", 0, True, False, "file type"),
    Column.USER_ID: ColumnInfo("USER-ID", 0, True, True, "user ID number"),
    Column.USER: ColumnInfo("USER", 0, True, False, "user of the process"),
}

DEFAULT_COLUMNS: tuple[Column, ...] = (
    Column.COMMAND,
    Column.PROCESS_ID,
    Column.USER,
    Column.ASSOCIATION,
    Column.TYPE,
    Column.DEVICE,
    Column.INODE,
    Column.NAME,
)


def column_by_name(name: str) -> Column:
    """Look up a column by its display name, ignoring case."""
    wanted = name.upper()
    for column in Column:
        if column.value == wanted:
            return column
    raise UnknownColumnError(name)


def parse_columns(arg: str) -> list[Column]:
    """
    Parse a comma-separated ``--output`` list.

    Order and duplicates are kept as given. Raises UnknownColumnError on the
    first name that is not a known column (including an empty name).
    """
    return [column_by_name(name.strip()) for name in arg.split(",")]


def columns_help() -> str:
    """Text block listing every column with its help string."""
    return "\n".join(f" {info.name:>15}  {info.help}" for info in COLUMN_INFO.values())
