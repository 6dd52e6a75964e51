"""
File classification for pylsfd.

Every file is tagged with a kind. A kind may answer a column itself or
decline, in which case its fallback kind is asked; the chain always ends
at GENERIC, which answers every column. A kind may also keep content of
its own in the file cache: it is prepared when the file is resolved and
released, from the concrete kind up, when the file is freed.
"""

import stat
from typing import TYPE_CHECKING, Any

from pylsfd.columns import Column
from pylsfd.models import Association, File, StatInfo

if TYPE_CHECKING:
    from pylsfd.render import RenderContext

Cell = str | int | None

# Returned by fill_column when a kind has nothing to say about a column.
DECLINED: Any = object()

_TYPE_NAMES = {
    stat.S_IFDIR: "DIR",
    stat.S_IFIFO: "FIFO",
    stat.S_IFSOCK: "SOCK",
    stat.S_IFLNK: "LINK",
    stat.S_IFREG: "REG",
    stat.S_IFCHR: "CHR",
    stat.S_IFBLK: "BLK",
}


def type_name(mode: int) -> str:
    """Short type name for the file-type bits of a mode."""
    return _TYPE_NAMES.get(stat.S_IFMT(mode), "UNKN")


class FileKind:
    """Base for kinds: prepares nothing, declines every column, releases nothing."""

    name = "file"
    fallback: "FileKind | None" = None

    def prepare(self, file: File) -> None:
        pass

    def fill_column(self, file: File, column: Column, ctx: "RenderContext") -> Cell:
        return DECLINED

    def release(self, file: File) -> None:
        pass

    def __repr__(self) -> str:
        return f"<FileKind {self.name}>"


class GenericKind(FileKind):
    """Fallback kind; answers every column."""

    name = "generic"

    def fill_column(self, file: File, column: Column, ctx: "RenderContext") -> Cell:
        proc = file.process
        st = file.stat
        match column:
            case Column.ASSOCIATION:
                if file.is_descriptor:
                    return str(file.association)
                return Association(file.association).entry_name
            case Column.COMMAND:
                return proc.command if proc is not None else ""
            case Column.DEVICE:
                return f"{st.dev_major}:{st.dev_minor}"
            case Column.FILE_DESCRIPTOR:
                return file.association if file.is_descriptor else None
            case Column.INODE:
                return st.inode
            case Column.NAME:
                return file.name
            case Column.PROCESS_ID:
                return proc.pid if proc is not None else None
            case Column.TYPE:
                return type_name(st.mode)
            case Column.USER_ID:
                return proc.uid if proc is not None and proc.uid >= 0 else None
            case Column.USER:
                if proc is None or proc.uid < 0:
                    return ""
                return ctx.idcache.username(proc.uid)
        return ""


class RegularKind(FileKind):
    """Regular files."""

    name = "regular"

    def fill_column(self, file: File, column: Column, ctx: "RenderContext") -> Cell:
        if column is Column.TYPE:
            return "REG"
        return DECLINED


class _DeviceKind(FileKind):
    """Device nodes: DEVICE shows the device the node refers to."""

    type_label = "UNKN"

    @property
    def _device_key(self) -> str:
        return f"{self.name}.device"

    def prepare(self, file: File) -> None:
        file.cache[self._device_key] = f"{file.stat.rdev_major}:{file.stat.rdev_minor}"

    def fill_column(self, file: File, column: Column, ctx: "RenderContext") -> Cell:
        if column is Column.TYPE:
            return self.type_label
        if column is Column.DEVICE:
            return file.cache[self._device_key]
        return DECLINED

    def release(self, file: File) -> None:
        file.cache.pop(self._device_key, None)


class CharDeviceKind(_DeviceKind):
    """Character devices."""

    name = "cdev"
    type_label = "CHR"


class BlockDeviceKind(_DeviceKind):
    """Block devices."""

    name = "bdev"
    type_label = "BLK"


GENERIC = GenericKind()
REGULAR = RegularKind()
CHAR_DEVICE = CharDeviceKind()
BLOCK_DEVICE = BlockDeviceKind()

REGULAR.fallback = GENERIC
CHAR_DEVICE.fallback = GENERIC
BLOCK_DEVICE.fallback = GENERIC

_KIND_BY_TYPE: dict[int, FileKind] = {
    stat.S_IFREG: REGULAR,
    stat.S_IFCHR: CHAR_DEVICE,
    stat.S_IFBLK: BLOCK_DEVICE,
}


def kind_chain(kind: FileKind) -> list[FileKind]:
    """Kinds to consult for a file of `kind`, most specific first."""
    chain = []
    current: FileKind | None = kind
    while current is not None:
        chain.append(current)
        current = current.fallback
    return chain


def classify(st: StatInfo) -> FileKind:
    """Select the most specific kind for a stat result."""
    return _KIND_BY_TYPE.get(st.file_type, GENERIC)


def resolve_file(st: Any, name: str, association: int) -> File:
    """
    Build a File for a stat result and resolved link target.

    Kind-specific content is prepared here, generic kind first, so files
    are only read while rendering.
    """
    info = st if isinstance(st, StatInfo) else StatInfo.from_stat(st)
    file = File(association=association, name=name, stat=info, kind=classify(info))
    for kind in reversed(kind_chain(file.kind)):
        kind.prepare(file)
    return file


def release_file(file: File) -> None:
    """Release kind-specific resources of a file, once."""
    if file.released:
        return
    for kind in kind_chain(file.kind):
        kind.release(file)
    file.process = None
    file.released = True
