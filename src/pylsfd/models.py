"""Data models for pylsfd."""

import os
import stat
from dataclasses import dataclass, field
from enum import IntEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pylsfd.kinds import FileKind


class Association(IntEnum):
    """Fixed (non-descriptor) associations between a file and a process.

    Values are negative so they never collide with descriptor numbers.
    """

    CWD = -1
    EXE = -2
    ROOT = -3
    NS_CGROUP = -4
    NS_IPC = -5
    NS_MNT = -6
    NS_NET = -7
    NS_PID = -8
    NS_PID4C = -9
    NS_TIME = -10
    NS_TIME4C = -11
    NS_USER = -12
    NS_UTS = -13

    @property
    def entry_name(self) -> str:
        """Name of the /proc entry (and the ASSOCIATION cell) for this role."""
        return _ENTRY_NAMES[self]


_ENTRY_NAMES = {
    Association.CWD: "cwd",
    Association.EXE: "exe",
    Association.ROOT: "root",
    Association.NS_CGROUP: "cgroup",
    Association.NS_IPC: "ipc",
    Association.NS_MNT: "mnt",
    Association.NS_NET: "net",
    Association.NS_PID: "pid",
    Association.NS_PID4C: "pid_for_children",
    Association.NS_TIME: "time",
    Association.NS_TIME4C: "time_for_children",
    Association.NS_USER: "user",
    Association.NS_UTS: "uts",
}

CLASSICAL_ASSOCIATIONS = (Association.CWD, Association.EXE, Association.ROOT)

NAMESPACE_ASSOCIATIONS = (
    Association.NS_CGROUP,
    Association.NS_IPC,
    Association.NS_MNT,
    Association.NS_NET,
    Association.NS_PID,
    Association.NS_PID4C,
    Association.NS_TIME,
    Association.NS_TIME4C,
    Association.NS_USER,
    Association.NS_UTS,
)


@dataclass(slots=True, frozen=True)
class StatInfo:
    """The parts of a stat result needed for rendering."""

    dev_major: int
    dev_minor: int
    rdev_major: int
    rdev_minor: int
    inode: int
    mode: int
    size: int

    @classmethod
    def from_stat(cls, st: Any) -> "StatInfo":
        """Build from an ``os.stat_result`` (or anything shaped like one)."""
        rdev = getattr(st, "st_rdev", 0)
        return cls(
            dev_major=os.major(st.st_dev),
            dev_minor=os.minor(st.st_dev),
            rdev_major=os.major(rdev),
            rdev_minor=os.minor(rdev),
            inode=st.st_ino,
            mode=st.st_mode,
            size=st.st_size,
        )

    @property
    def file_type(self) -> int:
        """File-type bits of the mode."""
        return stat.S_IFMT(self.mode)


@dataclass(slots=True, eq=False)
class File:
    """A file held by a process, either through a descriptor or a fixed role."""

    association: int  # descriptor number (>= 0) or an Association value
    name: str
    stat: StatInfo
    kind: "FileKind"
    process: "Process | None" = field(default=None, repr=False)
    cache: dict[str, str] = field(default_factory=dict, repr=False)
    released: bool = field(default=False, repr=False)

    @property
    def is_descriptor(self) -> bool:
        """True if the file was found in the descriptor table."""
        return self.association >= 0


@dataclass(slots=True, eq=False)
class Process:
    """A process and the files it holds, in discovery order."""

    pid: int
    command: str | None = None
    uid: int = -1
    files: list[File] = field(default_factory=list)

    def add_file(self, file: File) -> None:
        """Append a file and point its back-reference at this process."""
        file.process = self
        self.files.append(file)
