"""Per-process collection of open files."""

import logging
import os
from collections.abc import Callable, Iterable

import psutil

from pylsfd.errors import CommandNameUnavailable
from pylsfd.kinds import resolve_file
from pylsfd.models import (
    CLASSICAL_ASSOCIATIONS,
    NAMESPACE_ASSOCIATIONS,
    Association,
    File,
    Process,
)

logger = logging.getLogger(__name__)

DEFAULT_PROC_ROOT = "/proc"

CommandLookup = Callable[[int], str | None]
UidLookup = Callable[[int], int]


def psutil_command_name(pid: int) -> str | None:
    """Command name of `pid` via psutil, or None if it cannot be read."""
    try:
        return psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return None


def psutil_uid(pid: int) -> int:
    """Real uid of `pid` via psutil, or -1 if it cannot be read."""
    try:
        return psutil.Process(pid).uids().real
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return -1


def procfs_command_name(proc_root: str) -> CommandLookup:
    """Command-name lookup reading ``<proc_root>/<pid>/comm``."""

    def lookup(pid: int) -> str | None:
        try:
            with open(os.path.join(proc_root, str(pid), "comm"), encoding="utf-8") as f:
                return f.read().rstrip("\n")
        except OSError:
            return None

    return lookup


def procfs_uid(proc_root: str) -> UidLookup:
    """Uid lookup using the owner of ``<proc_root>/<pid>``."""

    def lookup(pid: int) -> int:
        try:
            return os.stat(os.path.join(proc_root, str(pid))).st_uid
        except OSError:
            return -1

    return lookup


def default_uid(proc_root: str) -> UidLookup:
    """Uid lookup trying psutil first, then the owner of ``<proc_root>/<pid>``."""
    from_procfs = procfs_uid(proc_root)

    def lookup(pid: int) -> int:
        uid = psutil_uid(pid)
        return uid if uid >= 0 else from_procfs(pid)

    return lookup


class ProcessEnricher:
    """
    Fills a Process with the files it holds.

    Files are appended in a fixed order: cwd, exe and root, then namespace
    handles, then the descriptor table. Anything that cannot be stat'ed or
    read (process exited, permission denied) is skipped. Only a missing
    command name is fatal.
    """

    def __init__(
        self,
        proc_root: str = DEFAULT_PROC_ROOT,
        command_lookup: CommandLookup | None = None,
        uid_lookup: UidLookup | None = None,
    ) -> None:
        """
        Initialize the ProcessEnricher.

        Args:
            proc_root: Mount point of the proc filesystem.
            command_lookup: Returns the command name of a pid, or None.
                Defaults to psutil for /proc and to the comm file otherwise.
            uid_lookup: Returns the owner uid of a pid, or -1. Defaults to
                psutil, falling back to the owner of the pid directory.
        """
        self._proc_root = proc_root
        use_psutil = proc_root == DEFAULT_PROC_ROOT
        if command_lookup is None:
            command_lookup = psutil_command_name if use_psutil else procfs_command_name(proc_root)
        if uid_lookup is None:
            uid_lookup = default_uid(proc_root) if use_psutil else procfs_uid(proc_root)
        self._command_lookup = command_lookup
        self._uid_lookup = uid_lookup

    @property
    def proc_root(self) -> str:
        """Mount point of the proc filesystem being read."""
        return self._proc_root

    def enrich(self, pid: int) -> Process:
        """Create and fill a Process for `pid`."""
        proc = Process(pid=pid)
        self.fill(proc)
        return proc

    def fill(self, proc: Process) -> None:
        """Fill an existing process stub in place."""
        command = self._command_lookup(proc.pid)
        if command is None:
            raise CommandNameUnavailable(proc.pid)
        proc.command = command
        proc.uid = self._uid_lookup(proc.pid)

        proc_dir = os.path.join(self._proc_root, str(proc.pid))
        self._collect_fixed(proc, proc_dir, CLASSICAL_ASSOCIATIONS)
        self._collect_fixed(proc, os.path.join(proc_dir, "ns"), NAMESPACE_ASSOCIATIONS)
        self._collect_descriptors(proc, os.path.join(proc_dir, "fd"))

    def _collect_fixed(
        self, proc: Process, directory: str, associations: Iterable[Association]
    ) -> None:
        for assoc in associations:
            file = self._collect_file(proc, os.path.join(directory, assoc.entry_name), assoc)
            if file is not None:
                proc.add_file(file)

    def _collect_descriptors(self, proc: Process, fd_dir: str) -> None:
        try:
            entries = os.listdir(fd_dir)
        except OSError as e:
            logger.debug("pid %d: cannot read %s: %s", proc.pid, fd_dir, e.strerror or e)
            return

        numbers = sorted(int(name) for name in entries if name.isascii() and name.isdigit())
        for fd in numbers:
            file = self._collect_file(proc, os.path.join(fd_dir, str(fd)), fd)
            if file is not None:
                proc.add_file(file)

    def _collect_file(self, proc: Process, path: str, association: int) -> File | None:
        """Stat and read the link at `path`; None if either fails."""
        try:
            st = os.stat(path)
            target = os.readlink(path)
        except OSError as e:
            logger.debug("pid %d: skipping %s: %s", proc.pid, path, e.strerror or e)
            return None
        return resolve_file(st, target, association)
