"""Shared fixtures: fake proc trees built from symlinks."""

import os
from pathlib import Path

import pytest

from pylsfd.models import NAMESPACE_ASSOCIATIONS


class FakeProc:
    """Builds ``<root>/<pid>/...`` entries that look like a proc filesystem."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "proc"
        self.root.mkdir()
        self.data = tmp_path / "data"
        self.data.mkdir()

    def target(self, name: str, content: str = "") -> str:
        """Create a regular file under the data directory and return its path."""
        path = self.data / name
        path.write_text(content)
        return str(path)

    def add(
        self,
        pid: int,
        comm: str | None = "cmd",
        cwd: str | None = None,
        exe: str | None = None,
        root: str | None = "/",
        namespaces: bool = False,
        fds: dict | None = None,
        fd_dir: bool = True,
    ) -> Path:
        """
        Add a process directory.

        Args:
            comm: Command name; None leaves out the comm file.
            cwd/exe/root: Link targets; None leaves the link out.
            namespaces: Create an ns/ directory with a link per namespace.
            fds: Map of descriptor name to link target.
            fd_dir: False leaves out the fd/ directory entirely.
        """
        proc_dir = self.root / str(pid)
        proc_dir.mkdir()
        if comm is not None:
            (proc_dir / "comm").write_text(comm + "\n")
        if cwd is None:
            cwd = str(self.data)
        os.symlink(cwd, proc_dir / "cwd")
        if exe is not None:
            os.symlink(exe, proc_dir / "exe")
        if root is not None:
            os.symlink(root, proc_dir / "root")
        if namespaces:
            ns_dir = proc_dir / "ns"
            ns_dir.mkdir()
            for assoc in NAMESPACE_ASSOCIATIONS:
                os.symlink(self.target(f"ns-{assoc.entry_name}"), ns_dir / assoc.entry_name)
        if fd_dir:
            fd_path = proc_dir / "fd"
            fd_path.mkdir()
            for name, target in (fds or {}).items():
                os.symlink(target, fd_path / str(name))
        return proc_dir


@pytest.fixture
def fake_proc(tmp_path):
    """An empty fake proc tree."""
    return FakeProc(tmp_path)
