"""Tests for the SnapshotCollector."""

import os

import pytest

from pylsfd.collector import Snapshot, SnapshotCollector, enumerate_pids
from pylsfd.columns import Column
from pylsfd.enricher import ProcessEnricher
from pylsfd.errors import CommandNameUnavailable, EnumerationError
from pylsfd.render import RenderContext, render_rows


@pytest.fixture
def populated(fake_proc):
    """A fake tree with a handful of processes."""
    log = fake_proc.target("log")
    for pid in (1, 20, 300, 4000, 50000):
        fake_proc.add(
            pid,
            comm=f"proc{pid}",
            exe=fake_proc.target(f"bin{pid}"),
            namespaces=pid % 2 == 0,
            fds={str(n): log for n in range(pid % 7)},
        )
    (fake_proc.root / "self").mkdir()
    (fake_proc.root / "meminfo").write_text("")
    return fake_proc


def collector_for(fake_proc, workers=1):
    return SnapshotCollector(ProcessEnricher(str(fake_proc.root)), workers=workers)


class TestEnumeratePids:
    """Tests for enumerate_pids()."""

    def test_fake_root(self, populated):
        """Test only numeric entries count as processes."""
        assert enumerate_pids(str(populated.root)) == [1, 20, 300, 4000, 50000]

    def test_unreadable_root(self, tmp_path):
        """Test a missing proc root is fatal."""
        with pytest.raises(EnumerationError):
            enumerate_pids(str(tmp_path / "missing"))

    def test_real_proc_includes_self(self):
        """Test psutil enumeration sees this process."""
        assert os.getpid() in enumerate_pids()


class TestSnapshotCollector:
    """Tests for SnapshotCollector.collect()."""

    def test_collect_all(self, populated):
        """Test every enumerated process appears once, in enumeration order."""
        snapshot = collector_for(populated).collect()

        assert [p.pid for p in snapshot.processes] == [1, 20, 300, 4000, 50000]
        assert all(p.command == f"proc{p.pid}" for p in snapshot.processes)
        assert snapshot.file_count == sum(len(p.files) for p in snapshot.processes)
        assert snapshot.elapsed_seconds >= 0

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_rows_independent_of_pool_size(self, populated, workers):
        """Test the rendered row set does not depend on the number of workers."""
        columns = list(Column)
        baseline = render_rows(collector_for(populated).collect().processes, columns, RenderContext())

        rows = render_rows(
            collector_for(populated, workers).collect().processes, columns, RenderContext()
        )

        assert sorted(map(repr, rows)) == sorted(map(repr, baseline))

    def test_explicit_pid_list(self, populated):
        """Test collect() can be limited to given pids."""
        snapshot = collector_for(populated).collect([300, 1])

        assert [p.pid for p in snapshot.processes] == [300, 1]

    def test_empty_process_list(self, fake_proc):
        """Test an empty tree gives an empty snapshot."""
        snapshot = collector_for(fake_proc, workers=4).collect()

        assert snapshot.processes == []
        assert snapshot.file_count == 0

    def test_missing_command_name_aborts(self, populated):
        """Test one process without a command name fails the whole collection."""
        populated.add(77, comm=None)

        with pytest.raises(CommandNameUnavailable):
            collector_for(populated, workers=2).collect()

    def test_invalid_pool_size(self):
        """Test the pool needs at least one worker."""
        with pytest.raises(ValueError):
            SnapshotCollector(workers=0)


def test_snapshot_release(populated):
    """Test release() frees every file and drops every process."""
    snapshot = collector_for(populated).collect()
    files = [f for p in snapshot.processes for f in p.files]

    snapshot.release()

    assert snapshot.processes == []
    assert all(f.released and f.process is None for f in files)


def test_empty_snapshot_release():
    """Test releasing an empty snapshot is harmless."""
    Snapshot().release()
