"""Snapshot collection: enumerate processes and enrich them in parallel."""

import logging
import os
import time
from collections.abc import Sequence
from dataclasses import dataclass, field

import psutil

from pylsfd.enricher import DEFAULT_PROC_ROOT, ProcessEnricher
from pylsfd.errors import EnumerationError
from pylsfd.kinds import release_file
from pylsfd.models import Process
from pylsfd.scheduler import WorkScheduler

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Snapshot:
    """All processes and their files as seen during one collection."""

    processes: list[Process] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    @property
    def file_count(self) -> int:
        """Total number of files across all processes."""
        return sum(len(proc.files) for proc in self.processes)

    def release(self) -> None:
        """Release every file, then drop every process."""
        for proc in self.processes:
            for file in proc.files:
                release_file(file)
            proc.files.clear()
        self.processes.clear()


def enumerate_pids(proc_root: str = DEFAULT_PROC_ROOT) -> list[int]:
    """
    List the pids of running processes.

    Uses psutil for the real /proc and a directory listing otherwise.
    Raises EnumerationError if the process list cannot be read.
    """
    if proc_root == DEFAULT_PROC_ROOT:
        try:
            return psutil.pids()
        except (OSError, psutil.Error) as e:
            raise EnumerationError(f"failed to open {proc_root}: {e}") from e

    try:
        entries = os.listdir(proc_root)
    except OSError as e:
        raise EnumerationError(f"failed to open {proc_root}: {e.strerror or e}") from e
    # No process has pid 0.
    return sorted(int(name) for name in entries if name.isdigit() and int(name) > 0)


class SnapshotCollector:
    """
    Builds a Snapshot of every process and the files it holds.

    The process list is fixed before any worker starts; a WorkScheduler
    then hands each process to exactly one worker for enrichment.
    """

    def __init__(
        self,
        enricher: ProcessEnricher | None = None,
        workers: int = 1,
    ) -> None:
        """
        Initialize the SnapshotCollector.

        Args:
            enricher: Fills each process with its files. Defaults to /proc.
            workers: Size of the worker pool. Default 1.
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self._enricher = enricher or ProcessEnricher()
        self._workers = workers

    @property
    def workers(self) -> int:
        """Size of the worker pool."""
        return self._workers

    def collect(self, pids: Sequence[int] | None = None) -> Snapshot:
        """
        Collect a snapshot.

        Args:
            pids: Processes to inspect. Defaults to every running process.
        """
        start = time.monotonic()
        if pids is None:
            pids = enumerate_pids(self._enricher.proc_root)
        processes = [Process(pid=pid) for pid in pids]

        scheduler: WorkScheduler[Process] = WorkScheduler(
            self._enricher.fill, workers=self._workers
        )
        scheduler.run(processes)

        snapshot = Snapshot(processes=processes, elapsed_seconds=time.monotonic() - start)
        logger.debug(
            "collected %d files from %d processes in %.3fs",
            snapshot.file_count,
            len(processes),
            snapshot.elapsed_seconds,
        )
        return snapshot
