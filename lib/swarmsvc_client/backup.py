from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .cluster import ClusterBackend, parse_replicas
from .errors import BackupFormatError
from .lifecycle import ProgressCallback, start_services

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_FILENAME = "swarm-service-backup.txt"


def format_backup(pairs: Iterable[tuple[str, str]]) -> str:
    lines = [f"{name} {replicas}\n" for name, replicas in pairs if name and replicas]
    return "".join(lines)


def parse_backup(text: str) -> dict[str, str]:
    """Parse backup text into a snapshot.

    Each non-blank line must be ``<name> <replicas>``. A repeated name keeps
    its last value.
    """
    snapshot: dict[str, str] = {}
    for line_no, line in enumerate(text.splitlines(), start=1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) != 2:
            raise BackupFormatError(line_no, line, f"expected '<name> <replicas>', got {len(fields)} field(s)")
        name, replicas = fields
        try:
            parse_replicas(replicas)
        except ValueError as exc:
            raise BackupFormatError(line_no, line, str(exc)) from exc
        snapshot[name] = replicas
    return snapshot


class BackupStore:
    def __init__(self, path: str | Path = DEFAULT_BACKUP_FILENAME):
        self.path = Path(path)

    def backup(self, backend: ClusterBackend) -> dict[str, str]:
        pairs = backend.list_scale_snapshot()
        self.path.write_text(format_backup(pairs), encoding="utf-8")
        logger.debug("wrote %d service(s) to %s", len(pairs), self.path)
        return {name: replicas for name, replicas in pairs if name and replicas}

    def load(self) -> dict[str, str]:
        return parse_backup(self.path.read_text(encoding="utf-8"))

    def restore(
            self,
            backend: ClusterBackend,
            *,
            on_progress: ProgressCallback | None = None,
    ) -> dict[str, str]:
        snapshot = self.load()
        start_services(backend, snapshot, on_progress=on_progress)
        return snapshot
