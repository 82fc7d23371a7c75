"""Capability contract every cluster backend implements."""
from __future__ import annotations

from typing import Protocol


class ClusterBackend(Protocol):
    def list_deployed_services(self) -> list[str]:
        """Names of all deployed services, in listing order."""
        ...

    def get_scale(self, service: str) -> str:
        """Configured replica count of a service, as reported by the cluster."""
        ...

    def set_scale(self, service: str, replicas: int) -> None:
        ...

    def list_scale_snapshot(self) -> list[tuple[str, str]]:
        """(name, replica-summary) pairs from a single listing call."""
        ...

    def close(self) -> None:
        ...


def parse_replicas(value: str | int) -> int:
    """Turn a replica value such as ``"3"`` or ``"2/3"`` into a scale.

    Only the first ``/``-separated component counts.
    """
    if isinstance(value, int):
        replicas = value
    else:
        head = str(value).split("/", 1)[0].strip()
        if not (head.isascii() and head.isdigit()):
            raise ValueError(f"invalid replica count '{value}'")
        replicas = int(head)
    if replicas < 0:
        raise ValueError(f"invalid replica count '{value}'")
    return replicas


def parse_name_lines(output: str) -> list[str]:
    return [line.strip() for line in output.splitlines() if line.strip()]


def parse_snapshot_lines(output: str) -> list[tuple[str, str]]:
    pairs: list[tuple[str, str]] = []
    for line in output.splitlines():
        fields = line.split()
        if len(fields) < 2:
            continue
        # `docker service ls` may append "(max N per node)" after the summary
        pairs.append((fields[0], fields[1]))
    return pairs
