from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping

from .cluster import ClusterBackend, parse_replicas
from .errors import LifecycleError, SwarmClientError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, str], None]


def _notify(on_progress: ProgressCallback | None, service: str, event: str) -> None:
    logger.debug("service %s %s", service, event)
    if on_progress:
        on_progress(service, event)


def stop_services(
        backend: ClusterBackend,
        services: Iterable[str],
        *,
        on_progress: ProgressCallback | None = None,
) -> None:
    for service in services:
        try:
            backend.set_scale(service, 0)
        except SwarmClientError as exc:
            raise LifecycleError(service, "stopping", str(exc)) from exc
        _notify(on_progress, service, "stopped")


def start_services(
        backend: ClusterBackend,
        snapshot: Mapping[str, str | int],
        *,
        on_progress: ProgressCallback | None = None,
) -> None:
    for service, value in snapshot.items():
        try:
            replicas = parse_replicas(value)
        except ValueError as exc:
            raise LifecycleError(service, "starting", str(exc)) from exc
        try:
            backend.set_scale(service, replicas)
        except SwarmClientError as exc:
            raise LifecycleError(service, "starting", str(exc)) from exc
        _notify(on_progress, service, "started")


def restart_services(
        backend: ClusterBackend,
        services: Iterable[str],
        *,
        on_progress: ProgressCallback | None = None,
) -> None:
    """Restart services one by one at the scale each had before the restart.

    Per service: read scale, scale to zero, scale back. The first failure
    stops the run; services already handled stay restarted.
    """
    for service in services:
        try:
            scale = backend.get_scale(service)
            # validate before stopping so a bad capture leaves the service up
            parse_replicas(scale)
        except (SwarmClientError, ValueError) as exc:
            raise LifecycleError(service, "restarting", str(exc)) from exc
        try:
            stop_services(backend, [service], on_progress=on_progress)
            start_services(backend, {service: scale}, on_progress=on_progress)
        except LifecycleError as exc:
            raise LifecycleError(service, "restarting", str(exc)) from exc
        _notify(on_progress, service, "restarted")
