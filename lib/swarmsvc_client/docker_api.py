from __future__ import annotations

import copy
from typing import Any
from urllib.parse import quote

import httpx

from .config_types import ClientConfig
from .errors import ApiError
from .transport import Transport

NO_VALUE = "<no value>"


def _service_name(item: dict[str, Any]) -> str:
    spec = item.get("Spec") if isinstance(item, dict) else None
    return str((spec or {}).get("Name") or "").strip()


def _replicated_replicas(item: dict[str, Any]) -> int | None:
    mode = (item.get("Spec") or {}).get("Mode") or {}
    replicated = mode.get("Replicated")
    if not isinstance(replicated, dict):
        return None
    try:
        return int(replicated.get("Replicas") or 0)
    except (TypeError, ValueError):
        return None


def _replica_summary(item: dict[str, Any]) -> str:
    status = item.get("ServiceStatus")
    if isinstance(status, dict) and "DesiredTasks" in status:
        return f"{int(status.get('RunningTasks') or 0)}/{int(status.get('DesiredTasks') or 0)}"
    replicas = _replicated_replicas(item)
    return str(replicas) if replicas is not None else NO_VALUE


class DockerApiBackend:
    """Cluster backend that talks to the Docker Engine API directly."""

    def __init__(self, cfg: ClientConfig | None = None, *, transport: httpx.BaseTransport | None = None):
        self._t = Transport(cfg or ClientConfig(), transport=transport)

    def close(self) -> None:
        self._t.close()

    def _services(self) -> list[dict[str, Any]]:
        data = self._t.request("GET", "/services", params={"status": "true"})
        items = [item for item in data or [] if isinstance(item, dict) and _service_name(item)]
        # match the name ordering of `docker service ls`
        return sorted(items, key=_service_name)

    def _inspect(self, service: str) -> dict[str, Any]:
        data = self._t.request("GET", f"/services/{quote(service, safe='')}")
        if not isinstance(data, dict):
            raise ApiError(500, f"inspect of service '{service}' returned no object", None)
        return data

    def list_deployed_services(self) -> list[str]:
        return [_service_name(item) for item in self._services()]

    def get_scale(self, service: str) -> str:
        replicas = _replicated_replicas(self._inspect(service))
        return str(replicas) if replicas is not None else NO_VALUE

    def set_scale(self, service: str, replicas: int) -> None:
        current = self._inspect(service)
        if _replicated_replicas(current) is None:
            raise ApiError(400, f"scale can only be used with replicated mode: {service}", None)
        spec = copy.deepcopy(current.get("Spec") or {})
        spec["Mode"] = {"Replicated": {"Replicas": int(replicas)}}
        version = int((current.get("Version") or {}).get("Index") or 0)
        service_id = str(current.get("ID") or service)
        self._t.request(
            "POST",
            f"/services/{quote(service_id, safe='')}/update",
            params={"version": str(version)},
            json_body=spec,
        )

    def list_scale_snapshot(self) -> list[tuple[str, str]]:
        return [(_service_name(item), _replica_summary(item)) for item in self._services()]
