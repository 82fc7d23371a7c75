from __future__ import annotations
from dataclasses import dataclass

DEFAULT_DOCKER_SOCKET = "/var/run/docker.sock"


@dataclass(frozen=True)
class ClientConfig:
    docker_bin: str = "docker"
    docker_socket: str = DEFAULT_DOCKER_SOCKET
    timeout_s: float = 30.0
    detach: bool = False
    client_version: str | None = None
