from __future__ import annotations

from swarmsvc_client import ClusterBackend, DockerApiBackend, DockerCliBackend
from swarmsvc_client.config_types import ClientConfig

from .compat import cli_version
from .config import AppConfig, normalize_backend


def make_backend(cfg: AppConfig) -> ClusterBackend:
    client_cfg = ClientConfig(
        docker_bin=cfg.docker_bin,
        docker_socket=cfg.docker_socket,
        timeout_s=cfg.timeout_s,
        detach=cfg.detach,
        client_version=cli_version(),
    )
    if normalize_backend(cfg.backend) == "api":
        return DockerApiBackend(client_cfg)
    return DockerCliBackend(client_cfg)
