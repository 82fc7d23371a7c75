from .backup import BackupStore
from .cluster import ClusterBackend, parse_replicas
from .docker_api import DockerApiBackend
from .docker_cli import DockerCliBackend
from .errors import (
    ApiError,
    AuthError,
    BackupFormatError,
    CommandError,
    LifecycleError,
    NetworkError,
    SwarmClientError,
)

__all__ = [
    "BackupStore",
    "ClusterBackend",
    "parse_replicas",
    "DockerApiBackend",
    "DockerCliBackend",
    "ApiError",
    "AuthError",
    "BackupFormatError",
    "CommandError",
    "LifecycleError",
    "NetworkError",
    "SwarmClientError",
]
