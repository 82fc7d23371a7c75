from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from swarmsvc_client.backup import DEFAULT_BACKUP_FILENAME
from swarmsvc_client.config_types import DEFAULT_DOCKER_SOCKET

APP_NAME = "swarmsvc"
CONFIG_FILENAME = "config.toml"
BACKENDS = ("cli", "api")

ENV_BACKUP_FILE = "SWARMSVC_BACKUP_FILE"
ENV_DOCKER_BIN = "SWARMSVC_DOCKER_BIN"
ENV_BACKEND = "SWARMSVC_BACKEND"


@dataclass
class AppConfig:
    backend: str = "cli"
    docker_bin: str = "docker"
    docker_socket: str = DEFAULT_DOCKER_SOCKET
    timeout_s: float = 30.0
    detach: bool = False
    backup_file: str = DEFAULT_BACKUP_FILENAME


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig()


def normalize_backend(raw: str | None) -> str:
    value = (raw or "").strip().lower()
    if not value:
        return "cli"
    if value not in BACKENDS:
        raise ValueError(f"Unknown backend '{raw}'. Expected one of: {', '.join(BACKENDS)}.")
    return value


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "backend": cfg.backend,
        "docker_bin": cfg.docker_bin,
        "docker_socket": cfg.docker_socket,
        "timeout_s": float(cfg.timeout_s),
        "detach": bool(cfg.detach),
        "backup_file": cfg.backup_file,
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    cfg.backend = normalize_backend(str(data.get("backend") or ""))
    cfg.docker_bin = str(data.get("docker_bin") or "").strip() or cfg.docker_bin
    cfg.docker_socket = str(data.get("docker_socket") or "").strip() or cfg.docker_socket
    timeout_raw = data.get("timeout_s")
    if timeout_raw is not None:
        try:
            cfg.timeout_s = float(timeout_raw)
        except (TypeError, ValueError):
            pass
    if isinstance(data.get("detach"), bool):
        cfg.detach = data["detach"]
    cfg.backup_file = str(data.get("backup_file") or "").strip() or cfg.backup_file
    return cfg


def apply_env(cfg: AppConfig) -> AppConfig:
    backup_file = os.getenv(ENV_BACKUP_FILE, "").strip()
    if backup_file:
        cfg.backup_file = backup_file
    docker_bin = os.getenv(ENV_DOCKER_BIN, "").strip()
    if docker_bin:
        cfg.docker_bin = docker_bin
    backend = os.getenv(ENV_BACKEND, "").strip()
    if backend:
        cfg.backend = normalize_backend(backend)
    return cfg


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except (FileNotFoundError, NotADirectoryError):
        cfg = default_config()
    return apply_env(cfg)


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
