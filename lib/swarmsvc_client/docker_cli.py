from __future__ import annotations

import logging
import shlex
import subprocess

from .cluster import parse_name_lines, parse_snapshot_lines
from .config_types import ClientConfig
from .errors import CommandError

logger = logging.getLogger(__name__)

REPLICAS_FORMAT = "{{.Spec.Mode.Replicated.Replicas}}"


class DockerCliBackend:
    """Cluster backend that shells out to the docker CLI."""

    def __init__(self, cfg: ClientConfig | None = None):
        self._cfg = cfg or ClientConfig()

    def close(self) -> None:
        return None

    def _run(self, args: list[str], *, operation: str) -> str:
        cmd = [self._cfg.docker_bin, *args]
        logger.debug("running %s", shlex.join(cmd))
        try:
            res = subprocess.run(
                cmd,
                text=True,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise CommandError(operation, 127, str(exc)) from exc
        if res.returncode != 0:
            raise CommandError(operation, res.returncode, (res.stderr or "") + (res.stdout or ""))
        return res.stdout or ""

    def list_deployed_services(self) -> list[str]:
        out = self._run(["service", "ls", "--format", "{{.Name}}"], operation="getting running services")
        return parse_name_lines(out)

    def get_scale(self, service: str) -> str:
        out = self._run(
            ["service", "inspect", "--format", REPLICAS_FORMAT, service],
            operation="getting service scale",
        )
        return out.strip()

    def set_scale(self, service: str, replicas: int) -> None:
        args = ["service", "scale"]
        if self._cfg.detach:
            args.append("--detach")
        args.append(f"{service}={int(replicas)}")
        self._run(args, operation="scaling service")

    def list_scale_snapshot(self) -> list[tuple[str, str]]:
        out = self._run(
            ["service", "ls", "--format", "{{.Name}} {{.Replicas}}"],
            operation="listing service replicas",
        )
        return parse_snapshot_lines(out)
