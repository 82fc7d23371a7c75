from __future__ import annotations

import typer

from swarmsvc_client import BackupStore, ClusterBackend, SwarmClientError
from swarmsvc_client.lifecycle import restart_services, stop_services
from swarmsvc_client.resolve import match_services, split_fragments

from . import console
from .backend import make_backend
from .compat import cli_version
from .config import AppConfig, load_config, normalize_backend, save_config
from .logging_ import setup_logging

ACTIONS = ("restart", "stop", "backup", "restore")

app = typer.Typer(
    name="swarmsvc",
    help="Stop, restart, back up and restore Docker Swarm services.",
    add_completion=False,
)


def _report(service: str, event: str) -> None:
    console.ok(f"Service {service} {event} successfully")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"swarmsvc {cli_version()}")
        raise typer.Exit(code=0)


def _apply_overrides(
        cfg: AppConfig,
        *,
        backup_file: str | None,
        backend: str | None,
        docker_bin: str | None,
        docker_socket: str | None,
        detach: bool,
) -> AppConfig:
    if backup_file:
        cfg.backup_file = backup_file
    if backend:
        cfg.backend = normalize_backend(backend)
    if docker_bin:
        cfg.docker_bin = docker_bin
    if docker_socket:
        cfg.docker_socket = docker_socket
    if detach:
        cfg.detach = True
    return cfg


def _resolve_targets(backend: ClusterBackend, services: str | None, all_services: bool) -> list[str]:
    if all_services:
        return backend.list_deployed_services()
    result = match_services(backend, split_fragments(services))
    for fragment in result.unmatched:
        console.warn(f"No deployed service matches '{fragment}', skipping.")
    return result.matched


def _run_action(action: str, backend: ClusterBackend, cfg: AppConfig, services: str | None, all_services: bool) -> None:
    if action in ("backup", "restore"):
        console.info(f"Backup file: {cfg.backup_file}")
    if action == "backup":
        try:
            BackupStore(cfg.backup_file).backup(backend)
        except OSError as exc:
            raise SwarmClientError(f"error backing up services: {exc}") from exc
        console.ok("Services backed up successfully")
        return
    if action == "restore":
        try:
            BackupStore(cfg.backup_file).restore(backend, on_progress=_report)
        except (SwarmClientError, OSError, ValueError) as exc:
            raise SwarmClientError(f"error restoring services: {exc}") from exc
        console.ok("Services restored successfully")
        return

    targets = _resolve_targets(backend, services, all_services)
    console.print(console.services_table("Matched services", targets))
    if action == "restart":
        restart_services(backend, targets, on_progress=_report)
    else:
        stop_services(backend, targets, on_progress=_report)


@app.command()
def swarmsvc(
        services: str | None = typer.Option(
            None, "-services", "--services", help="Comma separated names of services."
        ),
        restart: bool = typer.Option(False, "-restart", "--restart", help="Restart the specified services."),
        stop: bool = typer.Option(False, "-stop", "--stop", help="Stop the specified services."),
        backup: bool = typer.Option(False, "-backup", "--backup", help="Backup running services."),
        restore: bool = typer.Option(False, "-restore", "--restore", help="Restore services from backup."),
        all_services: bool = typer.Option(False, "-all", "--all", help="Operate on all running services."),
        backup_file: str | None = typer.Option(None, "--backup-file", help="Backup file path."),
        backend_name: str | None = typer.Option(None, "--backend", help="Cluster backend: cli or api."),
        docker_bin: str | None = typer.Option(None, "--docker-bin", help="Docker executable (cli backend)."),
        docker_socket: str | None = typer.Option(
            None, "--docker-socket", help="Docker engine socket (api backend)."
        ),
        detach: bool = typer.Option(False, "--detach", help="Do not wait for scaled services to converge."),
        save: bool = typer.Option(False, "--save-config", help="Persist the effective settings."),
        verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
        version: bool = typer.Option(
            False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
        ),
) -> None:
    setup_logging(verbose)
    selected = [name for name, flag in zip(ACTIONS, (restart, stop, backup, restore)) if flag]
    if len(selected) > 1:
        console.err("Please specify only one action to perform (restart, stop, backup, restore)")
        raise typer.Exit(code=1)

    try:
        cfg = _apply_overrides(
            load_config(),
            backup_file=backup_file,
            backend=backend_name,
            docker_bin=docker_bin,
            docker_socket=docker_socket,
            detach=detach,
        )
    except (ValueError, OSError) as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)

    if save:
        try:
            path = save_config(cfg)
        except OSError as exc:
            console.err(f"error writing config: {exc}")
            raise typer.Exit(code=1)
        console.ok(f"Config written: {path}")
        if not selected:
            raise typer.Exit(code=0)

    if not selected:
        console.err("Please specify an action to perform (restart, stop, backup, restore)")
        raise typer.Exit(code=1)

    backend = make_backend(cfg)
    try:
        _run_action(selected[0], backend, cfg, services, all_services)
    except SwarmClientError as exc:
        console.err(str(exc))
        raise typer.Exit(code=1)
    finally:
        backend.close()
