from __future__ import annotations

import subprocess

import pytest

from swarmsvc_client import CommandError, DockerCliBackend
from swarmsvc_client import docker_cli
from swarmsvc_client.config_types import ClientConfig


class _FakeRun:
    def __init__(self, stdout: str = "", returncode: int = 0, stderr: str = ""):
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.commands: list[list[str]] = []

    def __call__(self, cmd, **kwargs):  # noqa: ANN001, ANN003
        self.commands.append(list(cmd))
        return subprocess.CompletedProcess(cmd, self.returncode, self.stdout, self.stderr)


def test_list_deployed_services(monkeypatch) -> None:
    fake = _FakeRun(stdout="api\nweb-frontend\n\n")
    monkeypatch.setattr(docker_cli.subprocess, "run", fake)

    assert DockerCliBackend().list_deployed_services() == ["api", "web-frontend"]
    assert fake.commands == [["docker", "service", "ls", "--format", "{{.Name}}"]]


def test_empty_listing_yields_no_services(monkeypatch) -> None:
    monkeypatch.setattr(docker_cli.subprocess, "run", _FakeRun(stdout="\n"))
    assert DockerCliBackend().list_deployed_services() == []


def test_get_scale_inspects_replicas(monkeypatch) -> None:
    fake = _FakeRun(stdout="3\n")
    monkeypatch.setattr(docker_cli.subprocess, "run", fake)

    assert DockerCliBackend().get_scale("api") == "3"
    assert fake.commands[0] == [
        "docker", "service", "inspect", "--format", "{{.Spec.Mode.Replicated.Replicas}}", "api",
    ]


def test_set_scale_uses_configured_binary_and_detach(monkeypatch) -> None:
    fake = _FakeRun()
    monkeypatch.setattr(docker_cli.subprocess, "run", fake)

    DockerCliBackend(ClientConfig(docker_bin="/usr/local/bin/docker", detach=True)).set_scale("api", 2)

    assert fake.commands == [["/usr/local/bin/docker", "service", "scale", "--detach", "api=2"]]


def test_list_scale_snapshot_drops_trailing_annotations(monkeypatch) -> None:
    fake = _FakeRun(stdout="api 2/2\nagent 3/3 (max 1 per node)\nbroken\n")
    monkeypatch.setattr(docker_cli.subprocess, "run", fake)

    assert DockerCliBackend().list_scale_snapshot() == [("api", "2/2"), ("agent", "3/3")]
    assert fake.commands[0] == ["docker", "service", "ls", "--format", "{{.Name}} {{.Replicas}}"]


def test_failure_is_annotated_with_operation(monkeypatch) -> None:
    fake = _FakeRun(returncode=1, stderr="Error: No such service: ghost\n")
    monkeypatch.setattr(docker_cli.subprocess, "run", fake)

    with pytest.raises(CommandError) as exc:
        DockerCliBackend().get_scale("ghost")

    assert exc.value.operation == "getting service scale"
    assert exc.value.returncode == 1
    assert str(exc.value) == "error getting service scale: Error: No such service: ghost"


def test_missing_binary_raises_command_error(monkeypatch) -> None:
    def _missing(*_args, **_kwargs):
        raise FileNotFoundError("No such file or directory: 'docker'")

    monkeypatch.setattr(docker_cli.subprocess, "run", _missing)

    with pytest.raises(CommandError) as exc:
        DockerCliBackend().list_deployed_services()
    assert exc.value.returncode == 127
