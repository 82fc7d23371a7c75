from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from swarmsvc_cli import config, main
from swarmsvc_client import CommandError


class _FakeBackend:
    def __init__(self, services: dict[str, str] | None = None):
        self.services = dict(services or {"web-frontend": "2", "web-backend": "1", "cache": "1"})
        self.calls: list[tuple] = []
        self.closed = False

    def list_deployed_services(self) -> list[str]:
        self.calls.append(("list",))
        return list(self.services)

    def get_scale(self, service: str) -> str:
        self.calls.append(("get", service))
        return self.services[service]

    def set_scale(self, service: str, replicas: int) -> None:
        self.calls.append(("set", service, replicas))
        if service == "broken":
            raise CommandError("scaling service", 1, "rpc error")
        self.services[service] = str(replicas)

    def list_scale_snapshot(self) -> list[tuple[str, str]]:
        self.calls.append(("snapshot",))
        return [(name, f"{n}/{n}") for name, n in self.services.items()]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_backend(monkeypatch, tmp_path) -> _FakeBackend:
    backend = _FakeBackend()
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(tmp_path / "cfg"))
    monkeypatch.delenv(config.ENV_BACKUP_FILE, raising=False)
    monkeypatch.delenv(config.ENV_BACKEND, raising=False)
    monkeypatch.delenv(config.ENV_DOCKER_BIN, raising=False)
    monkeypatch.setattr(main, "make_backend", lambda cfg: backend)
    return backend


def test_no_action_is_rejected(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["-services=web"])
    assert result.exit_code == 1
    assert "Please specify an action" in result.output
    assert fake_backend.calls == []


def test_exclusive_actions_are_rejected(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["-restart", "-stop"])
    assert result.exit_code == 1
    assert "only one action" in result.output
    assert fake_backend.calls == []


def test_restart_matched_service(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["-restart", "-services=web"])
    assert result.exit_code == 0, result.output
    assert fake_backend.calls == [
        ("list",),
        ("get", "web-frontend"),
        ("set", "web-frontend", 0),
        ("set", "web-frontend", 2),
    ]
    assert "Service web-frontend restarted successfully" in result.output
    assert fake_backend.closed


def test_stop_warns_about_unmatched_fragment(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["--stop", "--services", "cache,queue"])
    assert result.exit_code == 0, result.output
    assert ("set", "cache", 0) in fake_backend.calls
    assert "queue" in result.output
    assert "Service cache stopped successfully" in result.output


def test_all_overrides_services(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["-stop", "-all", "-services=cache"])
    assert result.exit_code == 0, result.output
    stopped = [call[1] for call in fake_backend.calls if call[0] == "set"]
    assert stopped == ["web-frontend", "web-backend", "cache"]


def test_operational_error_exits_with_one(fake_backend) -> None:
    fake_backend.services["broken"] = "1"
    result = CliRunner().invoke(main.app, ["-stop", "-services=broken"])
    assert result.exit_code == 1
    assert "error stopping service broken" in result.output


def test_backup_and_restore_round_trip(fake_backend, tmp_path: Path) -> None:
    backup_file = tmp_path / "swarm.txt"
    runner = CliRunner()

    result = runner.invoke(main.app, ["-backup", "--backup-file", str(backup_file)])
    assert result.exit_code == 0, result.output
    assert "Services backed up successfully" in result.output
    assert "Backup file:" in result.output
    assert backup_file.read_text(encoding="utf-8") == "web-frontend 2/2\nweb-backend 1/1\ncache 1/1\n"

    fake_backend.services = {name: "0" for name in fake_backend.services}
    result = runner.invoke(main.app, ["-restore", "--backup-file", str(backup_file)])
    assert result.exit_code == 0, result.output
    assert "Services restored successfully" in result.output
    assert fake_backend.services == {"web-frontend": "2", "web-backend": "1", "cache": "1"}


def test_restore_reports_malformed_line(fake_backend, tmp_path: Path) -> None:
    backup_file = tmp_path / "swarm.txt"
    backup_file.write_text("api 2\nworker\n", encoding="utf-8")

    result = CliRunner().invoke(main.app, ["-restore", "--backup-file", str(backup_file)])

    assert result.exit_code == 1
    assert "backup line 2" in result.output
    assert fake_backend.calls == []


def test_restore_without_backup_file_fails(fake_backend, tmp_path: Path) -> None:
    result = CliRunner().invoke(main.app, ["-restore", "--backup-file", str(tmp_path / "nope.txt")])
    assert result.exit_code == 1
    assert "error restoring services" in result.output


def test_unknown_backend_is_a_configuration_error(fake_backend) -> None:
    result = CliRunner().invoke(main.app, ["-backup", "--backend", "ssh"])
    assert result.exit_code == 1
    assert "Unknown backend" in result.output
    assert fake_backend.calls == []


def test_save_config_without_action(fake_backend, tmp_path: Path) -> None:
    result = CliRunner().invoke(main.app, ["--save-config", "--backup-file", "/srv/swarm.txt"])
    assert result.exit_code == 0, result.output
    contents = (tmp_path / "cfg" / "config.toml").read_text(encoding="utf-8")
    assert 'backup_file = "/srv/swarm.txt"' in contents
    assert fake_backend.calls == []


def test_save_config_unwritable_location_reports_error(fake_backend, monkeypatch, tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setattr(config, "user_config_dir", lambda _: str(blocker / "cfg"))

    result = CliRunner().invoke(main.app, ["--save-config"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "error writing config" in result.output
    assert fake_backend.calls == []
