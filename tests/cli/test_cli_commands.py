from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from devdash import __version__
from devdash.cli.cmd.status import watch_dashboard
from devdash.cli.main import app
from devdash.core.config import Config
from devdash.runtime import DashboardContext
from devdash.status import commands
from devdash.status.models import ToolName

from tests.helpers import IP_INFO, FakeHttp, FakeRunner, healthy_runner

runner = CliRunner()


@pytest.fixture
def fake_runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    fake = healthy_runner()

    def make_context(config: Config) -> DashboardContext:
        return DashboardContext(config, runner=fake, http=FakeHttp(IP_INFO))

    monkeypatch.setattr("devdash.cli.support.DashboardContext", make_context)
    return fake


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"devdash {__version__}" in result.output


def test_status_json(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["status", "--json"])

    assert result.exit_code == 0, result.output
    report = json.loads(result.output)
    assert set(report["tools"]) == {tool.value for tool in ToolName}
    assert report["tools"]["kubectl"]["payload"]["current_context"] == "dev"
    assert report["tools"]["docker"]["error"] is None
    assert report["system"]["network_ip"] == "203.0.113.7"
    assert report["tools_updated"] is not None


def test_status_table(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["status"])

    assert result.exit_code == 0, result.output
    assert "Kubernetes" in result.output
    assert "Docker" in result.output
    assert "Comcast Cable" in result.output


def test_no_subcommand_prints_status(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, [])

    assert result.exit_code == 0, result.output
    assert "GitHub" in result.output


def test_status_shows_tool_errors(fake_runner: FakeRunner) -> None:
    fake_runner.set(commands.GH_USER, "zsh: command not found: gh")

    result = runner.invoke(app, ["status", "--json"])

    report = json.loads(result.output)
    assert report["tools"]["github"]["error"]["kind"] == "not_installed"
    assert report["tools"]["github"]["payload"] is None


def test_kube_use(fake_runner: FakeRunner) -> None:
    fake_runner.set(commands.kubectl_use_context("prod"), 'Switched to context "prod".')

    result = runner.invoke(app, ["kube", "use", "prod"])

    assert result.exit_code == 0, result.output
    assert "prod" in result.output
    assert fake_runner.count(commands.kubectl_use_context("prod")) == 1


def test_kube_use_failure_exits_non_zero(fake_runner: FakeRunner) -> None:
    fake_runner.set(commands.kubectl_use_context("nope"), 'error: no context exists with the name: "nope"')

    result = runner.invoke(app, ["kube", "use", "nope"])

    assert result.exit_code == 1


def test_az_use(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["az", "use", "s1"])

    assert result.exit_code == 0, result.output
    assert fake_runner.count(commands.az_set_subscription("s1")) == 1
    assert fake_runner.count(commands.AZ_ACCOUNT_LIST) == 1


def test_pulumi_select(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["pulumi", "select", "prod"])

    assert result.exit_code == 0, result.output
    assert fake_runner.count(commands.pulumi_select_stack("prod")) == 1


def test_docker_toggle_looks_up_current_state(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["docker", "toggle", "web"])

    assert result.exit_code == 0, result.output
    assert fake_runner.count(commands.docker_stop("web")) == 1
    assert fake_runner.count(commands.docker_start("web")) == 0


def test_docker_toggle_with_explicit_state(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["docker", "toggle", "db", "--stopped"])

    assert result.exit_code == 0, result.output
    assert fake_runner.count(commands.docker_start("db")) == 1
    assert fake_runner.count(commands.DOCKER_CONTAINERS) == 1


def test_docker_toggle_unknown_container(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["docker", "toggle", "ghost"])

    assert result.exit_code == 1
    assert fake_runner.count(commands.docker_start("ghost")) == 0


def test_docker_engine_stop(fake_runner: FakeRunner) -> None:
    result = runner.invoke(app, ["docker", "engine", "--running"])

    assert result.exit_code == 0, result.output
    assert fake_runner.count(commands.DOCKER_ENGINE_STOP) == 1
    assert "engine stopped" in result.output


def test_invalid_config_exits_non_zero(monkeypatch: pytest.MonkeyPatch, fake_runner: FakeRunner) -> None:
    monkeypatch.setenv("DEVDASH_CONFIG_CONTENT", "{oops")

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
    assert fake_runner.calls == []


def test_config_path(isolated_home: Path) -> None:
    result = runner.invoke(app, ["config", "--path"])

    assert result.exit_code == 0
    assert "config" in result.output


def test_config_show(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEVDASH_CONFIG_CONTENT", '{"titleMode": "audio"}')

    result = runner.invoke(app, ["config", "--show"])

    assert result.exit_code == 0, result.output
    shown = json.loads(result.output)
    assert shown["titleMode"] == "audio"
    assert shown["polling"]["interval"] == 60


@pytest.mark.anyio
async def test_watch_dashboard_polls_until_cancelled() -> None:
    fake = healthy_runner()
    http = FakeHttp(IP_INFO)

    async with DashboardContext(Config(), runner=fake, http=http) as dash:
        task = asyncio.create_task(watch_dashboard(dash))
        for _ in range(50):
            if dash.tools.last_updated is not None and dash.system.last_updated is not None:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    assert dash.tools.status(ToolName.KUBECTL).ok
    assert dash.system.snapshot.network_ip == "203.0.113.7"
