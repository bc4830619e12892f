import pytest
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import yaml
from click.testing import CliRunner

from powerwatch.config import HostParams, PingParams, WatchdogConfig
from powerwatch.context import WatchdogContext
from powerwatch.probe.platform import LinuxCommands


SAMPLE_CONFIG = {
    "ping_params": {
        "interval_time": "30s",
        "retry_count": 2,
        "timeout": "1s",
        "target_ips": ["10.0.0.1", "10.0.0.2"],
    },
    "wait_time": "5m",
    "shutdown_delay": "3s",
    "host_params": [
        {"host": "192.168.1.10", "port": 22, "hostname": "nas", "username": "root", "password": "secret"},
        {"host": "192.168.1.11", "port": 2222, "hostname": "hypervisor", "username": "admin", "password": "secret"},
    ],
}


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path) -> Path:
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump(SAMPLE_CONFIG, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture
def make_context():
    """Build a WatchdogContext from keyword overrides of the sample config."""
    def _make(targets=None, retries=1, timeout="1s", interval="30s", wait="2s", hosts=None):
        config = WatchdogConfig(
            ping_params=PingParams(
                interval_time=interval,
                retry_count=retries,
                timeout=timeout,
                target_ips=targets or ["10.0.0.1"],
            ),
            wait_time=wait,
            host_params=hosts if hosts is not None else [
                HostParams(host="192.168.1.10", hostname="nas", username="root", password="secret"),
                HostParams(host="192.168.1.11", hostname="hypervisor", username="root", password="secret"),
            ],
        )
        return WatchdogContext(
            config=config,
            config_path=Path("config.yml"),
            commands=LinuxCommands(),
        )
    return _make


@pytest.fixture
def mock_ssh_connection():
    """An asyncssh connection whose run() returns a successful result."""
    result = MagicMock()
    result.exit_status = 0
    result.stdout = ""
    result.stderr = ""

    conn = MagicMock()
    conn.run = AsyncMock(return_value=result)
    conn.wait_closed = AsyncMock()
    return conn
