# tests/conftest.py
import logging
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from agent_installer.config_models import AppSettings

CENTOS_OS_RELEASE = """\
NAME="CentOS Linux"
VERSION="7 (Core)"
ID="centos"
ID_LIKE="rhel fedora"
PRETTY_NAME="CentOS Linux 7 (Core)"
"""

UBUNTU_OS_RELEASE = """\
PRETTY_NAME="Ubuntu 22.04.4 LTS"
NAME="Ubuntu"
VERSION_ID="22.04"
ID=ubuntu
ID_LIKE=debian
"""

ARCH_OS_RELEASE = """\
NAME="Arch Linux"
PRETTY_NAME="Arch Linux"
ID=arch
"""


@pytest.fixture
def app_settings(tmp_path):
    """AppSettings with every host path redirected under tmp_path."""
    install_dir = tmp_path / "opt" / "amazon-cloudwatch-agent"
    return AppSettings(
        download_url_prefix="https://downloads.example.com/cwagent/",
        download_file_path_prefix=str(
            tmp_path / "tmp" / "amazon-cloudwatch-agent"
        ),
        install_dir=str(install_dir),
        default_config_file=str(install_dir / "config.json"),
        os_release_path=str(tmp_path / "os-release"),
        architecture="amd64",
    )


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def write_os_release(app_settings):
    def _write(content: str) -> Path:
        path = Path(app_settings.os_release_path)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def installed_agent(app_settings):
    """Create an executable agent binary so the agent counts as installed."""
    agent_bin = app_settings.agent_bin_path
    agent_bin.parent.mkdir(parents=True, exist_ok=True)
    agent_bin.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    os.chmod(agent_bin, 0o755)
    return agent_bin


@pytest.fixture
def os_release_samples():
    return {
        "centos": CENTOS_OS_RELEASE,
        "ubuntu": UBUNTU_OS_RELEASE,
        "arch": ARCH_OS_RELEASE,
    }
