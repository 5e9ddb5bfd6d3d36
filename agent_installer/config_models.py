# agent_installer/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for the CloudWatch agent installer configuration.

This module defines the structured settings for the installer, including
defaults, type annotations, and descriptions, plus the immutable set of
command-line options resolved for a single run. It utilizes Pydantic for
data validation and settings management.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
AGENT_PACKAGE_NAME: str = "amazon-cloudwatch-agent"
AGENT_BINARY_NAME: str = "amazon-cloudwatch-agent"
AGENT_CTL_NAME: str = "amazon-cloudwatch-agent-ctl"

DOWNLOAD_URL_PREFIX_DEFAULT: str = (
    "https://s3.amazonaws.com/amazoncloudwatch-agent/"
)
DOWNLOAD_FILE_PATH_PREFIX_DEFAULT: str = "/tmp/amazon-cloudwatch-agent"
INSTALL_DIR_DEFAULT: str = "/opt/aws/amazon-cloudwatch-agent"
DEFAULT_CONFIG_FILE_DEFAULT: str = (
    "/opt/aws/amazon-cloudwatch-agent/config.json"
)
OS_RELEASE_PATH_DEFAULT: str = "/etc/os-release"
AGENT_MODE_DEFAULT: str = "auto"
LOG_PREFIX_DEFAULT: str = "[CWAGENT-SETUP]"

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "package": "📦",
    "rocket": "🚀",
    "sparkles": "✨",
    "critical": "🔥",
    "debug": "🐛",
}

# Recommended metrics collection defaults for the agent.
DEFAULT_AGENT_CONFIG: Dict[str, Any] = {
    "agent": {
        "metrics_collection_interval": 60,
        "run_as_user": "cwagent",
    },
    "metrics": {
        "aggregation_dimensions": [["InstanceId"]],
        "metrics_collected": {
            "cpu": {
                "measurement": [
                    "cpu_usage_idle",
                    "cpu_usage_iowait",
                    "cpu_usage_user",
                    "cpu_usage_system",
                ],
                "metrics_collection_interval": 60,
                "resources": ["*"],
                "totalcpu": False,
            },
            "disk": {
                "measurement": ["used_percent", "inodes_free"],
                "metrics_collection_interval": 60,
                "resources": ["*"],
            },
            "diskio": {
                "measurement": ["io_time"],
                "metrics_collection_interval": 60,
                "resources": ["*"],
            },
            "mem": {
                "measurement": ["mem_used_percent"],
                "metrics_collection_interval": 60,
            },
            "swap": {
                "measurement": ["swap_used_percent"],
                "metrics_collection_interval": 60,
            },
        },
    },
}


class AppSettings(BaseSettings):
    """Main installer settings."""
    model_config = SettingsConfigDict(env_prefix="CWAGENT_", extra="ignore")

    download_url_prefix: str = Field(
        default=DOWNLOAD_URL_PREFIX_DEFAULT,
        description="Base URL the agent packages are published under.",
    )
    download_file_path_prefix: str = Field(
        default=DOWNLOAD_FILE_PATH_PREFIX_DEFAULT,
        description="Path prefix for the downloaded package; the package type is appended as extension.",
    )
    install_dir: str = Field(
        default=INSTALL_DIR_DEFAULT,
        description="Directory the agent package installs into.",
    )
    default_config_file: str = Field(
        default=DEFAULT_CONFIG_FILE_DEFAULT,
        description="Path the agent JSON configuration is written to.",
    )
    os_release_path: str = Field(
        default=OS_RELEASE_PATH_DEFAULT,
        description="System identification file used for OS detection.",
    )
    architecture: Optional[str] = Field(
        default=None,
        description="Pin the package architecture (amd64, arm64). Detected when unset.",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path of a JSON log file for the run.",
    )
    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT,
        description="Prefix for log messages from the installer.",
    )

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )

    @property
    def agent_bin_path(self) -> Path:
        return Path(self.install_dir) / "bin" / AGENT_BINARY_NAME

    @property
    def agent_ctl_path(self) -> Path:
        return Path(self.install_dir) / "bin" / AGENT_CTL_NAME

    @property
    def default_config_locator(self) -> str:
        return f"file:{self.default_config_file}"


class CliOptions(BaseModel):
    """
    Options resolved from the command line for a single run.

    The model is frozen: once parsed, options are not modified. ``mode`` and
    ``config`` are passed to the control executable as given.
    """
    model_config = ConfigDict(frozen=True)

    mode: str = Field(default=AGENT_MODE_DEFAULT, description="Agent mode passed to the control executable.")
    config: Optional[str] = Field(
        default=None,
        description="Config locator passed to the control executable. Defaults to file:<default_config_file>.",
    )
    override_file: Optional[Path] = Field(default=None, description="File whose content replaces the default config.")
    config_contents: Optional[bytes] = Field(
        default=None,
        description="Raw bytes read from override_file, written verbatim.",
    )
    start_agent: bool = Field(default=True, description="Start the agent after loading the configuration.")
    verbose: bool = False
    settings_file: Optional[Path] = None
