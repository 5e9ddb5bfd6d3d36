# agent_installer/cloudwatch_agent.py
# -*- coding: utf-8 -*-
"""
Installs and configures the Amazon CloudWatch agent.

The agent package is downloaded and installed only when the agent executable
is missing. The JSON configuration is always rewritten in full, then loaded
(and optionally started) through the vendor control executable
``amazon-cloudwatch-agent-ctl``.
"""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from agent_installer.base_component import BaseComponent
from agent_installer.config_models import (
    AGENT_PACKAGE_NAME,
    DEFAULT_AGENT_CONFIG,
    AppSettings,
    CliOptions,
)
from agent_installer.downloader import download_installer
from agent_installer.package_installer import PackageInstaller
from common.command_utils import get_symbols, log_installer, run_command
from common.file_utils import remove_file, write_config_file
from common.system_utils import detect_os, get_architecture

module_logger = logging.getLogger(__name__)


class InstallOutcome(str, Enum):
    """What the install step did."""

    ALREADY_INSTALLED = "ALREADY_INSTALLED"
    INSTALLED = "INSTALLED"
    SKIPPED_UNSUPPORTED_OS = "SKIPPED_UNSUPPORTED_OS"


class AgentState(str, Enum):
    """Progress of a setup run."""

    NOT_INSTALLED = "NOT_INSTALLED"
    INSTALLED = "INSTALLED"
    CONFIGURED = "CONFIGURED"
    STARTED = "STARTED"
    NOT_STARTED = "NOT_STARTED"


def render_default_config() -> str:
    """Return the default agent configuration as JSON text."""
    return json.dumps(DEFAULT_AGENT_CONFIG, indent=2) + "\n"


class CloudWatchAgentComponent(BaseComponent):
    """
    Installer/configurator for the CloudWatch agent on the local host.
    """

    description = "Amazon CloudWatch agent with a default host metrics configuration"

    def __init__(
        self,
        app_settings: AppSettings,
        options: Optional[CliOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger or module_logger)
        self.options = options or CliOptions()
        self.symbols = get_symbols(app_settings)
        self.state = (
            AgentState.INSTALLED
            if self.is_installed()
            else AgentState.NOT_INSTALLED
        )

    @property
    def mode(self) -> str:
        return self.options.mode

    @property
    def config_locator(self) -> str:
        if self.options.config is not None:
            return self.options.config
        return self.app_settings.default_config_locator

    @property
    def config_contents(self) -> bytes:
        if self.options.config_contents is not None:
            return self.options.config_contents
        return render_default_config().encode("utf-8")

    def _ctl(self, *args: str) -> List[str]:
        return [str(self.app_settings.agent_ctl_path), *args]

    def is_installed(self) -> bool:
        agent_bin = self.app_settings.agent_bin_path
        return agent_bin.is_file() and os.access(agent_bin, os.X_OK)

    def is_configured(self) -> bool:
        return Path(self.app_settings.default_config_file).is_file()

    def install_if_absent(self) -> InstallOutcome:
        """
        Download and install the agent package unless the agent is present.

        On an unsupported OS nothing is installed and a warning is logged;
        the caller still goes on to configure the agent.

        Raises:
            DownloadError: If no download utility is available.
            subprocess.CalledProcessError: If downloading or installing fails.
        """
        if self.is_installed():
            log_installer(
                f"{self.symbols.get('info', 'ℹ️')} {AGENT_PACKAGE_NAME} is already installed",
                "info",
                self.logger,
                self.app_settings,
            )
            outcome = InstallOutcome.ALREADY_INSTALLED
        else:
            os_info = detect_os(self.app_settings, current_logger=self.logger)
            if not os_info.supported:
                log_installer(
                    f"{self.symbols.get('warning', '!')} Unsupported operating system '{os_info.name}'. "
                    f"Skipping installation of {AGENT_PACKAGE_NAME}.",
                    "warning",
                    self.logger,
                    self.app_settings,
                )
                outcome = InstallOutcome.SKIPPED_UNSUPPORTED_OS
            else:
                arch = get_architecture(
                    self.app_settings, current_logger=self.logger
                )
                package_path = download_installer(
                    os_info.download_dir,
                    arch,
                    os_info.package_type.value,
                    self.app_settings,
                    current_logger=self.logger,
                )
                PackageInstaller(
                    os_info.package_type, self.app_settings, self.logger
                ).install_file(package_path)
                log_installer(
                    f"{self.symbols.get('success', '✅')} {AGENT_PACKAGE_NAME} installed.",
                    "success",
                    self.logger,
                    self.app_settings,
                )
                outcome = InstallOutcome.INSTALLED

        if not Path(self.app_settings.install_dir).is_dir():
            log_installer(
                f"{self.symbols.get('error', '❌')} {self.app_settings.install_dir} directory does not exist after install, something went wrong",
                "error",
                self.logger,
                self.app_settings,
            )
        elif self.is_installed():
            self.state = AgentState.INSTALLED
        return outcome

    def install(self) -> bool:
        self.install_if_absent()
        return self.is_installed()

    def write_config(self, contents: Optional[Union[str, bytes]] = None) -> Path:
        """Replace the agent configuration file with ``contents`` (or the run's config)."""
        return write_config_file(
            self.app_settings.default_config_file,
            self.config_contents if contents is None else contents,
            self.app_settings,
            current_logger=self.logger,
        )

    def apply_config(self) -> None:
        """Load the configuration into the agent via the control executable."""
        log_installer(
            f"{self.symbols.get('gear', '⚙️')} Appending config to cloudwatch agent",
            "info",
            self.logger,
            self.app_settings,
        )
        run_command(
            self._ctl(
                "-a",
                "fetch-config",
                "-m",
                self.mode,
                "-c",
                self.config_locator,
                "-s",
            ),
            self.app_settings,
            current_logger=self.logger,
        )

    def configure(self) -> bool:
        self.write_config()
        self.apply_config()
        self.state = AgentState.CONFIGURED
        return True

    def start_agent(self) -> None:
        log_installer(
            f"{self.symbols.get('rocket', '🚀')} Starting agent",
            "info",
            self.logger,
            self.app_settings,
        )
        run_command(
            self._ctl("-a", "start", "-m", self.mode),
            self.app_settings,
            current_logger=self.logger,
        )
        self.state = AgentState.STARTED

    def stop_agent(self) -> None:
        log_installer(
            f"{self.symbols.get('gear', '⚙️')} Stopping agent",
            "info",
            self.logger,
            self.app_settings,
        )
        run_command(
            self._ctl("-a", "stop", "-m", self.mode),
            self.app_settings,
            current_logger=self.logger,
        )

    def status(self) -> str:
        """Return the status report printed by the control executable."""
        result = run_command(
            self._ctl("-a", "status", "-m", self.mode),
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
        )
        return result.stdout.strip() if result.stdout else ""

    def uninstall(self) -> bool:
        if not self.is_installed():
            log_installer(
                f"{self.symbols.get('info', 'ℹ️')} {AGENT_PACKAGE_NAME} is not installed.",
                "info",
                self.logger,
                self.app_settings,
            )
            return False
        os_info = detect_os(self.app_settings, current_logger=self.logger)
        if not os_info.supported:
            log_installer(
                f"{self.symbols.get('warning', '!')} Unsupported operating system '{os_info.name}'. Cannot remove {AGENT_PACKAGE_NAME}.",
                "warning",
                self.logger,
                self.app_settings,
            )
            return False
        PackageInstaller(
            os_info.package_type, self.app_settings, self.logger
        ).remove(AGENT_PACKAGE_NAME)
        self.state = AgentState.NOT_INSTALLED
        return True

    def unconfigure(self) -> bool:
        return remove_file(
            self.app_settings.default_config_file,
            self.app_settings,
            current_logger=self.logger,
        )

    def run(self) -> AgentState:
        """
        Perform a full setup: install if absent, write and load the
        configuration, then start the agent unless disabled.

        Returns:
            The final state (STARTED or NOT_STARTED).
        """
        self.install_if_absent()
        self.configure()
        if self.options.start_agent:
            self.start_agent()
        else:
            log_installer(
                f"{self.symbols.get('info', 'ℹ️')} Agent start disabled, leaving it stopped.",
                "info",
                self.logger,
                self.app_settings,
            )
            self.state = AgentState.NOT_STARTED
        return self.state
