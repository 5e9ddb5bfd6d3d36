# agent_installer/package_installer.py
# -*- coding: utf-8 -*-
import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from agent_installer.config_models import AppSettings
from common.command_utils import command_exists, run_command
from common.system_utils import PackageType

INSTALL_COMMANDS: Dict[PackageType, List[str]] = {
    PackageType.RPM: ["rpm", "-U"],
    PackageType.DEB: ["dpkg", "-i", "-E"],
}

REMOVE_COMMANDS: Dict[PackageType, List[str]] = {
    PackageType.RPM: ["rpm", "-e"],
    PackageType.DEB: ["dpkg", "-r"],
}


class PackageInstaller:
    """
    Installs and removes local package files with the OS package tool
    (``rpm`` for rpm packages, ``dpkg`` for deb packages).
    """

    def __init__(
        self,
        package_type: Union[PackageType, str],
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            package_type: The package format handled by this installer.
            app_settings: The installer settings.
            logger: An optional logging object.

        Raises:
            FileNotFoundError: If the package tool is not on PATH.
        """
        self.package_type = PackageType(package_type)
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)

        tool = INSTALL_COMMANDS[self.package_type][0]
        if not command_exists(tool):
            self.logger.critical(
                f"'{tool}' command not found. Cannot handle {self.package_type.value} packages."
            )
            raise FileNotFoundError(
                f"'{tool}' not found. Is this a {self.package_type.value}-based system?"
            )

    def install_file(self, package_path: Union[str, Path]) -> None:
        """
        Install (or upgrade to) a downloaded package file.

        Raises:
            subprocess.CalledProcessError: If the package tool fails.
        """
        self.logger.info(f"Installing package file {package_path}...")
        run_command(
            INSTALL_COMMANDS[self.package_type] + [str(package_path)],
            self.app_settings,
            current_logger=self.logger,
        )
        self.logger.info(f"Package {package_path} installed successfully.")

    def remove(self, package_name: str) -> None:
        """
        Remove an installed package by name.

        Raises:
            subprocess.CalledProcessError: If the package tool fails.
        """
        self.logger.info(f"Removing package {package_name}...")
        run_command(
            REMOVE_COMMANDS[self.package_type] + [package_name],
            self.app_settings,
            current_logger=self.logger,
        )
        self.logger.info(f"Package {package_name} removed.")
