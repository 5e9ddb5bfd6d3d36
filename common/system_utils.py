# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions for the installer.

This module includes the privilege check, operating system detection from the
os-release file, and mapping of the machine type to a package architecture.
"""

import logging
import os
import platform
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pydantic import BaseModel

from agent_installer.config_models import AppSettings
from agent_installer.errors import PrivilegeError
from common.command_utils import get_symbols, log_installer

module_logger = logging.getLogger(__name__)


class PackageType(str, Enum):
    """Package formats the agent is published in."""

    RPM = "rpm"
    DEB = "deb"


class OsInfo(BaseModel):
    """Result of operating system detection."""

    name: str
    download_dir: Optional[str] = None
    package_type: Optional[PackageType] = None

    @property
    def supported(self) -> bool:
        return self.download_dir is not None and self.package_type is not None


# Checked in order against the distribution name; the first match wins.
KNOWN_DISTRIBUTIONS: List[Tuple[str, str, PackageType]] = [
    ("CentOS", "centos", PackageType.RPM),
    ("Red Hat", "redhat", PackageType.RPM),
    ("Amazon Linux", "amazon_linux", PackageType.RPM),
    ("SUSE", "suse", PackageType.RPM),
    ("SLES", "suse", PackageType.RPM),
    ("Ubuntu", "ubuntu", PackageType.DEB),
    ("Debian", "debian", PackageType.DEB),
]

ARCHITECTURE_ALIASES: Dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}
ARCHITECTURE_FALLBACK = "amd64"


def require_root() -> None:
    """
    Ensure the process runs with root privileges.

    Raises:
        PrivilegeError: If the effective user id is not 0.
    """
    if os.geteuid() != 0:
        raise PrivilegeError("The installer requires root privileges")


def parse_os_release(content: str) -> Dict[str, str]:
    """
    Parse os-release content into a dictionary.

    Blank lines and comments are skipped, surrounding quotes are removed from
    values.
    """
    values: Dict[str, str] = {}
    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


def detect_os(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
    os_release_path: Optional[Union[str, Path]] = None,
) -> OsInfo:
    """
    Detect the distribution and the package type used to install the agent.

    Both ``NAME`` and ``PRETTY_NAME`` are matched against the known
    distributions. An unreadable os-release file or an unknown distribution
    yields an unsupported ``OsInfo`` rather than an error.

    Args:
        app_settings: Installer settings; provides the default os-release path.
        current_logger: Optional logger instance.
        os_release_path: Override for the os-release file location.

    Returns:
        OsInfo describing the host.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    release_path = Path(os_release_path or app_settings.os_release_path)

    try:
        release_values = parse_os_release(
            release_path.read_text(encoding="utf-8")
        )
    except OSError as e:
        log_installer(
            f"{symbols.get('warning', '!')} Could not read {release_path}: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return OsInfo(name="unknown")

    names = [
        release_values[key]
        for key in ("NAME", "PRETTY_NAME")
        if release_values.get(key)
    ]
    os_name = names[0] if names else "unknown"

    for marker, download_dir, package_type in KNOWN_DISTRIBUTIONS:
        if any(marker in name for name in names):
            log_installer(
                f"{symbols.get('info', 'ℹ️')} Detected {os_name} ({package_type.value} packages).",
                "info",
                logger_to_use,
                app_settings,
            )
            return OsInfo(
                name=os_name,
                download_dir=download_dir,
                package_type=package_type,
            )

    log_installer(
        f"{symbols.get('debug', '🐛')} No known distribution matched '{os_name}'.",
        "debug",
        logger_to_use,
        app_settings,
    )
    return OsInfo(name=os_name)


def get_architecture(
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Return the package architecture for this host (``amd64`` or ``arm64``).

    ``app_settings.architecture`` takes precedence over detection. Unknown
    machine types fall back to ``amd64``.
    """
    logger_to_use = current_logger if current_logger else module_logger
    if app_settings.architecture:
        return app_settings.architecture

    machine = platform.machine().lower()
    arch = ARCHITECTURE_ALIASES.get(machine)
    if arch is None:
        symbols = get_symbols(app_settings)
        log_installer(
            f"{symbols.get('warning', '!')} Unrecognised machine type '{machine}', assuming {ARCHITECTURE_FALLBACK}.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return ARCHITECTURE_FALLBACK
    return arch
