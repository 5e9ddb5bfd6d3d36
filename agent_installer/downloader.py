# agent_installer/downloader.py
# -*- coding: utf-8 -*-
"""
Handles downloading the CloudWatch agent package.

The package is fetched with whichever of curl or wget is installed on the
host, so no HTTP client needs to be present in the Python environment.
"""

import logging
from pathlib import Path
from typing import Optional

from agent_installer.config_models import AGENT_PACKAGE_NAME, AppSettings
from agent_installer.errors import DownloadError
from common.command_utils import (
    command_exists,
    get_symbols,
    log_installer,
    run_command,
)

module_logger = logging.getLogger(__name__)


def build_download_url(
    app_settings: AppSettings, os_dir: str, arch: str, pkg_type: str
) -> str:
    """Return the vendor URL of the latest package for an OS/arch/type."""
    return (
        f"{app_settings.download_url_prefix}{os_dir}/{arch}/latest/"
        f"{AGENT_PACKAGE_NAME}.{pkg_type}"
    )


def download_destination(app_settings: AppSettings, pkg_type: str) -> Path:
    return Path(f"{app_settings.download_file_path_prefix}.{pkg_type}")


def download_installer(
    os_dir: str,
    arch: str,
    pkg_type: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Download the agent package to a temporary path.

    curl is preferred; wget is used when curl is missing. No timeout is
    applied beyond the client's own defaults.

    Args:
        os_dir: Vendor directory for the distribution (e.g. ``centos``).
        arch: Package architecture (``amd64`` or ``arm64``).
        pkg_type: Package type (``rpm`` or ``deb``).
        app_settings: Installer settings.
        current_logger: Optional logger instance.

    Returns:
        Path of the downloaded package.

    Raises:
        DownloadError: If neither curl nor wget is available.
        subprocess.CalledProcessError: If the download command fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    source = build_download_url(app_settings, os_dir, arch, pkg_type)
    destination = download_destination(app_settings, pkg_type)

    if command_exists("curl"):
        command = ["curl", "-o", str(destination), source]
    elif command_exists("wget"):
        command = ["wget", "-O", str(destination), source]
    else:
        log_installer(
            f"{symbols.get('error', '❌')} No suitable download utility. Install either wget or curl.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise DownloadError(
            "No suitable download utility. Install either wget or curl"
        )

    log_installer(
        f"{symbols.get('package', '📦')} Downloading {source} to {destination}...",
        "info",
        logger_to_use,
        app_settings,
    )
    run_command(command, app_settings, current_logger=logger_to_use)
    return destination
