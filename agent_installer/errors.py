# agent_installer/errors.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the installer, each carrying the process exit code the
command-line entry point reports for it.
"""


class InstallerError(Exception):
    """Base class for installer failures."""

    exit_code: int = 1


class PrivilegeError(InstallerError, PermissionError):
    """Raised when the installer is not running as root."""

    exit_code = 1


class DownloadError(InstallerError):
    """Raised when neither curl nor wget is available to fetch the package."""

    exit_code = 2


class OverrideFileError(InstallerError):
    """Raised when the override config file cannot be read."""

    exit_code = 1
