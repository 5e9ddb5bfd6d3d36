# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Process execution and log routing shared by the installer modules.

Every external program the installer touches (curl, wget, rpm, dpkg and
the agent control executable) is started through ``run_command`` so that
the command line, its captured output and its failure are logged the
same way.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from agent_installer.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def log_installer(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Log ``message`` through ``current_logger`` (or the module logger).

    ``level`` is a level name; ``"success"`` and unrecognised names are
    logged at INFO. ``app_settings`` is accepted so callers can pass their
    settings uniformly; it does not change where the record goes.
    """
    effective_logger = current_logger if current_logger else module_logger
    method_name = logging.getLevelName(_LEVELS.get(level, logging.INFO)).lower()
    getattr(effective_logger, method_name)(message, exc_info=exc_info)


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Return the logging symbols from settings, falling back to the defaults."""
    if app_settings and getattr(app_settings, "symbols", None):
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def _log_output(
    label: str,
    output: Optional[str],
    level: str,
    logger: logging.Logger,
    app_settings: Optional[AppSettings],
) -> None:
    if isinstance(output, str) and output.strip():
        log_installer(f"   {label}: {output.strip()}", level, logger, app_settings)


def run_command(
    command: Sequence[Union[str, Path]],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[Union[str, Path]] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Run an external program without a shell and log what happened.

    Args:
        command: Program and arguments. ``Path`` items are converted to
            strings; arguments are passed through unmodified otherwise.
        app_settings: Installer settings providing the logging symbols.
        check: Raise ``CalledProcessError`` on a non-zero exit status.
        capture_output: Capture stdout and stderr; captured output is
            logged at DEBUG.
        text: Decode the captured streams as text.
        cmd_input: Data written to the program's stdin.
        current_logger: Logger to use instead of the module logger.
        cwd: Working directory for the program.
        env: Environment for the program.

    Returns:
        subprocess.CompletedProcess: The finished process.

    Raises:
        subprocess.CalledProcessError: The program failed and ``check`` is set.
        FileNotFoundError: The program could not be found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    argv = [str(part) for part in command]
    command_line = subprocess.list2cmdline(argv)

    where = f" (in {cwd})" if cwd else ""
    log_installer(
        f"{symbols.get('gear', '⚙️')} Executing: {command_line}{where}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            argv,
            check=check,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command `{command_line}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        _log_output("stdout", e.stdout, "error", effective_logger, app_settings)
        _log_output("stderr", e.stderr, "error", effective_logger, app_settings)
        raise
    except FileNotFoundError as e:
        log_installer(
            f"{symbols.get('error', '❌')} Command not found: {e.filename or argv[0]}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        _log_output("stdout", result.stdout, "debug", effective_logger, app_settings)
        _log_output("stderr", result.stderr, "debug", effective_logger, app_settings)
    return result


def command_exists(command_name: str) -> bool:
    """Return True if ``command_name`` resolves to an executable on PATH."""
    return shutil.which(command_name) is not None
