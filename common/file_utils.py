# common/file_utils.py
# -*- coding: utf-8 -*-
"""
File system utility functions: writing configuration files in full and
removing temporary download artifacts.
"""

import glob
import logging
from pathlib import Path
from typing import List, Optional, Union

from agent_installer.config_models import AppSettings

from .command_utils import get_symbols, log_installer

module_logger = logging.getLogger(__name__)


def write_config_file(
    file_path: Union[str, Path],
    contents: Union[str, bytes],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Write ``contents`` to ``file_path``, replacing whatever was there.

    Bytes are written exactly as given and text is encoded as UTF-8; nothing
    is merged with the previous file. Missing parent directories are created.

    Parameters:
        file_path (Union[str, Path]): Destination of the configuration file.
        contents (Union[str, bytes]): Full content of the new file.
        app_settings (Optional[AppSettings]): Installer settings for logging symbols.
        current_logger (Optional[logging.Logger]): Logger instance to use.

    Returns:
        Path: The path written.

    Raises:
        OSError: If the directory cannot be created or the file cannot be written.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    target = Path(file_path)

    log_installer(
        f"{symbols.get('gear', '⚙️')} Writing new config file {target}",
        "info",
        logger_to_use,
        app_settings,
    )
    data = contents.encode("utf-8") if isinstance(contents, str) else contents
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "wb") as f:
        f.write(data)
    log_installer(
        f"{symbols.get('success', '✅')} Wrote {len(data)} bytes to {target}",
        "debug",
        logger_to_use,
        app_settings,
    )
    return target


def remove_file(
    file_path: Union[str, Path],
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    """
    Remove a single file if present.

    Returns:
        bool: True if a file was removed, False if it did not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    target = Path(file_path)
    if not target.exists():
        log_installer(
            f"{symbols.get('info', 'ℹ️')} {target} does not exist. Nothing to remove.",
            "debug",
            logger_to_use,
            app_settings,
        )
        return False
    target.unlink()
    log_installer(
        f"{symbols.get('success', '✅')} Removed {target}",
        "info",
        logger_to_use,
        app_settings,
    )
    return True


def cleanup_download_artifacts(
    path_prefix: str,
    app_settings: Optional[AppSettings],
    current_logger: Optional[logging.Logger] = None,
) -> List[Path]:
    """
    Best-effort removal of every file whose path starts with ``path_prefix``.

    Failures are logged and never raised, so this can run while another error
    is being reported.

    Parameters:
        path_prefix (str): Prefix of the downloaded files, e.g.
            ``/tmp/amazon-cloudwatch-agent``.
        app_settings (Optional[AppSettings]): Installer settings for logging symbols.
        current_logger (Optional[logging.Logger]): Logger instance to use.

    Returns:
        List[Path]: The files that were removed.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    removed: List[Path] = []

    for match in sorted(glob.glob(f"{glob.escape(path_prefix)}*")):
        artifact = Path(match)
        if not artifact.is_file():
            continue
        try:
            artifact.unlink()
            removed.append(artifact)
        except OSError as e:
            log_installer(
                f"{symbols.get('warning', '!')} Could not remove download artifact {artifact}: {e}",
                "warning",
                logger_to_use,
                app_settings,
            )

    if removed:
        log_installer(
            f"{symbols.get('info', 'ℹ️')} Removed download artifacts: {', '.join(str(p) for p in removed)}",
            "info",
            logger_to_use,
            app_settings,
        )
    return removed
