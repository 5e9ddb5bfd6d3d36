# agent_installer/cli.py
# -*- coding: utf-8 -*-
"""
Handles the command line interface of the CloudWatch agent installer.
"""

import argparse
import logging
import os
import subprocess
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from agent_installer.cloudwatch_agent import CloudWatchAgentComponent
from agent_installer.config_loader import load_app_settings
from agent_installer.config_models import (
    AGENT_MODE_DEFAULT,
    DEFAULT_CONFIG_FILE_DEFAULT,
    AppSettings,
    CliOptions,
)
from agent_installer.errors import InstallerError, OverrideFileError
from common.command_utils import get_symbols, log_installer
from common.file_utils import cleanup_download_artifacts
from common.json_utils import JsonFileType, inspect_json_text
from common.logging_config import setup_logging
from common.system_utils import require_root

module_logger = logging.getLogger(__name__)

SERVICE_NAME = "cloudwatch-agent-setup"

# Short options whose value is always the next word, even one starting with "-".
VALUE_OPTIONS = ("-m", "-c", "-f")


class InstallerArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_parser() -> InstallerArgumentParser:
    parser = InstallerArgumentParser(
        prog=SERVICE_NAME,
        description=(
            "Install the Amazon CloudWatch agent if it is missing, write its "
            "configuration and start it."
        ),
    )
    parser.add_argument(
        "-d",
        dest="start_agent",
        action="store_false",
        help="disables starting the agent",
    )
    parser.add_argument(
        "-m",
        dest="mode",
        metavar="<mode>",
        default=AGENT_MODE_DEFAULT,
        help=f"cloudwatch agent mode to use when starting the agent, defaults to {AGENT_MODE_DEFAULT}",
    )
    parser.add_argument(
        "-c",
        dest="config",
        metavar="<config>",
        default=None,
        help=f"cloudwatch agent config to use when starting the agent, defaults to file:{DEFAULT_CONFIG_FILE_DEFAULT}",
    )
    parser.add_argument(
        "-f",
        dest="override_file",
        metavar="<file>",
        type=Path,
        default=None,
        help="config file to override default config",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--settings-file",
        type=Path,
        default=None,
        help="YAML file overriding installer settings (paths, download URL prefix, ...)",
    )
    return parser


def read_override_file(
    override_file: Path,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> bytes:
    """
    Return the raw bytes of the override config file, unchanged.

    Content that is not UTF-8 or does not parse as JSON is still returned;
    the agent's control tool is left to reject it.

    Raises:
        OverrideFileError: If the file does not exist or is not readable.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if not (override_file.is_file() and os.access(override_file, os.R_OK)):
        raise OverrideFileError(
            f"Invalid filename supplied, no such file: {override_file}"
        )

    try:
        contents = override_file.read_bytes()
    except OSError as e:
        raise OverrideFileError(
            f"Invalid filename supplied, could not read {override_file}: {e}"
        ) from e

    kind, problem = inspect_json_text(contents)
    if kind != JsonFileType.VALID_JSON:
        log_installer(
            f"{symbols.get('warning', '!')} {override_file} does not contain valid JSON ({problem}). It will be written as is.",
            "warning",
            logger_to_use,
            app_settings,
        )
    return contents


def options_from_args(
    parsed_args: argparse.Namespace,
    app_settings: Optional[AppSettings] = None,
    current_logger: Optional[logging.Logger] = None,
) -> CliOptions:
    """
    Turn parsed arguments into immutable options.

    The override file, when given, is read here so that a bad file is
    reported before anything is changed on the host.
    """
    config_contents = None
    if parsed_args.override_file is not None:
        config_contents = read_override_file(
            parsed_args.override_file, app_settings, current_logger
        )
    return CliOptions(
        mode=parsed_args.mode,
        config=parsed_args.config,
        override_file=parsed_args.override_file,
        config_contents=config_contents,
        start_agent=parsed_args.start_agent,
        verbose=parsed_args.verbose,
        settings_file=parsed_args.settings_file,
    )


def bind_option_values(args: List[str]) -> List[str]:
    """
    Attach the word following -m, -c or -f to its option.

    argparse refuses a value that looks like an option (``-m -d``); the
    installer takes the next word as the value whatever it looks like, so
    such pairs are rewritten to the attached form (``-m-d``).
    """
    bound: List[str] = []
    remaining = iter(args)
    for arg in remaining:
        if arg in VALUE_OPTIONS:
            value = next(remaining, None)
            if value is None:
                bound.append(arg)
            elif value.startswith("-"):
                bound.append(f"{arg}{value}")
            else:
                bound.extend([arg, value])
        else:
            bound.append(arg)
    return bound


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse the command line; usage errors exit with status 1."""
    if args is None:
        args = sys.argv[1:]
    return build_parser().parse_args(bind_option_values(list(args)))


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point for the CloudWatch agent installer."""
    parsed_args = parse_args(args)
    logger = setup_logging(SERVICE_NAME, verbose=parsed_args.verbose)

    try:
        app_settings = load_app_settings(
            parsed_args.settings_file, current_logger=logger
        )
        options = options_from_args(parsed_args, app_settings, logger)
        require_root()
    except InstallerError as e:
        logger.error(str(e))
        return e.exit_code

    if app_settings.log_file:
        logger = setup_logging(
            SERVICE_NAME,
            verbose=options.verbose,
            log_file_path=app_settings.log_file,
        )

    logger.info(f"{app_settings.log_prefix} Setting up the CloudWatch agent")
    try:
        component = CloudWatchAgentComponent(
            app_settings, options=options, logger=logger
        )
        final_state = component.run()
        logger.info(
            f"{app_settings.log_prefix} Setup finished, agent state: {final_state.value}"
        )
        return 0
    except InstallerError as e:
        logger.error(str(e))
        exit_code = e.exit_code
    except subprocess.CalledProcessError as e:
        logger.error(f"Setup aborted: command exited with status {e.returncode}")
        exit_code = 1
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {str(e)}")
        exit_code = 1

    cleanup_download_artifacts(
        app_settings.download_file_path_prefix,
        app_settings,
        current_logger=logger,
    )
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
