import logging
import subprocess
from unittest.mock import MagicMock

import pytest

from agent_installer.config_models import SYMBOLS_DEFAULT, AppSettings
from common.command_utils import (
    command_exists,
    get_symbols,
    log_installer,
    run_command,
)


@pytest.fixture
def plain_settings():
    """AppSettings with simple ASCII symbols for predictable messages."""
    return AppSettings(
        symbols={"warning": "!", "gear": "*", "error": "x"},
    )


@pytest.fixture
def mock_subprocess_run(mocker):
    return mocker.patch("common.command_utils.subprocess.run")


@pytest.mark.parametrize(
    "level, method",
    [
        ("debug", "debug"),
        ("info", "info"),
        ("warning", "warning"),
        ("error", "error"),
        ("critical", "critical"),
        ("success", "info"),
    ],
)
def test_log_installer_dispatches_to_level(mock_logger, level, method):
    log_installer("hello", level, mock_logger)

    getattr(mock_logger, method).assert_called_once_with(
        "hello", exc_info=False
    )


def test_log_installer_uses_module_logger_by_default(mocker):
    module_logger = mocker.patch("common.command_utils.module_logger")

    log_installer("fallback", "warning")

    module_logger.warning.assert_called_once_with("fallback", exc_info=False)


def test_get_symbols_falls_back_to_defaults():
    assert get_symbols(None) == SYMBOLS_DEFAULT


def test_run_command_list_success(
    mock_subprocess_run, mock_logger, plain_settings
):
    completed = subprocess.CompletedProcess(["echo", "hi"], 0, "hi\n", "")
    mock_subprocess_run.return_value = completed

    result = run_command(
        ["echo", "hi"],
        plain_settings,
        capture_output=True,
        current_logger=mock_logger,
    )

    assert result is completed
    mock_subprocess_run.assert_called_once_with(
        ["echo", "hi"],
        check=True,
        capture_output=True,
        text=True,
        input=None,
        cwd=None,
        env=None,
    )
    mock_logger.info.assert_any_call("* Executing: echo hi", exc_info=False)
    mock_logger.debug.assert_any_call("   stdout: hi", exc_info=False)


def test_run_command_converts_paths_and_logs_cwd(
    mock_subprocess_run, mock_logger, plain_settings, tmp_path
):
    mock_subprocess_run.return_value = MagicMock(returncode=0)
    package = tmp_path / "agent package.rpm"

    run_command(
        ["rpm", "-U", package],
        plain_settings,
        current_logger=mock_logger,
        cwd=tmp_path,
    )

    assert mock_subprocess_run.call_args.args[0] == ["rpm", "-U", str(package)]
    mock_logger.info.assert_called_once_with(
        f"* Executing: rpm -U \"{package}\" (in {tmp_path})", exc_info=False
    )
    mock_logger.warning.assert_not_called()


def test_run_command_failure_without_output(
    mock_subprocess_run, mock_logger, plain_settings
):
    mock_subprocess_run.side_effect = subprocess.CalledProcessError(1, ["false"])

    with pytest.raises(subprocess.CalledProcessError):
        run_command(["false"], plain_settings, current_logger=mock_logger)

    mock_logger.error.assert_called_once_with(
        "x Command `false` failed (rc 1).", exc_info=False
    )


def test_run_command_called_process_error_is_logged_and_raised(
    mock_subprocess_run, mock_logger, plain_settings
):
    mock_subprocess_run.side_effect = subprocess.CalledProcessError(
        3, ["rpm", "-U", "pkg.rpm"], output="partial", stderr="broken"
    )

    with pytest.raises(subprocess.CalledProcessError):
        run_command(
            ["rpm", "-U", "pkg.rpm"],
            plain_settings,
            current_logger=mock_logger,
        )

    mock_logger.error.assert_any_call(
        "x Command `rpm -U pkg.rpm` failed (rc 3).", exc_info=False
    )
    mock_logger.error.assert_any_call("   stdout: partial", exc_info=False)
    mock_logger.error.assert_any_call("   stderr: broken", exc_info=False)


def test_run_command_missing_executable(
    mock_subprocess_run, mock_logger, plain_settings
):
    error = FileNotFoundError(2, "No such file or directory")
    error.filename = "amazon-cloudwatch-agent-ctl"
    mock_subprocess_run.side_effect = error

    with pytest.raises(FileNotFoundError):
        run_command(
            ["amazon-cloudwatch-agent-ctl", "-a", "start"],
            plain_settings,
            current_logger=mock_logger,
        )

    mock_logger.error.assert_called_once_with(
        "x Command not found: amazon-cloudwatch-agent-ctl. Ensure it's installed and in PATH.",
        exc_info=False,
    )


def test_run_command_without_settings_uses_default_symbols(
    mock_subprocess_run, mock_logger
):
    mock_subprocess_run.return_value = MagicMock(returncode=0)

    run_command(["true"], None, current_logger=mock_logger)

    mock_logger.info.assert_any_call(
        f"{SYMBOLS_DEFAULT['gear']} Executing: true", exc_info=False
    )


def test_command_exists(mocker):
    which = mocker.patch(
        "common.command_utils.shutil.which",
        side_effect=lambda name: "/usr/bin/curl" if name == "curl" else None,
    )

    assert command_exists("curl") is True
    assert command_exists("wget") is False
    assert which.call_count == 2


def test_run_command_real_process_logs_to_logger(caplog):
    caplog.set_level(logging.INFO, logger="command-test")

    result = run_command(
        ["true"], None, current_logger=logging.getLogger("command-test")
    )

    assert result.returncode == 0
    assert "Executing: true" in caplog.text
