import pytest

from agent_installer.errors import PrivilegeError
from common.system_utils import (
    OsInfo,
    PackageType,
    detect_os,
    get_architecture,
    parse_os_release,
    require_root,
)


def test_require_root_passes_for_root(mocker):
    mocker.patch("common.system_utils.os.geteuid", return_value=0)

    require_root()


def test_require_root_raises_permission_error(mocker):
    mocker.patch("common.system_utils.os.geteuid", return_value=1000)

    with pytest.raises(PermissionError) as exc_info:
        require_root()

    assert isinstance(exc_info.value, PrivilegeError)
    assert exc_info.value.exit_code == 1


def test_parse_os_release_strips_quotes_and_comments():
    values = parse_os_release(
        '# comment\n\nNAME="CentOS Linux"\nID=centos\nVERSION_ID=\'7\'\ngarbage\n'
    )

    assert values == {"NAME": "CentOS Linux", "ID": "centos", "VERSION_ID": "7"}


@pytest.mark.parametrize(
    "content, download_dir, package_type",
    [
        ("centos", "centos", PackageType.RPM),
        ("ubuntu", "ubuntu", PackageType.DEB),
        ('NAME="Debian GNU/Linux"\n', "debian", PackageType.DEB),
        ('NAME="Red Hat Enterprise Linux"\n', "redhat", PackageType.RPM),
        ('NAME="Amazon Linux"\n', "amazon_linux", PackageType.RPM),
        ('NAME="SLES"\n', "suse", PackageType.RPM),
        ('NAME="Other"\nPRETTY_NAME="CentOS Stream 9"\n', "centos", PackageType.RPM),
    ],
)
def test_detect_os_known_distributions(
    app_settings,
    mock_logger,
    write_os_release,
    os_release_samples,
    content,
    download_dir,
    package_type,
):
    write_os_release(os_release_samples.get(content, content))

    os_info = detect_os(app_settings, current_logger=mock_logger)

    assert os_info.supported is True
    assert os_info.download_dir == download_dir
    assert os_info.package_type == package_type


def test_detect_os_unknown_distribution(
    app_settings, mock_logger, write_os_release, os_release_samples
):
    write_os_release(os_release_samples["arch"])

    os_info = detect_os(app_settings, current_logger=mock_logger)

    assert os_info == OsInfo(name="Arch Linux")
    assert os_info.supported is False


def test_detect_os_missing_release_file(app_settings, mock_logger):
    os_info = detect_os(app_settings, current_logger=mock_logger)

    assert os_info.name == "unknown"
    assert os_info.supported is False
    mock_logger.warning.assert_called_once()


def test_detect_os_explicit_path(
    app_settings, mock_logger, tmp_path, os_release_samples
):
    release = tmp_path / "custom-release"
    release.write_text(os_release_samples["ubuntu"], encoding="utf-8")

    os_info = detect_os(
        app_settings, current_logger=mock_logger, os_release_path=release
    )

    assert os_info.download_dir == "ubuntu"


def test_get_architecture_prefers_settings(app_settings, mocker):
    machine = mocker.patch("common.system_utils.platform.machine")

    assert get_architecture(app_settings) == "amd64"
    machine.assert_not_called()


@pytest.mark.parametrize(
    "machine, expected",
    [("x86_64", "amd64"), ("AMD64", "amd64"), ("aarch64", "arm64"), ("arm64", "arm64")],
)
def test_get_architecture_detects_machine(app_settings, mocker, machine, expected):
    settings = app_settings.model_copy(update={"architecture": None})
    mocker.patch("common.system_utils.platform.machine", return_value=machine)

    assert get_architecture(settings) == expected


def test_get_architecture_unknown_machine_falls_back(
    app_settings, mocker, mock_logger
):
    settings = app_settings.model_copy(update={"architecture": None})
    mocker.patch("common.system_utils.platform.machine", return_value="riscv64")

    assert get_architecture(settings, current_logger=mock_logger) == "amd64"
    mock_logger.warning.assert_called_once()
