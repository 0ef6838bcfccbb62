"""End-to-end tests for the coobctl command line."""

import json
import xml.etree.ElementTree as ET
from unittest.mock import patch, MagicMock

import pytest

from constants import Constants, ExitCodes
import coobctl

BASE = "http://repo.local:5000"


@pytest.fixture(autouse=True)
def isolated_cli(tmp_path, monkeypatch):
    """Keep the CLI away from the real environment and root logger."""
    monkeypatch.chdir(tmp_path)
    for name in (Constants.ENV_CATALOG_URL, Constants.ENV_REQUEST_TIMEOUT,
                 Constants.ENV_ROOT_DIR, Constants.ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(coobctl, "configure_logging", MagicMock())


@pytest.fixture
def published(fake_repo, make_coob, make_manifest):
    fake_repo.publish(f"{BASE}/Coral.Atoll.2.0.0.coob", make_coob({
        "coob.props": make_manifest("Coral.Atoll", "2.0.0", ["Coral.Common.1.4.2"]),
    }))
    fake_repo.publish(f"{BASE}/Coral.Common.1.4.2.coob", make_coob({
        "coob.props": make_manifest("Coral.Common", "1.4.2"),
    }))
    return fake_repo


def _run(*argv):
    with pytest.raises(SystemExit) as exc_info:
        coobctl.main(list(argv))
    return exc_info.value.code


class TestRestoreCommand:

    def test_success(self, tmp_path, published, capsys):
        code = _run("restore", "Coral.Atoll", "2.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.SUCCESS.value
        assert capsys.readouterr().out.strip() == "Coral.Atoll 2.0.0"
        assert (tmp_path / "Coobs" / "Coral.Common" / "coob.props").is_file()

    def test_latest_from_catalog(self, tmp_path, published, capsys):
        listing = MagicMock(status_code=200, text=json.dumps({"Coral.Atoll.2.0.0.coob": {}}))
        with patch("registry.catalog.safe_get", return_value=listing) as mock_get:
            code = _run("restore", "Coral.Atoll", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.SUCCESS.value
        assert mock_get.call_args.args[0] == BASE
        assert "2.0.0" in capsys.readouterr().out

    def test_invalid_version_is_usage_error(self, tmp_path, published):
        code = _run("restore", "Coral.Atoll", "2.00.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.USAGE_ERROR.value
        assert published.calls == []

    def test_invalid_ceiling_is_usage_error(self, tmp_path, published):
        code = _run("restore", "Coral.Atoll", "--ceiling", "x", "--root-dir", str(tmp_path))
        assert code == ExitCodes.USAGE_ERROR.value

    def test_download_failure_exit_code(self, tmp_path, published):
        published.fail(f"{BASE}/Coral.Common.1.4.2.coob")

        code = _run("restore", "Coral.Atoll", "2.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.CONNECTION_ERROR.value
        assert (tmp_path / "Coobs" / "Coral.Atoll").is_dir()

    def test_parent_directory_package_is_rejected(self, tmp_path, published):
        keep = tmp_path / "important.txt"
        keep.write_text("keep")

        code = _run("restore", "..", "1.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.RESOLUTION_ERROR.value
        assert keep.read_text() == "keep"
        assert published.calls == []

    def test_local_write_error_is_connection_error(self, tmp_path):
        with patch("registry.fetcher.download_to_file", side_effect=IsADirectoryError("Is a directory")):
            code = _run("restore", "Coral.Atoll", "2.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.CONNECTION_ERROR.value

    def test_no_version_available_exit_code(self, tmp_path, published):
        listing = MagicMock(status_code=200, text="{}")
        with patch("registry.catalog.safe_get", return_value=listing):
            code = _run("restore", "Coral.Atoll", "--catalog-url", BASE, "--root-dir", str(tmp_path))
        assert code == ExitCodes.RESOLUTION_ERROR.value

    def test_overwrite_clears_stale_packages(self, tmp_path, published):
        stale = tmp_path / "Coobs" / "Old.Package"
        stale.mkdir(parents=True)

        code = _run("restore", "Coral.Atoll", "2.0.0", "--overwrite",
                    "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert code == ExitCodes.SUCCESS.value
        assert not stale.exists()
        assert sorted(p.name for p in (tmp_path / "Coobs").iterdir()) == ["Coral.Atoll", "Coral.Common"]

    def test_without_overwrite_other_packages_stay(self, tmp_path, published):
        other = tmp_path / "Coobs" / "Old.Package"
        other.mkdir(parents=True)

        _run("restore", "Coral.Atoll", "2.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        assert other.is_dir()

    def test_catalog_url_from_environment(self, tmp_path, published, monkeypatch):
        monkeypatch.setenv(Constants.ENV_CATALOG_URL, BASE)

        code = _run("restore", "Coral.Atoll", "2.0.0", "--root-dir", str(tmp_path))

        assert code == ExitCodes.SUCCESS.value
        assert published.calls[0] == f"{BASE}/Coral.Atoll.2.0.0.coob"


class TestCoobVersionsCommand:

    def test_writes_vars_file_after_restore(self, tmp_path, published):
        _run("restore", "Coral.Atoll", "2.0.0", "--catalog-url", BASE, "--root-dir", str(tmp_path))

        code = _run("coob-versions", "--root-dir", str(tmp_path))

        assert code == ExitCodes.SUCCESS.value
        root = ET.parse(tmp_path / "Coobs" / Constants.COOB_VERSIONS_VARS_FILE).getroot()
        values = {e.get("name"): e.text for e in root.find("Configuration")}
        assert values == {"Coral.Atoll.CoobVersion": "2.0.0", "Coral.Common.CoobVersion": "1.4.2"}

    def test_missing_package_is_file_error(self, tmp_path):
        code = _run("coob-versions", "-p", "Nothing.Here", "--root-dir", str(tmp_path))
        assert code == ExitCodes.FILE_ERROR.value


def test_command_is_required():
    with pytest.raises(SystemExit) as exc_info:
        coobctl.main([])
    assert exc_info.value.code == 2
