# src/tests/test_cli.py

import json

import pytest

from vaultsync.bitwarden import cli


@pytest.fixture(autouse=True)
def no_spinner(mocker):
    # keep rich's live status thread out of the test run
    mocker.patch("rich.console.Console.status")


@pytest.fixture
def tools_present(mocker):
    return mocker.patch("vaultsync.common.config.shutil.which", return_value="/usr/bin/tool")


def test_load_missing_input_dir_exits(tmp_path, tools_present):
    with pytest.raises(SystemExit) as excinfo:
        cli.main_load([str(tmp_path / "nope"), "-q"])
    assert excinfo.value.code == 1


def test_load_empty_passphrase_file_exits(export_dir, tmp_path, tools_present):
    passfile = tmp_path / "pass.txt"
    passfile.write_text("")
    with pytest.raises(SystemExit) as excinfo:
        cli.main_load([str(export_dir), "-q", "-p", str(passfile)])
    assert excinfo.value.code == 1


def test_load_missing_bw_exits(export_dir, mocker):
    mocker.patch("vaultsync.common.config.shutil.which", return_value=None)
    with pytest.raises(SystemExit) as excinfo:
        cli.main_load([str(export_dir), "-q"])
    assert excinfo.value.code == 1


def test_load_runs_against_vault(export_dir, write_record, vault, tools_present, mocker):
    write_record("1", name="Mail", url="https://mail.example.com", username="jane")
    client_cls = mocker.patch("vaultsync.bitwarden.cli.BitwardenClient", return_value=vault)

    cli.main_load([str(export_dir), "-q", "-o", "org-1"])

    client_cls.assert_called_once_with(organization_id="org-1")
    assert [i["name"] for i in vault.items] == ["Mail"]
    assert vault.items[0]["organizationId"] == "org-1"


def test_load_dry_run_flag(export_dir, write_record, vault, tools_present, mocker):
    write_record("1", url="https://mail.example.com")
    mocker.patch("vaultsync.bitwarden.cli.BitwardenClient", return_value=vault)

    cli.main_load([str(export_dir), "-q", "--dry-run"])
    assert vault.items == []


def test_load_exit_code_when_record_fails(export_dir, vault, tools_present, mocker):
    (export_dir / "broken").write_text("{")
    mocker.patch("vaultsync.bitwarden.cli.BitwardenClient", return_value=vault)

    with pytest.raises(SystemExit) as excinfo:
        cli.main_load([str(export_dir), "-q"])
    assert excinfo.value.code == 1


def test_convert_writes_bitwarden_export(export_dir, write_record, tmp_path):
    write_record("1", name="Mail", group="Work", url="https://mail.example.com")
    write_record("2", name="Note", group="Work", url="http://sn", note="hello")
    output = tmp_path / "out" / "bitwarden.json"

    cli.main_convert([str(export_dir), "-q", "--output", str(output)])

    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["encrypted"] is False
    assert [f["name"] for f in data["folders"]] == ["Work"]
    folder_id = data["folders"][0]["id"]
    assert [i["folderId"] for i in data["items"]] == [folder_id, folder_id]
    assert data["items"][1]["notes"] == "hello"


def test_convert_refuses_to_overwrite_without_force(export_dir, tmp_path):
    output = tmp_path / "bitwarden.json"
    output.write_text("{}")

    with pytest.raises(SystemExit):
        cli.main_convert([str(export_dir), "-q", "--output", str(output)])

    cli.main_convert([str(export_dir), "-q", "-f", "--output", str(output)])
    assert json.loads(output.read_text())["items"] == []
