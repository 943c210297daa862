import json

import pytest
import typer
from typer.testing import CliRunner

from conftest import API_URL, IDENTITY_URL, PCLOUD_URL, TOKEN_RESPONSE, TOKEN_URL
from pam_client.cli import _build_client, app

runner = CliRunner()

CONNECTION_ARGS = [
    "--identity-url",
    IDENTITY_URL,
    "--pcloud-url",
    PCLOUD_URL,
    "--client-id",
    "svc",
    "--client-secret",
    "pw",
]


def test_session_command_reports_type_without_token(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)

    result = runner.invoke(app, ["session", *CONNECTION_ARGS])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["tokenType"] == "Bearer"
    assert "expiration" in payload
    assert "tok123" not in result.output


def test_session_command_reports_auth_error(requests_mock):
    requests_mock.post(
        TOKEN_URL,
        status_code=400,
        json={"error": "invalid_client", "error_description": "bad creds"},
    )

    result = runner.invoke(app, ["session", *CONNECTION_ARGS])

    assert result.exit_code == 1
    assert "bad creds" in result.output


def test_platforms_list_json(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    requests_mock.get(
        f"{API_URL}/Platforms/",
        json={"Platforms": [{"general": {"id": "UnixSSH", "name": "Unix via SSH"}}], "Total": 1},
    )

    result = runner.invoke(app, ["platforms", "list", *CONNECTION_ARGS, "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)[0]["general"]["id"] == "UnixSSH"


def test_platforms_list_table(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    requests_mock.get(
        f"{API_URL}/Platforms/",
        json={
            "Platforms": [
                {
                    "general": {"id": "UnixSSH", "name": "Unix via SSH", "active": True},
                    "properties": {"required": [{"name": "Username"}], "optional": []},
                }
            ]
        },
    )

    result = runner.invoke(app, ["platforms", "list", *CONNECTION_ARGS])

    assert result.exit_code == 0, result.output
    assert "Platforms" in result.output
    assert "UnixSSH" in result.output
    assert "Username" in result.output


def test_accounts_list_passes_query(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    matcher = requests_mock.get(
        f"{API_URL}/Accounts",
        json={"value": [{"id": "12_3", "name": "root-acct", "safeName": "mysafe1"}], "count": 1},
    )

    result = runner.invoke(
        app,
        [
            "accounts",
            "list",
            *CONNECTION_ARGS,
            "--filter",
            "safeName eq mysafe1",
            "--limit",
            "5",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "root-acct" in result.output
    assert matcher.last_request.headers["Authorization"] == "Bearer tok123"


def test_accounts_list_rejects_invalid_limit_before_request(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    matcher = requests_mock.get(f"{API_URL}/Accounts", json={"value": [], "count": 0})

    result = runner.invoke(app, ["accounts", "list", *CONNECTION_ARGS, "--limit", "1001"])

    assert result.exit_code == 1
    assert "limit valid range" in result.output
    assert not matcher.called


def test_safes_add_existing_ok(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    requests_mock.post(
        f"{API_URL}/Safes/",
        status_code=409,
        json={"ErrorCode": "SFWS0002", "ErrorMessage": "Safe mysafe already exists."},
    )
    requests_mock.get(f"{API_URL}/Safes/mysafe", json={"safeName": "mysafe", "safeNumber": 4})

    result = runner.invoke(
        app, ["safes", "add", *CONNECTION_ARGS, "--name", "mysafe", "--existing-ok"]
    )

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["safeNumber"] == 4


def test_safes_add_reports_remote_error(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    requests_mock.post(
        f"{API_URL}/Safes/",
        status_code=409,
        json={"ErrorCode": "SFWS0002", "ErrorMessage": "Safe mysafe already exists."},
    )

    result = runner.invoke(app, ["safes", "add", *CONNECTION_ARGS, "--name", "mysafe"])

    assert result.exit_code == 1
    assert "status 409" in result.output
    assert "SFWS0002" in result.output


def test_build_client_requires_connection_details():
    with pytest.raises(typer.BadParameter) as excinfo:
        _build_client(
            identity_url=None,
            pcloud_url=PCLOUD_URL,
            client_id="svc",
            client_secret=None,
            verify_ssl=True,
            config_path=None,
        )

    assert "--identity-url" in str(excinfo.value)
    assert "--client-secret" in str(excinfo.value)


def test_build_client_from_config_file_honours_no_verify(tmp_path):
    path = tmp_path / "creds.toml"
    path.write_text(
        f'idtenanturl = "{IDENTITY_URL}"\npcloudurl = "{PCLOUD_URL}"\nuser = "svc"\npass = "pw"\n',
        encoding="utf-8",
    )

    client = _build_client(
        identity_url=None,
        pcloud_url=None,
        client_id=None,
        client_secret=None,
        verify_ssl=False,
        config_path=path,
    )

    assert client.config.client_id == "svc"
    assert client.config.tls_skip_verify is True


def test_build_client_missing_config_file(tmp_path):
    with pytest.raises(typer.BadParameter):
        _build_client(
            identity_url=None,
            pcloud_url=None,
            client_id=None,
            client_secret=None,
            verify_ssl=True,
            config_path=tmp_path / "absent.toml",
        )


def test_env_vars_supply_connection(requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)

    result = runner.invoke(
        app,
        ["session"],
        env={
            "PAM_IDENTITY_URL": IDENTITY_URL,
            "PAM_PCLOUD_URL": PCLOUD_URL,
            "PAM_CLIENT_ID": "svc",
            "PAM_CLIENT_SECRET": "pw",
        },
    )

    assert result.exit_code == 0, result.output
