import dataclasses

import pytest

from pam_client import ClientConfig


def test_urls_are_normalised():
    config = ClientConfig(
        identity_tenant_url="https://id.example/",
        pcloud_url="https://vault.example/",
        client_id="u",
        client_secret="p",
    )

    assert config.token_url == "https://id.example/oauth2/platformtoken"
    assert config.api_url == "https://vault.example/PasswordVault/API"
    assert config.verify_ssl is True


def test_config_is_read_only(config):
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.client_secret = "other"


def test_repr_hides_secret(config):
    assert "s3cr3t" not in repr(config)


def test_from_toml(tmp_path):
    path = tmp_path / "creds.toml"
    path.write_text(
        'idtenanturl = "https://tenant.id.example"\n'
        'pcloudurl = "https://tenant.vault.example"\n'
        'user = "svc"\n'
        'pass = "pw"\n'
        "tlsskipverify = true\n",
        encoding="utf-8",
    )

    config = ClientConfig.from_toml(path)

    assert config.identity_tenant_url == "https://tenant.id.example"
    assert config.pcloud_url == "https://tenant.vault.example"
    assert config.client_id == "svc"
    assert config.client_secret == "pw"
    assert config.tls_skip_verify is True
    assert config.verify_ssl is False


def test_from_toml_reports_missing_keys(tmp_path):
    path = tmp_path / "creds.toml"
    path.write_text('idtenanturl = "https://tenant.id.example"\n', encoding="utf-8")

    with pytest.raises(ValueError) as excinfo:
        ClientConfig.from_toml(path)

    assert "pcloudurl" in str(excinfo.value)
    assert "pass" in str(excinfo.value)
