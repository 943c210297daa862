import pytest

from pam_client import ClientConfig, PAMClient

IDENTITY_URL = "https://tenant.id.example.cloud"
PCLOUD_URL = "https://tenant.privilegecloud.example.cloud"
TOKEN_URL = f"{IDENTITY_URL}/oauth2/platformtoken"
API_URL = f"{PCLOUD_URL}/PasswordVault/API"

TOKEN_RESPONSE = {"access_token": "tok123", "token_type": "Bearer", "expires_in": 3600}


@pytest.fixture
def config():
    return ClientConfig(
        identity_tenant_url=IDENTITY_URL,
        pcloud_url=PCLOUD_URL,
        client_id="svc-user@example",
        client_secret="s3cr3t",
    )


@pytest.fixture
def client(config):
    with PAMClient(config) as pam:
        yield pam


@pytest.fixture
def authed_client(client, requests_mock):
    requests_mock.post(TOKEN_URL, json=TOKEN_RESPONSE)
    client.refresh_session()
    return client


@pytest.fixture(autouse=True)
def _no_ca_bundle_env(monkeypatch):
    # requests swaps verify=True for these paths when they are set
    monkeypatch.delenv("REQUESTS_CA_BUNDLE", raising=False)
    monkeypatch.delenv("CURL_CA_BUNDLE", raising=False)
