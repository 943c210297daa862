"""Configuration helpers for the PAM client."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

REQUEST_TIMEOUT = 30.0
TOKEN_PATH = "oauth2/platformtoken"
API_PATH = "PasswordVault/API"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Typed, read-only configuration for `PAMClient`.

    Attributes:
        identity_tenant_url: Identity tenant base URL, e.g.
            ``https://EXAMPLE123.id.cyberark.cloud``.
        pcloud_url: Vault service base URL, e.g.
            ``https://EXAMPLE123.privilegecloud.cyberark.cloud``.
        client_id: Service account user used for the client-credentials grant.
        client_secret: Service account password.
        tls_skip_verify: Disables certificate validation. Defaults to False.
    """

    identity_tenant_url: str
    pcloud_url: str
    client_id: str
    client_secret: str = field(repr=False)
    tls_skip_verify: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "identity_tenant_url", self.identity_tenant_url.rstrip("/"))
        object.__setattr__(self, "pcloud_url", self.pcloud_url.rstrip("/"))

    @property
    def token_url(self) -> str:
        return f"{self.identity_tenant_url}/{TOKEN_PATH}"

    @property
    def api_url(self) -> str:
        return f"{self.pcloud_url}/{API_PATH}"

    @property
    def verify_ssl(self) -> bool:
        return not self.tls_skip_verify

    def resolved_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ClientConfig:
        missing = [key for key in ("idtenanturl", "pcloudurl", "user", "pass") if not data.get(key)]
        if missing:
            raise ValueError(f"Missing configuration keys: {', '.join(missing)}")
        return cls(
            identity_tenant_url=str(data["idtenanturl"]),
            pcloud_url=str(data["pcloudurl"]),
            client_id=str(data["user"]),
            client_secret=str(data["pass"]),
            tls_skip_verify=bool(data.get("tlsskipverify", False)),
        )

    @classmethod
    def from_toml(cls, path: str | Path) -> ClientConfig:
        """Load a ``creds.toml`` file.

        The file holds ``idtenanturl``, ``pcloudurl``, ``user`` and ``pass``,
        plus an optional ``tlsskipverify`` boolean.
        """
        with Path(path).expanduser().open("rb") as f:
            data = tomllib.load(f)
        return cls.from_mapping(data)
