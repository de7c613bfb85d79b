"""
Pydantic model for the service-account credentials file used to obtain
an AEM access token.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from sta_actions.exceptions import TokenFetchError


class ServiceCredentials(BaseModel):
    """The subset of the integration credentials needed for a JWT exchange."""

    client_id: str
    client_secret: str = Field(..., repr=False)
    technical_account_id: str
    org_id: str
    private_key: str = Field(..., repr=False)
    meta_scopes: list[str] = Field(default_factory=list)
    ims_endpoint: str

    @field_validator("meta_scopes", mode="before")
    @classmethod
    def split_meta_scopes(cls, v: Any) -> list[str]:
        """Accepts a single scope, a comma separated string, or a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [s.strip() for s in v.split(",") if s.strip()]
        return v

    @property
    def ims_url(self) -> str:
        """Base URL of the IMS service, `https://` unless a scheme is given."""
        endpoint = self.ims_endpoint.rstrip("/")
        if "://" in endpoint:
            return endpoint
        return f"https://{endpoint}"

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ServiceCredentials":
        """Builds credentials from the parsed JSON of a credentials file."""
        integration = raw.get("integration") or {}
        technical_account = integration.get("technicalAccount") or {}
        try:
            return cls(
                client_id=technical_account.get("clientId"),
                client_secret=technical_account.get("clientSecret"),
                technical_account_id=integration.get("id"),
                org_id=integration.get("org"),
                private_key=integration.get("privateKey"),
                meta_scopes=integration.get("metascopes"),
                ims_endpoint=integration.get("imsEndpoint"),
            )
        except ValidationError as e:
            # Field names only; input values may be secrets.
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            raise TokenFetchError(f"Credentials are incomplete or invalid: {fields}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "ServiceCredentials":
        """
        Reads and parses a credentials JSON file.

        Raises:
            TokenFetchError: If the file cannot be read, is not JSON, or lacks
            required fields.
        """
        try:
            with open(path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise TokenFetchError(f"Could not read credentials file '{path}': {e}") from e
        if not isinstance(raw, dict):
            raise TokenFetchError(f"Credentials file '{path}' is not a JSON object.")
        return cls.from_dict(raw)
