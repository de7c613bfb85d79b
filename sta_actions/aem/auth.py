"""
Handles obtaining an AEM access token by exchanging a signed service-account
JWT with the IMS token service.
"""

import asyncio
import logging
import time
from pathlib import Path
from typing import Any

import aiohttp
import jwt

from sta_actions.exceptions import TokenFetchError
from sta_actions.models.credentials import ServiceCredentials

log = logging.getLogger(__name__)

JWT_LIFETIME_SECONDS = 300
EXCHANGE_PATH = "/ims/exchange/jwt"


class AccessTokenFetcher:
    """
    Manages the JWT exchange flow for one set of service credentials.
    """

    def __init__(
        self,
        credentials: ServiceCredentials,
        session: aiohttp.ClientSession | None = None,
    ):
        """
        Initializes the fetcher.

        Args:
            credentials: Parsed service-account credentials.
            session: An optional session to reuse; one is created otherwise.
        """
        self.credentials = credentials
        self._session = session

    @classmethod
    def from_file(cls, credentials_path: str | Path) -> "AccessTokenFetcher":
        return cls(ServiceCredentials.from_file(credentials_path))

    def build_claims(self, now: int | None = None) -> dict[str, Any]:
        """
        Builds the JWT claims expected by IMS.

        Args:
            now: Current unix time, for deterministic tests.
        """
        creds = self.credentials
        ims = creds.ims_url
        issued = int(time.time()) if now is None else now
        claims: dict[str, Any] = {
            "exp": issued + JWT_LIFETIME_SECONDS,
            "iss": creds.org_id,
            "sub": creds.technical_account_id,
            "aud": f"{ims}/c/{creds.client_id}",
        }
        for scope in creds.meta_scopes:
            claims[f"{ims}/s/{scope}"] = True
        return claims

    def build_jwt(self, now: int | None = None) -> str:
        """Signs the claims with the account's private key (RS256)."""
        try:
            return jwt.encode(
                self.build_claims(now), self.credentials.private_key, algorithm="RS256"
            )
        except (jwt.PyJWTError, ValueError, TypeError) as e:
            raise TokenFetchError(f"Could not sign the JWT: {e}") from e

    async def fetch(self) -> str:
        """
        Exchanges a freshly signed JWT for an access token.

        Returns:
            The access token.

        Raises:
            TokenFetchError: If signing or the exchange fails.
        """
        payload = {
            "client_id": self.credentials.client_id,
            "client_secret": self.credentials.client_secret,
            "jwt_token": self.build_jwt(),
        }
        url = f"{self.credentials.ims_url}{EXCHANGE_PATH}"
        log.debug(f"Exchanging JWT at {url}")

        session = self._session
        owns_session = session is None
        if owns_session:
            session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=60, connect=15)
            )
        try:
            async with session.post(url, data=payload) as response:
                body = await response.json(content_type=None)
                if response.status != 200:
                    description = ""
                    if isinstance(body, dict):
                        description = body.get("error_description") or body.get("error", "")
                    raise TokenFetchError(
                        f"Token exchange failed ({response.status}): {description}"
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TokenFetchError(
                f"Token exchange failed: {str(e) or type(e).__name__}"
            ) from e
        finally:
            if owns_session:
                await session.close()

        token = body.get("access_token") if isinstance(body, dict) else None
        if not token:
            raise TokenFetchError("Token exchange response has no access_token.")
        return token


async def fetch_access_token(credentials_path: str | Path) -> str:
    """Reads a credentials file and returns a fresh access token."""
    return await AccessTokenFetcher.from_file(credentials_path).fetch()
