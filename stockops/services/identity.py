# stockops/services/identity.py
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from stockops.core.config import Settings
from stockops.core.exceptions import InvalidCredentialError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    role: Optional[str] = None


class IdentityVerifier:
    """
    User-scoped capability: resolves a caller's bearer token to a user.

    Talks to the identity service's `/auth/v1/user` endpoint with the public
    (anon) API key and the caller's own Authorization header, so it can never
    do more than the caller could. It holds no elevated credential.
    """

    USER_ENDPOINT = "/auth/v1/user"

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityVerifier":
        return cls(
            base_url=settings.SUPABASE_URL,
            anon_key=settings.SUPABASE_ANON_KEY,
            timeout=settings.AUTH_TIMEOUT_SECONDS,
        )

    def _get_headers(self, authorization: str) -> dict:
        return {
            "apikey": self.anon_key,
            "Authorization": authorization,
            "Accept": "application/json",
        }

    async def verify(self, authorization: str) -> AuthenticatedUser:
        """
        Verify the raw Authorization header value.

        Raises:
            InvalidCredentialError: token rejected, no user returned, or the
                identity service could not be reached
        """
        url = f"{self.base_url}{self.USER_ENDPOINT}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, headers=self._get_headers(authorization))
        except httpx.RequestError as e:
            logger.error(f"Authentication failed: identity service unreachable: {str(e)}")
            raise InvalidCredentialError()

        if response.status_code != 200:
            logger.error(f"Authentication failed: {response.status_code} {response.text[:200]}")
            raise InvalidCredentialError()

        try:
            data = response.json()
        except ValueError:
            logger.error("Authentication failed: identity service returned invalid JSON")
            raise InvalidCredentialError()

        user_id = data.get("id") if isinstance(data, dict) else None
        if not user_id:
            logger.error("Authentication failed: no user in identity response")
            raise InvalidCredentialError()

        return AuthenticatedUser(id=str(user_id), email=data.get("email"), role=data.get("role"))
