"""
Bearer token authentication for the function endpoints.
"""
import logging

from fastapi import Depends, Request

from stockops.core.exceptions import AuthenticationRequiredError, InvalidCredentialError
from stockops.dependencies import get_identity_verifier
from stockops.services.identity import AuthenticatedUser, IdentityVerifier

logger = logging.getLogger(__name__)


async def get_current_user(
    request: Request,
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> AuthenticatedUser:
    """
    Resolve the caller from the Authorization header.

    A missing header is a 401; a header the identity service rejects is a 403.
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        logger.error("No authorization header provided")
        raise AuthenticationRequiredError()

    user = await verifier.verify(authorization)
    logger.info(f"Authenticated user: {user.id}")
    return user


def require_user(invalid_message: str = InvalidCredentialError().message):
    """
    Dependency to require an authenticated caller
    Usage: user: AuthenticatedUser = require_user("Unauthorized")
    """
    async def _current_user(
        request: Request,
        verifier: IdentityVerifier = Depends(get_identity_verifier),
    ) -> AuthenticatedUser:
        try:
            return await get_current_user(request, verifier)
        except InvalidCredentialError:
            raise InvalidCredentialError(invalid_message)

    return Depends(_current_user)
