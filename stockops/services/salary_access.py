# stockops/services/salary_access.py
import logging
import secrets
from typing import Any, Optional

from stockops.core.exceptions import ConfigurationError, SalaryAccessError
from stockops.services.identity import AuthenticatedUser

logger = logging.getLogger(__name__)


class SalaryAccessGate:
    """Checks the salary page password against the server-side secret."""

    def __init__(self, secret: Optional[str], max_length: int = 100):
        self.secret = secret
        self.max_length = max_length
        if not secret:
            logger.error("SALARY_ACCESS_PASSWORD environment variable is not set")

    def verify(self, user: AuthenticatedUser, password: Any) -> None:
        """
        Raises:
            SalaryAccessError: password missing, too long, or wrong
            ConfigurationError: no secret configured
        """
        if not password or not isinstance(password, str):
            raise SalaryAccessError("Password is required", status_code=400)

        # Bound the comparison work
        if len(password) > self.max_length:
            raise SalaryAccessError("Invalid password", status_code=400)

        if not self.secret:
            raise ConfigurationError("Service configuration error")

        if not secrets.compare_digest(password.encode("utf8"), self.secret.encode("utf8")):
            logger.info(f"Failed salary access attempt by user: {user.id}")
            raise SalaryAccessError("Incorrect password", status_code=403)

        logger.info(f"Salary access granted to user: {user.id}")
