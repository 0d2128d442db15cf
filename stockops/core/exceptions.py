from typing import Any, Dict, List, Optional


class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class AuthenticationRequiredError(BaseServiceError):
    """Raised when a request carries no Authorization header."""
    status_code = 401

    def __init__(self, message: str = "Authorization required"):
        super().__init__(message)


class InvalidCredentialError(BaseServiceError):
    """Raised when the identity service rejects the presented token."""
    status_code = 403

    def __init__(self, message: str = "Unauthorized - Invalid or expired token"):
        super().__init__(message)


class StoreOperationError(BaseServiceError):
    """Raised when a read, write or procedure call against the store fails."""
    pass


class CorrectionBatchError(BaseServiceError):
    """
    Raised when a correction run stops part way.

    committed_steps lists the steps that were already committed before the
    failing one; it is empty when the run was atomic.
    """

    def __init__(self, message: str, committed_steps: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.committed_steps = committed_steps or []

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "committed_steps": self.committed_steps}


class ConfigurationError(BaseServiceError):
    """Raised when a required setting is missing at request time."""
    pass


class SalaryAccessError(BaseServiceError):
    """Raised when a salary access attempt is rejected."""

    def __init__(self, message: str, status_code: int = 403):
        super().__init__(message)
        self.status_code = status_code
