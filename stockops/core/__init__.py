"""
Core module exports.
"""
from .exceptions import (
    BaseServiceError,
    AuthenticationRequiredError,
    InvalidCredentialError,
    StoreOperationError,
    CorrectionBatchError,
    ConfigurationError,
    SalaryAccessError,
)
