"""
Custom exception hierarchy for the workload identity token exchange.

Each failure step of the exchange has its own exception type so callers can
decide whether to retry the whole exchange. None of these are retried
internally.
"""

from typing import Optional


class WorkloadIdentityError(Exception):
    """
    Base exception for all token exchange errors.

    Catch this to handle any failure of the exchange with a single
    except clause.
    """

    pass


class ConfigurationError(WorkloadIdentityError):
    """
    Configuration validation failed.

    Raised when required inputs are missing or invalid.
    Examples:
    - Empty tenant ID passed to the exchange
    - Empty resource passed to the exchange
    """

    pass


class FileReadError(WorkloadIdentityError):
    """
    The signed assertion could not be read.

    Raised when the token file path is unset, the file does not exist,
    cannot be read, or is empty.
    """

    pass


class CredentialConstructionError(WorkloadIdentityError):
    """
    The confidential client credential could not be built from the assertion.
    """

    pass


class ClientConstructionError(WorkloadIdentityError):
    """
    The confidential client application could not be created.

    Examples:
    - Missing AZURE_CLIENT_ID
    - Authority URL rejected by the identity library
    - Authority discovery failed
    """

    pass


class TokenAcquisitionError(WorkloadIdentityError):
    """
    The token request failed.

    Carries the identity provider's error code, description and
    correlation ID when the failure came back as an error response.
    Network failures leave these as None and chain the cause instead.
    """

    def __init__(
        self,
        message: str,
        error: Optional[str] = None,
        error_description: Optional[str] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.error_description = error_description
        self.correlation_id = correlation_id
