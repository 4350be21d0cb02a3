"""Exceptions raised by GCP peering management."""


class PeeringError(Exception):
    """Base class for peering lifecycle failures."""


class ValidationError(PeeringError):
    """A required field is unset or cannot be resolved."""


class OperationError(PeeringError):
    """The Compute Engine API rejected a request."""


class WaitError(PeeringError):
    """
    A global operation failed or did not finish in time.

    Attributes:
        operation (str): Operation name
        status (str): Last observed operation status
    """

    def __init__(self, message: str, operation: str | None = None, status: str | None = None):
        super().__init__(message)
        self.operation = operation
        self.status = status
