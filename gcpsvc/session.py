"""GCP-specific authentication, client creation and project resolution functions."""

from google.cloud import compute_v1

import config
from .errors import ValidationError


def create_networks_client():
    """
    Create GCP Networks client.

    Returns:
        compute_v1.NetworksClient: GCP networks client
    """
    return compute_v1.NetworksClient()


def create_global_operations_client():
    """
    Create GCP Global Operations client.

    Returns:
        compute_v1.GlobalOperationsClient: client used to poll global operations
    """
    return compute_v1.GlobalOperationsClient()


def resolve_project(project: str | None, default: str | None = None) -> str:
    """
    Resolve the project a request is scoped to.

    Args:
        project: Project set on the resource, if any
        default: Fallback project supplied by the caller

    Returns:
        str: GCP project ID

    Raises:
        ValidationError: If no project is set or configured
    """
    resolved = project or default or config.get_default_project()
    if not resolved:
        raise ValidationError('"project": required field is not set')
    return resolved
