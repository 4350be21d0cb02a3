"""GCP-specific VPC network resolution and lookup functions."""

import logging
from dataclasses import dataclass

from google.api_core.exceptions import NotFound
from google.cloud import compute_v1

from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass
class NetworkLookup:
    """Outcome of fetching a network: the network itself, or found=False."""

    network: compute_v1.Network | None = None
    found: bool = False


def get_network_name(value: str | None) -> str:
    """
    Extract the network name from a name, partial URL or self link.

    Examples:
        'default' -> 'default'
        'projects/p/global/networks/net-1' -> 'net-1'
        'https://www.googleapis.com/compute/v1/projects/p/global/networks/net-1' -> 'net-1'

    Args:
        value: Network reference as supplied by the user

    Returns:
        str: Network name, or '' when value is empty
    """
    if not value:
        return ''
    return value.rstrip('/').split('/')[-1]


def require_network_name(value: str | None) -> str:
    """
    Resolve a network reference that must not be empty.

    Raises:
        ValidationError: If the reference resolves to an empty name
    """
    network = get_network_name(value)
    if not network:
        raise ValidationError('"network": required field is not set')
    return network


def lookup_network(networks_client, project: str, network: str) -> NetworkLookup:
    """
    Fetch a VPC network, reporting absence instead of raising.

    Args:
        networks_client: compute_v1.NetworksClient (or compatible)
        project: GCP project ID
        network: Network name

    Returns:
        NetworkLookup: found=False if the API reports the network missing

    Raises:
        google.api_core.exceptions.GoogleAPICallError: For any other API failure
    """
    try:
        result = networks_client.get(project=project, network=network)
    except NotFound:
        logger.debug(f"Network {project}/{network} not found")
        return NetworkLookup()
    return NetworkLookup(network=result, found=True)
