"""GCP-specific VPC network peering lifecycle functions."""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import compute_v1

from .errors import OperationError, ValidationError
from .network import lookup_network, require_network_name
from .operation import wait_for_global_operation
from .session import (create_global_operations_client, create_networks_client,
                      resolve_project)

logger = logging.getLogger(__name__)

# Field descriptor for a peering connection. Every user-settable field forces
# a new peering when changed; computed fields are only ever written by read().
SCHEMA: dict[str, dict[str, Any]] = {
    'name': {'type': str, 'required': True, 'force_new': True},
    'network': {'type': str, 'required': True, 'force_new': True},
    'project': {'type': str, 'optional': True, 'force_new': True},
    'peer_network': {'type': str, 'required': True, 'force_new': True},
    'auto_create_routes': {'type': bool, 'optional': True, 'force_new': True},
    'state': {'type': str, 'computed': True},
    'state_details': {'type': str, 'computed': True},
}


@dataclass
class PeeringConnection:
    """A VPC network peering as tracked locally. An empty id means untracked."""

    name: str = ''
    network: str = ''
    peer_network: str = ''
    project: str | None = None
    auto_create_routes: bool = False
    state: str = ''
    state_details: str = ''
    id: str = ''

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'PeeringConnection':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def validate(connection: PeeringConnection) -> None:
    """
    Check that every required field is set.

    Raises:
        ValidationError: Naming the first missing field
    """
    for field_name, spec in SCHEMA.items():
        if spec.get('required') and not getattr(connection, field_name):
            raise ValidationError(f'"{field_name}": required field is not set')


class PeeringController:
    """
    Create, read and delete VPC network peerings.

    Clients, default project and polling policy are passed in at
    construction; anything left as None is created on first use.
    """

    def __init__(self, networks_client=None, operations_client=None,
                 default_project: str | None = None,
                 timeout: float | None = None, poll_interval: float | None = None):
        self._networks_client = networks_client
        self._operations_client = operations_client
        self.default_project = default_project
        self.timeout = timeout
        self.poll_interval = poll_interval

    @property
    def networks_client(self):
        if self._networks_client is None:
            self._networks_client = create_networks_client()
        return self._networks_client

    @property
    def operations_client(self):
        if self._operations_client is None:
            self._operations_client = create_global_operations_client()
        return self._operations_client

    def _resolve(self, connection: PeeringConnection) -> tuple[str, str]:
        project = resolve_project(connection.project, self.default_project)
        network = require_network_name(connection.network)
        return project, network

    def _wait(self, operation, project: str, activity: str) -> None:
        wait_for_global_operation(
            self.operations_client, operation, project, activity,
            timeout=self.timeout, poll_interval=self.poll_interval)

    def create(self, desired: PeeringConnection) -> PeeringConnection | None:
        """
        Add a peering to the owning network and wait for it to complete.

        The local id is set to the peering name as soon as the API accepts
        the request, so a failed wait leaves the connection tracked.

        Args:
            desired: Peering to create

        Returns:
            PeeringConnection | None: The refreshed connection, or None if
                it could not be found after creation

        Raises:
            ValidationError: Required field missing or unresolvable
            OperationError: The add-peering call was rejected
            WaitError: The operation failed or timed out
        """
        validate(desired)
        project, network = self._resolve(desired)

        request = compute_v1.NetworksAddPeeringRequest(
            name=desired.name,
            peer_network=desired.peer_network,
        )
        # Assigned even when False so the field is present on the wire
        request.auto_create_routes = bool(desired.auto_create_routes)

        logger.debug(f"Network add peering request for {project}/{network}: {request}")
        try:
            operation = self.networks_client.add_peering(
                project=project,
                network=network,
                networks_add_peering_request_resource=request
            )
        except GoogleAPICallError as e:
            raise OperationError(f"Error creating network peering: {e.message}") from e

        desired.id = request.name
        logger.info(f"Creating network peering {desired.id} on {project}/{network}")

        self._wait(operation, project, "Creating Network Peering")
        return self.read(desired)

    def read(self, existing: PeeringConnection) -> PeeringConnection | None:
        """
        Refresh a peering from its owning network.

        Args:
            existing: Tracked peering (id and network must be set)

        Returns:
            PeeringConnection | None: The updated connection, or None (with
                its id cleared) when the network or peering no longer exists

        Raises:
            ValidationError: Project or network unresolvable
            google.api_core.exceptions.GoogleAPICallError: Any API failure
                other than not-found
        """
        project, network_name = self._resolve(existing)

        lookup = lookup_network(self.networks_client, project, network_name)
        if not lookup.found:
            logger.warning(
                f'Network "{network_name}" for peering "{existing.id}" not found, removing from state')
            existing.id = ''
            return None

        for peering in lookup.network.peerings:
            if peering.name == existing.id:
                existing.name = peering.name
                if not existing.peer_network:
                    existing.peer_network = peering.network
                existing.auto_create_routes = peering.auto_create_routes
                existing.state = peering.state
                existing.state_details = peering.state_details
                return existing

        logger.warning(
            f'Network peering "{existing.id}" not found in network "{network_name}", removing from state')
        existing.id = ''
        return None

    def delete(self, existing: PeeringConnection) -> None:
        """
        Remove a peering from its owning network and wait for completion.

        The local id is cleared only after the operation succeeds.

        Raises:
            ValidationError: Project or network unresolvable
            OperationError: The remove-peering call was rejected
            WaitError: The operation failed or timed out
        """
        project, network = self._resolve(existing)

        request = compute_v1.NetworksRemovePeeringRequest(name=existing.id)

        try:
            operation = self.networks_client.remove_peering(
                project=project,
                network=network,
                networks_remove_peering_request_resource=request
            )
        except GoogleAPICallError as e:
            raise OperationError(f"Error deleting network peering: {e.message}") from e

        self._wait(operation, project, "Deleting Network Peering")

        logger.info(f"Deleted network peering {existing.id} from {project}/{network}")
        existing.id = ''

    @staticmethod
    def import_state(identifier: str, network: str,
                     project: str | None = None) -> PeeringConnection:
        """
        Start tracking an existing peering by its name.

        The identifier is used verbatim; read() must follow to populate the
        remaining fields.
        """
        return PeeringConnection(name=identifier, network=network,
                                 project=project, id=identifier)
