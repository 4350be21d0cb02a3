"""Shared pytest fixtures"""

import itertools

import pytest
from unittest.mock import MagicMock
from google.api_core.exceptions import NotFound
from google.cloud import compute_v1

import config
from gcpsvc.peering import PeeringController


class FakeNetworksClient:
    """In-memory stand-in for compute_v1.NetworksClient."""

    def __init__(self, networks=None):
        # (project, network) -> list of compute_v1.NetworkPeering
        self.networks = {key: list(peerings) for key, peerings in (networks or {}).items()}
        self.add_requests = []
        self.remove_requests = []
        self._ids = itertools.count(1)

    def _operation(self):
        return compute_v1.Operation(
            name=f"operation-{next(self._ids)}",
            status=compute_v1.Operation.Status.RUNNING)

    def get(self, project, network):
        if (project, network) not in self.networks:
            raise NotFound(f"The resource 'projects/{project}/global/networks/{network}' was not found")
        return compute_v1.Network(name=network, peerings=self.networks[(project, network)])

    def add_peering(self, project, network, networks_add_peering_request_resource):
        request = networks_add_peering_request_resource
        self.add_requests.append((project, network, request))
        self.networks.setdefault((project, network), []).append(compute_v1.NetworkPeering(
            name=request.name,
            network=request.peer_network,
            auto_create_routes=request.auto_create_routes,
            state="ACTIVE",
            state_details="Connected."))
        return self._operation()

    def remove_peering(self, project, network, networks_remove_peering_request_resource):
        request = networks_remove_peering_request_resource
        self.remove_requests.append((project, network, request))
        peerings = self.networks.get((project, network), [])
        self.networks[(project, network)] = [p for p in peerings if p.name != request.name]
        return self._operation()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config at an empty location and clear the project env var"""
    monkeypatch.setattr(config, "CONFIG_PATH", tmp_path / "config.json")
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    config.reset_config()
    yield
    config.reset_config()


@pytest.fixture
def networks_client():
    return FakeNetworksClient({("my-project", "net-1"): []})


@pytest.fixture
def operations_client():
    """Global operations client whose operations are already DONE"""
    client = MagicMock()
    client.get.side_effect = lambda project, operation: compute_v1.Operation(
        name=operation, status=compute_v1.Operation.Status.DONE)
    return client


@pytest.fixture
def controller(networks_client, operations_client):
    return PeeringController(
        networks_client=networks_client,
        operations_client=operations_client,
        default_project="my-project",
        timeout=5,
        poll_interval=0,
    )
