"""Tests for global operation polling"""

import pytest
from unittest.mock import MagicMock
from google.api_core.exceptions import ServiceUnavailable
from google.cloud import compute_v1

import config
from gcpsvc.errors import WaitError
from gcpsvc.operation import wait_for_global_operation

RUNNING = compute_v1.Operation.Status.RUNNING
DONE = compute_v1.Operation.Status.DONE


def operations_returning(*statuses, error=None):
    client = MagicMock()
    responses = [compute_v1.Operation(name="operation-1", status=s) for s in statuses]
    if error is not None:
        responses[-1].error = error
    client.get.side_effect = responses
    return client


class TestWaitForGlobalOperation:
    def test_returns_when_done(self):
        client = operations_returning(RUNNING, RUNNING, DONE)
        sleeps = []

        result = wait_for_global_operation(
            client, compute_v1.Operation(name="operation-1"), "my-project", "Creating Network Peering",
            timeout=60, poll_interval=1, sleep=sleeps.append)

        assert result.status == DONE
        assert client.get.call_count == 3
        client.get.assert_called_with(project="my-project", operation="operation-1")
        assert sleeps == [1, 2]

    def test_accepts_operation_name(self):
        client = operations_returning(DONE)
        wait_for_global_operation(client, "operation-1", "my-project", "Deleting Network Peering",
                                  timeout=60, poll_interval=1)
        client.get.assert_called_once_with(project="my-project", operation="operation-1")

    def test_backoff_is_capped(self):
        client = operations_returning(*([RUNNING] * 5), DONE)
        sleeps = []

        wait_for_global_operation(client, "operation-1", "my-project", "Creating Network Peering",
                                  timeout=600, poll_interval=2, max_interval=8, sleep=sleeps.append)

        assert sleeps == [2, 4, 8, 8, 8]

    def test_operation_error(self):
        error = compute_v1.Error(errors=[
            compute_v1.Errors(code="QUOTA_EXCEEDED", message="Too many peerings"),
            compute_v1.Errors(code="INVALID", message="bad peer"),
        ])
        client = operations_returning(DONE, error=error)

        with pytest.raises(WaitError) as exc_info:
            wait_for_global_operation(client, "operation-1", "my-project", "Creating Network Peering",
                                      timeout=60, poll_interval=1)

        assert "QUOTA_EXCEEDED: Too many peerings" in str(exc_info.value)
        assert "INVALID: bad peer" in str(exc_info.value)
        assert exc_info.value.status == "DONE"
        assert exc_info.value.operation == "operation-1"

    def test_timeout_reports_last_status(self):
        client = operations_returning(RUNNING)

        with pytest.raises(WaitError, match="last status RUNNING") as exc_info:
            wait_for_global_operation(client, "operation-1", "my-project", "Creating Network Peering",
                                      timeout=0, poll_interval=1, sleep=lambda s: None)

        assert exc_info.value.status == "RUNNING"

    def test_poll_error_wrapped(self):
        client = MagicMock()
        client.get.side_effect = ServiceUnavailable("backend down")

        with pytest.raises(WaitError, match="backend down") as exc_info:
            wait_for_global_operation(client, "operation-1", "my-project", "Deleting Network Peering",
                                      timeout=60, poll_interval=1)

        assert isinstance(exc_info.value.__cause__, ServiceUnavailable)

    def test_defaults_from_config(self, monkeypatch):
        monkeypatch.setattr(config, "get_operation_timeout", lambda: 0)
        monkeypatch.setattr(config, "get_operation_poll_interval", lambda: 3)
        client = operations_returning(RUNNING)

        with pytest.raises(WaitError, match="after 0s"):
            wait_for_global_operation(client, "operation-1", "my-project", "Creating Network Peering")


def test_wait_error_defaults():
    error = WaitError("Timeout waiting for Creating Network Peering")
    assert error.operation is None
    assert error.status is None
    assert str(error) == "Timeout waiting for Creating Network Peering"
