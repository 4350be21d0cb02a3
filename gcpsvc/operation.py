"""Polling of Compute Engine global operations."""

import logging
import time
from collections.abc import Callable

from google.api_core.exceptions import GoogleAPICallError
from google.cloud import compute_v1

import config
from .errors import WaitError

logger = logging.getLogger(__name__)

MAX_POLL_INTERVAL = 16


def _status_name(status) -> str:
    return getattr(status, 'name', None) or str(status)


def _operation_errors(operation: compute_v1.Operation) -> list[str]:
    if not operation.error or not operation.error.errors:
        return []
    return [f"{e.code}: {e.message}" for e in operation.error.errors]


def wait_for_global_operation(
    operations_client,
    operation,
    project: str,
    activity: str,
    timeout: float | None = None,
    poll_interval: float | None = None,
    max_interval: float = MAX_POLL_INTERVAL,
    sleep: Callable[[float], None] = time.sleep
) -> compute_v1.Operation:
    """
    Block until a global operation reaches DONE.

    The interval between polls starts at poll_interval and doubles after
    every poll that finds the operation still running, up to max_interval.

    Args:
        operations_client: compute_v1.GlobalOperationsClient (or compatible)
        operation: Operation handle returned by the mutating call, or its name
        project: GCP project ID the operation runs in
        activity: Human readable label used in logs and errors
        timeout: Seconds to wait before giving up (default from config)
        poll_interval: Initial seconds between polls (default from config)
        max_interval: Upper bound for the poll interval
        sleep: Sleep function

    Returns:
        compute_v1.Operation: The finished operation

    Raises:
        WaitError: If the operation finished with errors, polling failed,
            or the timeout elapsed
    """
    if timeout is None:
        timeout = config.get_operation_timeout()
    if poll_interval is None:
        poll_interval = config.get_operation_poll_interval()

    op_name = getattr(operation, 'name', operation)
    deadline = time.monotonic() + timeout
    interval = poll_interval
    status = None

    logger.info(f"{activity}: waiting for operation {op_name}")
    while True:
        try:
            current = operations_client.get(project=project, operation=op_name)
        except GoogleAPICallError as e:
            raise WaitError(
                f"Error waiting for {activity}: {e.message}",
                operation=op_name, status=status) from e

        status = _status_name(current.status)
        logger.debug(f"{activity}: operation {op_name} is {status}")

        if current.status == compute_v1.Operation.Status.DONE:
            errors = _operation_errors(current)
            if errors:
                raise WaitError(
                    f"Error waiting for {activity}: {'; '.join(errors)}",
                    operation=op_name, status=status)
            logger.info(f"{activity}: operation {op_name} finished")
            return current

        if time.monotonic() >= deadline:
            raise WaitError(
                f"Timeout waiting for {activity} after {timeout:g}s "
                f"(operation {op_name}, last status {status})",
                operation=op_name, status=status)

        sleep(interval)
        interval = min(interval * 2, max_interval)
