"""
Waiting for a container to become ready.

A detached container is considered ready once its log output contains a
marker string (for the site generator: ``Web Server is available``).
`ReadinessWaiter` polls the logs at a fixed interval until the marker shows up
or a deadline passes. Clock, sleep and log fetching are injected so the loop
can be driven without a container runtime or real time.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Callable

from sitebox.errors import ContainerTimeoutError, SiteboxError, SiteboxIOError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 60.0
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


class WaitState(str, Enum):
    WAITING = "waiting"
    READY = "ready"
    TIMEOUT = "timeout"


class ReadinessWaiter:
    """
    Polls a container's logs for a readiness marker.

    Parameters
    ----------
    fetch_logs : Callable[[str], str]
        Returns the current log output for a container name, typically
        `ContainerBackend.logs`.
    timeout : float, default 60.0
        Seconds to wait before giving up.
    interval : float, default 1.0
        Seconds to sleep between polls. No backoff is applied.
    clock : Callable[[], float], default time.monotonic
        Source of the current time in seconds.
    sleep : Callable[[float], None], default time.sleep
        Blocks for the given number of seconds.
    """

    def __init__(
        self,
        fetch_logs: Callable[[str], str],
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.fetch_logs = fetch_logs
        self.timeout = timeout
        self.interval = interval
        self.clock = clock
        self.sleep = sleep
        self.state = WaitState.WAITING

    def wait(self, name: str, marker: str) -> None:
        """
        Block until the logs of ``name`` contain ``marker``.

        Raises
        ------
        ContainerTimeoutError
            If the marker does not appear within ``timeout`` seconds.
        SiteboxIOError
            If reading the logs fails. The wait stops at the first failure.
        """
        self.state = WaitState.WAITING
        deadline = self.clock() + self.timeout
        logger.info(f"⏳ Waiting for container {name} to become ready")

        while self.state is WaitState.WAITING:
            if self.clock() >= deadline:
                self.state = WaitState.TIMEOUT
                raise ContainerTimeoutError(
                    f"timeout waiting for container {name} to become ready"
                )

            try:
                logs = self.fetch_logs(name)
            except (SiteboxError, OSError) as e:
                raise SiteboxIOError(f"could not get logs for container {name}") from e

            if marker in logs:
                self.state = WaitState.READY
                break

            logger.debug(logs)
            self.sleep(self.interval)

        logger.info(f"✅ Container {name} is ready")
