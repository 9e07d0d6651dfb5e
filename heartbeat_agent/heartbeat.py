"""Heartbeat loop for the heartbeat agent.

Samples metrics and POSTs them to the heartbeat endpoint: once immediately,
then on a fixed interval until stopped. A failed tick is logged and the loop
waits for the next one.
"""

import logging
import threading
import time
from typing import Optional

import httpx

from .config import AgentConfig
from .errors import MetricsError
from .metrics import collect_metrics
from .publicip import get_public_ip

logger = logging.getLogger("heartbeat-agent")

SUCCESS_STATUSES = (200, 201)


class HeartbeatLoop:
    """Sends periodic heartbeats to the monitoring endpoint."""

    def __init__(self, config: AgentConfig, hostname: str):
        """Initialize heartbeat loop.

        Args:
            config: Agent configuration
            hostname: Hostname reported in every heartbeat
        """
        self.config = config
        self.hostname = hostname
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._consecutive_failures = 0
        self._ticks = 0

    @property
    def ticks(self) -> int:
        """Number of ticks run so far."""
        return self._ticks

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def is_running(self) -> bool:
        """True while the background thread started by start() is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the heartbeat loop in a background thread."""
        if self.is_running:
            logger.warning("Heartbeat loop already running")
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self.run,
            name="heartbeat-loop",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop the loop at its next wait.

        Only sets the stop event, so it is safe to call from a signal handler
        while the loop runs in its own thread.
        """
        self._stop_event.set()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the background thread to finish."""
        if self._thread:
            self._thread.join(timeout=timeout)

    def run(self, max_ticks: Optional[int] = None) -> None:
        """Run the loop in the calling thread.

        Args:
            max_ticks: Stop after this many ticks (None runs until stop())
        """
        logger.info(f"Started heartbeat loop (interval: {self.config.send_interval}s)")

        with httpx.Client(timeout=self.config.http_timeout) as client:
            deadline = time.monotonic()

            while not self._stop_event.is_set():
                self._tick(client)

                if max_ticks is not None and self._ticks >= max_ticks:
                    break

                deadline = self._next_deadline(deadline)
                if self._stop_event.wait(timeout=max(0.0, deadline - time.monotonic())):
                    break

        logger.info("Stopped heartbeat loop")

    def _tick(self, client: httpx.Client) -> bool:
        self._ticks += 1
        try:
            ok = self.send_heartbeat(client)
        except Exception as e:
            logger.exception(f"Unexpected heartbeat error: {e}")
            ok = False

        if ok:
            self._consecutive_failures = 0
        else:
            self._consecutive_failures += 1
            logger.debug(f"Heartbeat failed ({self._consecutive_failures} in a row)")
        return ok

    def _next_deadline(self, previous: float) -> float:
        """Next tick time, skipping deadlines that already passed."""
        interval = self.config.send_interval
        now = time.monotonic()
        if interval <= 0:
            return now

        deadline = previous + interval
        if deadline <= now:
            missed = int((now - deadline) // interval) + 1
            logger.debug(f"Heartbeat overran interval, skipping {missed} tick(s)")
            deadline += missed * interval
        return deadline

    def send_heartbeat(self, client: httpx.Client) -> bool:
        """Sample metrics and send a single heartbeat.

        Args:
            client: HTTP client used for the POST (and public IP lookup)

        Returns:
            True if the endpoint answered 200 or 201, False otherwise
        """
        public_ip = None
        if self.config.report_public_ip:
            public_ip = get_public_ip(client, self.config.public_ip_url)

        try:
            metrics = collect_metrics(
                self.hostname,
                public_ip=public_ip,
                cpu_interval=self.config.cpu_sample_interval,
            )
        except MetricsError as e:
            logger.error(f"Error collecting metrics: {e}")
            return False

        payload = metrics.to_dict()
        logger.debug(f"Heartbeat payload: {payload}")

        if self.config.dry_run:
            logger.info(f"Dry run - skipping send: CPU={metrics.cpu:.1f}%, RAM={metrics.ram:.1f}%")
            return True

        try:
            response = client.post(
                self.config.api_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.ConnectError as e:
            logger.warning(f"Error sending metrics: connection to {self.config.api_url} failed: {e}")
            return False
        except httpx.TimeoutException:
            logger.error(f"Error sending metrics: timeout after {self.config.http_timeout}s")
            return False
        except httpx.HTTPError as e:
            logger.error(f"Error sending metrics: {e}")
            return False

        if response.status_code not in SUCCESS_STATUSES:
            logger.warning(f"Error sending metrics: server returned status {response.status_code}: {response.text}")
            return False

        logger.info(f"Sent metrics: CPU={metrics.cpu:.1f}%, RAM={metrics.ram:.1f}%")
        return True


def send_single_heartbeat(config: AgentConfig, hostname: str) -> bool:
    """Send a single heartbeat (for --once mode).

    Args:
        config: Agent configuration
        hostname: Hostname to report

    Returns:
        True if successful
    """
    loop = HeartbeatLoop(config, hostname)
    with httpx.Client(timeout=config.http_timeout) as client:
        return loop.send_heartbeat(client)
