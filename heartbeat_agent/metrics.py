"""System metrics collection for the heartbeat agent.

Collects the fields of one heartbeat record:
- hostname (resolved once at startup)
- CPU utilization %, sampled over a short blocking window
- Memory utilization %
- Unix timestamp in seconds
"""

import socket
import time
from dataclasses import dataclass
from typing import Optional

import psutil

from .errors import HostnameError, MetricsError


@dataclass
class HeartbeatMetrics:
    """One heartbeat sample, built fresh each tick."""
    hostname: str
    cpu: float        # percent, 0-100
    ram: float        # percent, 0-100
    timestamp: int    # epoch seconds
    public_ip: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the JSON object posted to the heartbeat endpoint."""
        data = {"hostname": self.hostname}
        if self.public_ip:
            data["public_ip"] = self.public_ip
        data.update({
            "cpu": self.cpu,
            "ram": self.ram,
            "timestamp": self.timestamp,
        })
        return data


def get_hostname() -> str:
    """Return this machine's hostname.

    Raises:
        HostnameError: if the OS gives no hostname
    """
    try:
        hostname = socket.gethostname()
    except OSError as e:
        raise HostnameError(f"Failed to get hostname: {e}") from e

    if not hostname:
        raise HostnameError("Failed to get hostname: empty hostname")

    return hostname


def collect_metrics(
    hostname: str,
    public_ip: Optional[str] = None,
    cpu_interval: float = 1.0,
) -> HeartbeatMetrics:
    """Collect current system metrics.

    Args:
        hostname: Hostname to report
        public_ip: Public IP to report, if known
        cpu_interval: Seconds to block while measuring CPU

    Returns:
        HeartbeatMetrics with current system state

    Raises:
        MetricsError: if psutil cannot read CPU or memory
    """
    try:
        cpu_percent = psutil.cpu_percent(interval=cpu_interval)
    except (psutil.Error, OSError) as e:
        raise MetricsError(f"failed to get CPU metrics: {e}") from e

    try:
        mem_percent = psutil.virtual_memory().percent
    except (psutil.Error, OSError) as e:
        raise MetricsError(f"failed to get RAM metrics: {e}") from e

    return HeartbeatMetrics(
        hostname=hostname,
        public_ip=public_ip,
        cpu=clamp_percent(cpu_percent),
        ram=clamp_percent(mem_percent),
        timestamp=int(time.time()),
    )


def clamp_percent(value: float) -> float:
    """Clamp a utilization reading into 0-100."""
    return min(100.0, max(0.0, float(value)))
