"""Configuration for the heartbeat agent."""

from dataclasses import dataclass
import math
import os


DEFAULT_API_URL = "http://localhost:3000/api/heartbeat"
DEFAULT_PUBLIC_IP_URL = "https://api.ipify.org"


@dataclass
class AgentConfig:
    """Configuration for the heartbeat agent.

    Matches CLI arguments:
    - --api-url: Heartbeat endpoint receiving the JSON POST
    - --interval: Seconds between heartbeats (default: 60)
    - --timeout: HTTP timeout in seconds (default: 10)
    - --public-ip/--no-public-ip: Include the host's public IP
    - --public-ip-url: Plain-text IP lookup service
    """

    api_url: str = DEFAULT_API_URL

    # Timing
    send_interval: float = 60.0  # seconds
    http_timeout: float = 10.0  # seconds
    cpu_sample_interval: float = 1.0  # seconds psutil blocks to measure CPU

    # Public IP variant
    report_public_ip: bool = False
    public_ip_url: str = DEFAULT_PUBLIC_IP_URL

    # Agent behavior
    debug: bool = False
    dry_run: bool = False  # Sample and log, but don't POST

    @classmethod
    def from_env(cls) -> "AgentConfig":
        """Create config from environment variables.

        Environment variables:
        - HEARTBEAT_API_URL: Heartbeat endpoint
        - HEARTBEAT_INTERVAL: Send interval in seconds
        - HEARTBEAT_TIMEOUT: HTTP timeout in seconds
        - HEARTBEAT_PUBLIC_IP: Report public IP ("1", "true", "yes")
        - HEARTBEAT_PUBLIC_IP_URL: IP lookup service
        - HEARTBEAT_DEBUG: Enable debug logging
        """
        return cls(
            api_url=os.environ.get("HEARTBEAT_API_URL", DEFAULT_API_URL),
            send_interval=float(os.environ.get("HEARTBEAT_INTERVAL", "60")),
            http_timeout=float(os.environ.get("HEARTBEAT_TIMEOUT", "10")),
            report_public_ip=_env_flag("HEARTBEAT_PUBLIC_IP"),
            public_ip_url=os.environ.get("HEARTBEAT_PUBLIC_IP_URL", DEFAULT_PUBLIC_IP_URL),
            debug=_env_flag("HEARTBEAT_DEBUG"),
        )

    def validate(self) -> list[str]:
        """Validate configuration.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.api_url:
            errors.append("api_url is required")
        elif not self.api_url.startswith(("http://", "https://")):
            errors.append(f"api_url must be an http(s) URL, got: {self.api_url}")

        if not math.isfinite(self.send_interval) or self.send_interval <= 0:
            errors.append(f"send_interval must be a positive number of seconds, got: {self.send_interval}")

        if not math.isfinite(self.http_timeout) or self.http_timeout <= 0:
            errors.append(f"http_timeout must be a positive number of seconds, got: {self.http_timeout}")

        if not math.isfinite(self.cpu_sample_interval) or self.cpu_sample_interval < 0:
            errors.append(f"cpu_sample_interval must be a non-negative number of seconds, got: {self.cpu_sample_interval}")

        if self.report_public_ip and not self.public_ip_url.startswith(("http://", "https://")):
            errors.append(f"public_ip_url must be an http(s) URL, got: {self.public_ip_url}")

        return errors


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")
