"""Heartbeat Agent - periodic host liveness and load reporter.

Samples local CPU and memory utilization (and optionally the host's public
IP address) and POSTs them as a JSON heartbeat to a monitoring endpoint.

Key responsibilities:
- Resolve the hostname once at startup
- Send a heartbeat immediately, then on a fixed interval
- Log every outcome and keep going when a delivery fails
"""

__version__ = "0.1.0"
