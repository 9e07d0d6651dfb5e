#!/usr/bin/env python3
"""Heartbeat Agent - report host liveness and load to a monitoring endpoint.

Usage:
    python -m heartbeat_agent --api-url https://monitoring.example.com/api/heartbeat

Or with environment variables:
    HEARTBEAT_API_URL=https://monitoring.example.com/api/heartbeat heartbeat-agent
"""

import logging
import signal
import sys
from typing import Optional

import click

from . import __version__
from .config import AgentConfig, DEFAULT_API_URL, DEFAULT_PUBLIC_IP_URL
from .errors import HostnameError
from .heartbeat import HeartbeatLoop, send_single_heartbeat
from .metrics import get_hostname
from .utils import setup_logging


# Global for signal handling
_heartbeat_loop: Optional[HeartbeatLoop] = None


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully."""
    logger = logging.getLogger("heartbeat-agent")
    logger.info(f"Received signal {signum}, shutting down...")

    if _heartbeat_loop:
        _heartbeat_loop.stop()
    else:
        sys.exit(0)


@click.command()
@click.option("--api-url", envvar="HEARTBEAT_API_URL", default=DEFAULT_API_URL, show_default=True, help="Heartbeat endpoint URL")
@click.option("--interval", envvar="HEARTBEAT_INTERVAL", default=60.0, type=float, show_default=True, help="Seconds between heartbeats")
@click.option("--timeout", envvar="HEARTBEAT_TIMEOUT", default=10.0, type=float, show_default=True, help="HTTP timeout in seconds")
@click.option("--public-ip/--no-public-ip", envvar="HEARTBEAT_PUBLIC_IP", default=False, help="Include the host's public IP in heartbeats")
@click.option("--public-ip-url", envvar="HEARTBEAT_PUBLIC_IP_URL", default=DEFAULT_PUBLIC_IP_URL, show_default=True, help="Plain-text public IP lookup service")
@click.option("--debug", envvar="HEARTBEAT_DEBUG", is_flag=True, help="Enable debug logging")
@click.option("--dry-run", is_flag=True, help="Sample and log, but don't send")
@click.option("--once", is_flag=True, help="Send a single heartbeat then exit")
@click.option("--version", is_flag=True, help="Show version and exit")
def main(
    api_url: str,
    interval: float,
    timeout: float,
    public_ip: bool,
    public_ip_url: str,
    debug: bool,
    dry_run: bool,
    once: bool,
    version: bool,
):
    """Heartbeat Agent - report CPU and memory load to a monitoring endpoint."""
    global _heartbeat_loop

    if version:
        click.echo(f"heartbeat-agent {__version__}")
        return

    logger = setup_logging(debug=debug)

    config = AgentConfig(
        api_url=api_url,
        send_interval=interval,
        http_timeout=timeout,
        report_public_ip=public_ip,
        public_ip_url=public_ip_url,
        debug=debug,
        dry_run=dry_run,
    )

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(f"Config error: {error}")
        sys.exit(1)

    try:
        hostname = get_hostname()
    except HostnameError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Heartbeat Agent v{__version__}")
    logger.info(f"Starting monitoring client for {hostname}")
    logger.info(f"Reporting to: {config.api_url}")
    logger.info(f"Send interval: {config.send_interval}s")
    if config.report_public_ip:
        logger.info(f"Public IP lookup: {config.public_ip_url}")

    if once:
        logger.info("Running in --once mode, sending single heartbeat...")
        success = send_single_heartbeat(config, hostname)
        if not success:
            logger.warning("Single heartbeat failed")
            sys.exit(1)
        logger.info("Agent complete (--once mode)")
        return

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    _heartbeat_loop = HeartbeatLoop(config, hostname)
    _heartbeat_loop.start()

    # Signals are handled here while the loop thread waits on the stop event
    try:
        while _heartbeat_loop.is_running:
            _heartbeat_loop.join(timeout=1)
    finally:
        _heartbeat_loop.stop()
        _heartbeat_loop = None

    logger.info("Agent shutdown complete")


if __name__ == "__main__":
    main()
