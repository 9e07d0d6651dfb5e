"""Exceptions raised by the heartbeat agent."""


class AgentError(Exception):
    """Base class for heartbeat agent errors."""


class HostnameError(AgentError):
    """Hostname could not be resolved. Fatal at startup."""


class MetricsError(AgentError):
    """Sampling CPU or memory failed. Abandons the current tick only."""
