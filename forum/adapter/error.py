"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    pass


class TransportError(AdapterError):
    """Message broker error (publish not acknowledged, broker unreachable)."""

    pass


class ConnectionClosedError(AdapterError):
    """Write to a notification connection that is already closed."""

    pass
