"""
Error types raised by the progression engine.

Expected outcomes such as "threshold not met" or "badge already held" are
never raised; they are reported in result objects instead.
"""


class ProgressionError(Exception):
    """Base error for the progression engine."""
    pass


class NotFoundError(ProgressionError):
    """A referenced entity does not exist."""
    pass


class CollectorNotFoundError(NotFoundError):
    """The collector is unknown. Aborts the whole call."""

    def __init__(self, collector_id: int):
        self.collector_id = collector_id
        super().__init__(f"Collector {collector_id} not found")


class InvalidStateError(ProgressionError):
    """The request conflicts with the current state of the data."""
    pass


class GraceDayUnavailableError(InvalidStateError):
    """The weekly grace-day quota is exhausted."""
    pass


class GraceDayConflictError(ProgressionError):
    """The requested day is already protected by a grace day."""
    pass


class CollaboratorUnavailableError(ProgressionError):
    """A snapshot, set or activity-log read failed."""
    pass
