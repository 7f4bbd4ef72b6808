"""Exception types raised by the mood monitor."""


class MonitorError(Exception):
    """Base class for mood monitor errors."""


class CameraUnavailableError(MonitorError):
    """The camera could not be opened (missing device or permission denied)."""


class CatalogError(MonitorError):
    """A suggestion catalog is malformed."""
