"""Domain exceptions."""


class PresenceError(Exception):
    """Base class for all presence errors."""


class GeometryError(PresenceError):
    """A coordinate transform could not be computed."""


class DegenerateRectError(GeometryError):
    """A rectangle has zero width or height."""


class MalformedCommandError(PresenceError):
    """An inbound peer command could not be parsed."""


class PayloadTooLargeError(PresenceError):
    """An encoded command exceeds the transport's message size limit."""


class FeedUnavailableError(PresenceError):
    """The shared-memory feed cannot be opened on this system."""
