"""
Client-facing error taxonomy.

Every error here is raised inside a single request and translated to a
response by the handlers registered in ``dm_archive.main``. None of them
are retried.
"""


class ArchiveError(Exception):
    """Base class for request errors that map to a 4xx response."""
    
    status_code = 400
    message = "Bad request"
    
    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(ArchiveError):
    """Body is not a well-formed, correctly signed event."""
    message = "Body is not a valid nostr event"


class WrongKindError(ArchiveError):
    """Event is valid but is not a direct message."""
    message = "Event is not kind 4"


class EncodingError(ArchiveError):
    """Sender or receiver public key cannot be npub encoded."""
    message = "Unable to npub encode sender or receiver"


class MissingParameterError(ArchiveError):
    """A required query parameter was not supplied."""
    message = "Missing required query parameter"


class InvalidParameterError(ArchiveError):
    """A query parameter was supplied but could not be parsed."""
    message = "Invalid query parameter"


class RouteNotFoundError(ArchiveError):
    message = "Invalid route"


class MethodNotAllowedError(ArchiveError):
    status_code = 405
    message = "Method not allowed"


class KeyFormatError(ValueError):
    """A stored key does not have the sender:receiver:timestamp shape."""
