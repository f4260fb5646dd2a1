"""
Validation errors raised by the link store and the mutation surface.

Resolution never raises these: a request that matches nothing is a normal
NotFound outcome, not an exception.
"""


class GoLinksError(Exception):
    """Base class for errors the admin surface reports back to the caller"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidKey(GoLinksError):
    """Key is empty, has whitespace, uses the admin prefix or bad characters"""


class InvalidDestination(GoLinksError):
    """Destination is not an absolute http(s) URL"""


class DomainRejected(GoLinksError):
    """Domain name fails the allowed-character check or is not registered"""
