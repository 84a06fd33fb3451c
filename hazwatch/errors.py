"""Errors raised by the hazard watchers."""


class HazwatchError(Exception):
    """Base class of every error in this package."""


class _DetailError(HazwatchError):
    template = "{error}"

    def __init__(self, error):
        self.error = error
        super().__init__(self.template.format(error=error))


class InvalidQueryError(_DetailError):
    """A query is invalid."""

    template = "query is invalid: {error}"


class UrlConstructionError(_DetailError):
    """A URL could not be built."""

    template = "Failed to build URL: {error}"


class ProtocolError(_DetailError):
    """The HTTP exchange went wrong."""

    template = "http protocol error: {error}"


class DeserializationError(_DetailError):
    """A response could not be decoded."""

    template = "http protocol error: {error}"


class DatabaseError(_DetailError):
    """The database reported an error."""

    template = "InfluxDB encountered the following error: {error}"


class AuthenticationError(HazwatchError):
    """No or incorrect credentials (HTTP 401)."""

    def __init__(self):
        super().__init__("authentication error. No or incorrect credentials")


class AuthorizationError(HazwatchError):
    """The user is not authorized (HTTP 403)."""

    def __init__(self):
        super().__init__("authorization error. User not authorized")


class ConnectionError(_DetailError):  # noqa: A001
    """An HTTP request failed."""

    template = "connection error: {error}"