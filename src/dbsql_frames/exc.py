import json


### PEP-249 style base classes ###
# https://peps.python.org/pep-0249/#exceptions
class Error(Exception):
    """Base class for every error raised by this package.
    `message`: An optional user-friendly error message. It should be short,
    actionable and stable
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message

    def message_with_context(self):
        return self.message + ": " + json.dumps(self.context, default=str)


class InterfaceError(Error):
    """Thrown if the client is used after it has been closed.
    Its context will have the following keys:
    "warehouse-id": The warehouse the client was bound to
    """

    pass


class DatabaseError(Error):
    pass


class OperationalError(DatabaseError):
    pass


class DataError(DatabaseError):
    """Thrown if a result chunk does not line up with its manifest, for example a row
    carrying more or fewer values than the manifest has columns.
    Its context will have the following keys:
    "row-index": Position of the offending row inside its chunk
    "expected-columns": Column count announced by the manifest
    "actual-columns": Number of values found in the row
    """

    pass


### Custom error classes ###
class ServerOperationError(DatabaseError):
    """Thrown if the statement ended in a state other than SUCCEEDED, after the
    EXTERNAL_LINKS fallback was attempted where applicable.
    Its context will have the following keys:
    "statement-id": The id the warehouse assigned to the statement
    "status": The status object exactly as returned by the server
    "disposition": The disposition of the last submission
    """

    pass


class RequestError(OperationalError):
    """Thrown if there was a error during request to the server.
    Its context will have the following keys:
    "method": The HTTP method that failed
    "url": The request URL without its query string
    "http-code": HTTP response code (if available)
    "error-message": Response body or transport error text (if available)
    """

    def __init__(self, message=None, context=None, original_exception=None):
        super().__init__(message, context)
        self.original_exception = original_exception


class InvalidServerResponseError(OperationalError):
    """Thrown if a response body could not be parsed as JSON"""

    pass


class UnexpectedResultFormatError(InvalidServerResponseError):
    """Thrown if a statement succeeded but its result carries neither inline data
    nor external links"""

    pass


class PollingTimeoutError(OperationalError):
    """Thrown if a statement is still in progress after the configured
    max_poll_attempts status requests"""

    pass
