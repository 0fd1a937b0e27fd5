"""
Error taxonomy for InsightHub.

Each error carries the HTTP status the API layer answers with, so request
handlers can raise and let the app's error handler build the JSON body.
"""


class InsightHubError(Exception):
    """Base class for all errors surfaced through the API."""
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__


class InvalidInput(InsightHubError):
    """A required field is missing, empty, or of the wrong type."""
    status_code = 400


class NotFound(InsightHubError):
    """No task exists with the requested id."""
    status_code = 404


class AlreadyExists(InsightHubError):
    """Registration with an email that is already taken."""
    status_code = 400


class InvalidCredentials(InsightHubError):
    """Login with no matching email + password pair."""
    status_code = 401


class CorruptData(InsightHubError):
    """The data file does not parse as a valid document."""
    status_code = 500
