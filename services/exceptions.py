"""Client error taxonomy"""
from typing import Optional


class ClientError(Exception):
    """Base class for errors surfaced to the user as a message"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ClientError):
    """Input rejected locally, before any request is sent"""


class BackendConnectionError(ClientError):
    """The request could not complete; no response was received"""


class ApplicationError(ClientError):
    """The backend responded but reported a failure"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class BackendUnavailableError(ClientError):
    """Health check failed, for whatever reason"""
