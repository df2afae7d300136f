"""
Domain errors raised by the service layer.

Each error carries a short client-safe message and the HTTP status the API
renders it with. Storage error text never goes into ``message``.
"""
from fastapi import status


class DomainError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DomainError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Forbidden(DomainError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized"


class InvalidInput(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AlreadyInDesiredState(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already in requested state"


class AlreadyExists(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Already exists"


class SelfSubscription(DomainError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot subscribe to your own channel"


class Conflict(DomainError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class Unauthenticated(DomainError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class PersistenceError(DomainError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
