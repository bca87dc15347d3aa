# parkwatch/errors.py
"""
Domain error taxonomy. Services raise these; main.py renders every one of them
as {"success": false, "message": ...} with the matching HTTP status.
"""

from fastapi import status


class ParkWatchError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ParkWatchError):
    default_message = "Invalid request"


class InvalidPassType(ValidationError):
    default_message = "Invalid pass duration"


class QuotaExceeded(ParkWatchError):
    default_message = "No available passes of this type"


class NotFound(ParkWatchError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Unauthorized(ParkWatchError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class PersistenceError(ParkWatchError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
