"""HTTP errors with preset status codes and messages."""

from fastapi import HTTPException, status


class InvalidPayload(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid payload")


class MissingIdentifier(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail="order ID is required")


class NotFound(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="order not found")


class DependencyUnavailable(HTTPException):
    def __init__(self) -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="unhealthy")
