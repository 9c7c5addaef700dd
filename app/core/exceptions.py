# app/core/exceptions.py
from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ValidationError(HTTPException):
    """Malformed or missing input detected by a service."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class DuplicateStockCodeError(HTTPException):
    def __init__(self, stock_code: str):
        self.stock_code = stock_code
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Stock code '{stock_code}' already exists",
        )


class InsufficientStockError(HTTPException):
    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Insufficient stock quantity: {available} available, {requested} requested",
        )


class TooManyPhotosError(HTTPException):
    def __init__(self, limit: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Maximum {limit} photos allowed per product",
        )


class InvalidFileTypeError(HTTPException):
    def __init__(self, content_type: str | None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type '{content_type}'. Only JPEG, PNG, WebP, and GIF are allowed.",
        )


class ReferentialConflictError(HTTPException):
    """Delete rejected because other rows still reference the target."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class StoreUnavailableError(HTTPException):
    def __init__(self, detail: str = "Database operation failed"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
