"""Application-level exceptions."""


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(self, message: str, code: str = "APP_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str):
        super().__init__(message, code="VALIDATION_ERROR")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(f"{resource} not found: {identifier}", code="NOT_FOUND")


class OrderStateError(AppError):
    """Raised when an order transition is not allowed from its current status."""

    def __init__(self, message: str):
        super().__init__(message, code="ORDER_STATE_ERROR")


class DuplicateOrderError(AppError):
    """Raised by order storage when an idempotency key is already queued for an account."""

    def __init__(self, account_id: str, idempotency_key: str):
        self.account_id = account_id
        self.idempotency_key = idempotency_key
        super().__init__(
            f"Order already queued for account {account_id}: {idempotency_key}",
            code="DUPLICATE_ORDER",
        )
