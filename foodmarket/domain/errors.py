# foodmarket/domain/errors.py


class MarketError(Exception):
    """Base for errors that map onto an HTTP response."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequestError(MarketError):
    status_code = 400


class AuthenticationError(MarketError):
    status_code = 401


class NotFoundError(MarketError):
    status_code = 404


class ConflictError(MarketError):
    status_code = 409


class EmptyCartError(ConflictError):
    status_code = 400

    def __init__(self):
        super().__init__("Cart is empty")


class InsufficientStockError(ConflictError):
    status_code = 400

    def __init__(self, item_id: int, name: str, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for '{name}': {available} available, {requested} requested"
        )
        self.item_id = item_id
        self.name = name
        self.available = available
        self.requested = requested


class InvalidTransitionError(ConflictError):
    def __init__(self, order_id: int, current: str, target: str):
        super().__init__(f"Order {order_id} cannot move from {current} to {target}")
        self.order_id = order_id
        self.current = current
        self.target = target


class CartBusyError(ConflictError):
    def __init__(self, email: str):
        super().__init__(f"Cart for {email} is being modified by another request, retry shortly")


class DuplicateUserError(ConflictError):
    def __init__(self, email: str):
        super().__init__("Email already exists")
        self.email = email


class ExternalServiceError(MarketError):
    status_code = 502


class ServiceUnavailableError(ExternalServiceError):
    status_code = 503
