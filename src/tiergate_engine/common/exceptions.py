"""Tiergate-Engine exception hierarchy."""

from tiergate_engine.common.schemas import ErrorResponse


class TiergateError(Exception):
    """Base exception for all Tiergate errors."""

    def __init__(self, message: str = "", code: str = "TIERGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(error=type(self).__name__, code=self.code, detail=self.message)


class InvalidPlanError(TiergateError, ValueError):
    """Raised when a plan identifier is not one of the known tiers."""

    def __init__(self, plan: object):
        self.plan = plan
        super().__init__(f"Unknown plan: {plan!r}", code="INVALID_PLAN")


class UnknownCapabilityError(TiergateError, ValueError):
    """Raised when a capability name is not registered."""

    def __init__(self, capability: object):
        self.capability = capability
        super().__init__(f"Unknown capability: {capability!r}", code="UNKNOWN_CAPABILITY")


class InvalidQuantityError(TiergateError, ValueError):
    """Raised when a quantity capability is checked without a usable quantity."""

    def __init__(self, message: str = "Quantity must be a non-negative integer"):
        super().__init__(message, code="INVALID_QUANTITY")


class DuplicateItemError(TiergateError, ValueError):
    """Raised when an ordered collection carries the same identifier twice."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Duplicate item in ordered list: {item_id!r}", code="DUPLICATE_ITEM")


class ItemNotFoundError(TiergateError, LookupError):
    """Raised when an operation names an item that is not in the collection."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item not found in ordered list: {item_id!r}", code="ITEM_NOT_FOUND")


class InvalidPositionError(TiergateError, ValueError):
    """Raised when a position is negative or not an integer."""

    def __init__(self, item_id: str, position: object):
        self.item_id = item_id
        self.position = position
        super().__init__(
            f"Position for {item_id!r} must be a non-negative integer, got {position!r}",
            code="INVALID_POSITION",
        )


class EmptyReorderError(TiergateError, ValueError):
    """Raised when a reorder request carries no moves."""

    def __init__(self, message: str = "Video orders are required"):
        super().__init__(message, code="EMPTY_REORDER")


class InvalidConfigError(TiergateError, ValueError):
    """Raised when configured policy values cannot build a valid tier table."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, code="INVALID_CONFIG")
