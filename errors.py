"""Exceptions raised by the costing engine and the JSON store."""


class CostingError(Exception):
    """Base exception for costing errors."""
    pass


class DivisionByZero(CostingError, ZeroDivisionError):
    """Raised by the decimal helpers when dividing by zero."""

    def __init__(self, dividend=None, message=None):
        self.dividend = dividend
        if message is None:
            message = f"Cannot divide {dividend} by zero"
        super().__init__(message)


class InvalidYield(CostingError):
    """Raised when a yield percentage (or usable weight) is not positive."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Yield must be greater than zero, got {value}"
        super().__init__(message)


class InvalidPortions(CostingError):
    """Raised when a recipe has no portions to divide its cost into."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Portions must be greater than zero, got {value}"
        super().__init__(message)


class InvalidTarget(CostingError):
    """Raised when the target food cost percentage is not positive."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Target food cost % must be greater than zero, got {value}"
        super().__init__(message)


class InvalidWeight(CostingError):
    """Raised when an as-purchased weight is not positive."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Weight must be greater than zero, got {value}"
        super().__init__(message)


class InvalidPrice(CostingError):
    """Raised when a selling price is not positive."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Selling price must be greater than zero, got {value}"
        super().__init__(message)


class InvalidCost(CostingError):
    """Raised when a theoretical cost to compare against is not positive."""

    def __init__(self, value, message=None):
        self.value = value
        if message is None:
            message = f"Theoretical cost must be greater than zero, got {value}"
        super().__init__(message)


class EmptyItemSet(CostingError):
    """Raised when menu engineering gets no items."""

    def __init__(self, message=None):
        super().__init__(message or "Menu engineering needs at least one item")


class StoreError(Exception):
    """Base exception for the JSON store."""
    pass


class RecordError(StoreError):
    """Raised when a stored record is missing fields or holds bad values."""

    def __init__(self, kind, detail, message=None):
        self.kind = kind
        self.detail = detail
        if message is None:
            message = f"Invalid {kind} record: {detail}"
        super().__init__(message)


class RecipeNotFound(StoreError):
    """Raised when a recipe name is not in the store."""

    def __init__(self, name, message=None):
        self.name = name
        if message is None:
            message = f"Recipe '{name}' not found"
        super().__init__(message)
