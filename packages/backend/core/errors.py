class TomatoError(Exception):
    """Base class for the errors raised by the tomato service and stores."""


class ValidationError(TomatoError):
    """The input violates a field constraint. Nothing was written."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(TomatoError):
    """The targeted tomato does not exist (or was deleted concurrently)."""

    def __init__(self, tomato_id: str):
        super().__init__(f"Tomato not found: {tomato_id}")
        self.tomato_id = tomato_id


class StoreError(TomatoError):
    """The underlying store is unavailable or rejected the operation."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
