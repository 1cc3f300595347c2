class AppError(Exception):
    """Base class for errors raised by the reminder application."""


class StoreError(AppError):
    """The reminder store could not complete a read or write."""


class ExtractionError(AppError):
    """A photo could not be turned into a candidate reminder.

    ``status_code`` is the HTTP status the API answers with; nothing is
    persisted when this is raised.
    """

    def __init__(self, message: str, status_code: int = 422) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotificationError(AppError):
    """The messaging provider did not accept a notification."""

    def __init__(self, message: str, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}
