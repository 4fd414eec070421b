"""Custom exception classes for the application."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class NotFoundError(AppError):
    """Raised when a group or prediction is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class AccessDenied(AppError):
    """Raised when a user lacks the role required for an operation."""

    def __init__(self, message="You are not allowed to do that."):
        """Initialize the error."""
        super().__init__(message, 403)


class PhaseClosed(AppError):
    """Raised when an operation is not valid for the group's current status."""

    def __init__(self, message="This group is not accepting that right now."):
        """Initialize the error."""
        super().__init__(message, 409)


class GroupLocked(AppError):
    """Raised when joining a group whose organizer has locked it."""

    def __init__(self, message="This group is locked."):
        """Initialize the error."""
        super().__init__(message, 423)


class CapacityExceeded(AppError):
    """Raised when a group has reached its maximum number of members."""

    def __init__(self, message="This group has reached its maximum capacity."):
        """Initialize the error."""
        super().__init__(message, 409)


class AlreadyMember(AppError):
    """Raised when a user joins a group they already belong to."""

    def __init__(self, message="You are already a member of this group."):
        """Initialize the error."""
        super().__init__(message, 409)


class QuotaExceeded(AppError):
    """Raised when a user would hold more predictions than allowed."""

    def __init__(self, message="You can only submit up to 5 predictions in total."):
        """Initialize the error."""
        super().__init__(message, 400)


class InvalidTransition(AppError):
    """Raised when a phase change is not allowed."""

    def __init__(self, message="That phase change is not allowed."):
        """Initialize the error."""
        super().__init__(message, 409)


class StoreError(AppError):
    """Raised when the record store fails. The cause is chained."""

    def __init__(self, message="A database error occurred."):
        """Initialize the error."""
        super().__init__(message, 503)
