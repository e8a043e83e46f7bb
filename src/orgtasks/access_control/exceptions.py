class AccessControlError(Exception):
    """Base class for policy outcomes raised at the orchestration seam."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class AccessDeniedError(AccessControlError):
    """Raised when a decision denies the requested action."""


class ResourceNotFoundError(AccessControlError):
    """Raised when the task or user an action refers to does not exist."""
