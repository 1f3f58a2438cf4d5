"""Exceptions raised by the charity board."""


class BoardError(Exception):
    """Base class for charity board errors."""
    pass


class ConfigError(BoardError):
    """Raised when configuration is invalid or unreadable."""
    pass


class InvalidTransition(BoardError):
    """Raised when a strict workflow rejects a board move."""

    def __init__(self, task_id: str, from_status, to_status):
        self.task_id = task_id
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Task {task_id} cannot move from {from_status.value} to {to_status.value}"
        )


class AccessDenied(BoardError):
    """Raised when the current identity lacks a role or permission."""
    pass
