# app/errors/delay_errors.py

class DelayError(Exception):
    """Base exception for delay notification errors."""
    pass

class DelayNotificationNotFound(DelayError):
    """Raised when justifying a notification that does not exist (or was already justified)."""
    pass

class DelayJustificationNotFound(DelayError):
    """Raised when a justification is not found."""
    pass

class EmptyJustification(DelayError):
    """Raised when a justification text is blank."""
    pass
