# app/errors/kanban_errors.py

class KanbanError(Exception):
    """Base exception for kanban card errors."""
    pass

class CardNotFound(KanbanError):
    """Raised when a kanban card is not found."""
    pass

class CardMoveNotAllowed(KanbanError):
    """Raised when the caller's role may not move cards on the card's board."""
    pass

class CompletionNotificationNotFound(KanbanError):
    """Raised when a completion notification is not found."""
    pass

class InvalidCardStatus(KanbanError):
    """Raised when the destination status is not a column of the card's board."""
    pass
