# app/errors/client_errors.py

class ClientError(Exception):
    """Base exception for client lookups shared by the automation engines."""
    pass

class ClientNotFound(ClientError):
    """Raised when the client referenced by a task or request is not found."""
    pass
