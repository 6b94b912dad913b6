# app/errors/comercial_errors.py

class ComercialError(Exception):
    """Base exception for sales-side automation errors."""
    pass

class ComercialTaskNotFound(ComercialError):
    """Raised when a comercial task is not found."""
    pass
