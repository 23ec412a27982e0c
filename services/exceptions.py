"""
Service Exceptions
Domain errors raised by the service layer and mapped to HTTP responses in app.py
"""


class NotFoundError(LookupError):
    """Referenced record does not exist or is not owned by the caller"""


class ValidationFailure(ValueError):
    """Input rejected before any computation or write"""
