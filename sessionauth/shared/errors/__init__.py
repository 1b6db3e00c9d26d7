from .base import (
    AppError,
    DomainError,
    InfrastructureError,
    MalformedBodyError,
    StorageError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "InfrastructureError",
    "MalformedBodyError",
    "StorageError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]
