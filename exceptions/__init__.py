"""
Custom exceptions module.

All errors derive from AppError and serialize with to_dict().
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ConflictError,
    DatabaseError,

    # Mappings
    PersistenceError,
    MalformedMappingError,
    MappingNotFoundError,
    MissingContentError,

    # Controller
    InvalidStateError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "DatabaseError",

    # Mappings
    "PersistenceError",
    "MalformedMappingError",
    "MappingNotFoundError",
    "MissingContentError",

    # Controller
    "InvalidStateError",
]
