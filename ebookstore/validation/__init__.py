"""
Wire-level field validation.

Rejects structurally invalid requests before any domain logic or I/O runs.
"""

from .messages import MessageCatalog
from .validator import FieldValidator, is_shape_error, wire_name

__all__ = [
    "FieldValidator",
    "MessageCatalog",
    "is_shape_error",
    "wire_name",
]
