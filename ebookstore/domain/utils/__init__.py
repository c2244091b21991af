"""
Domain utilities module.

Provides shared utilities for the domain layer that remain
independent of infrastructure concerns.
"""

from .uuid7 import Uuid7Factory, Uuid7Generator

__all__ = ["Uuid7Factory", "Uuid7Generator"]
