"""
Database base class and store handle shared across the application.
"""

from .base import Base
from .sessions import Database

__all__ = ["Base", "Database"]
