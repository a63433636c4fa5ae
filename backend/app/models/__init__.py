"""
Database models for the lesson catalog API.

- Lesson: catalog entry with mutable spaces
- Order: immutable record of a customer's order
"""

from .lesson import Lesson
from .order import Order

__all__ = ["Lesson", "Order"]
