# backend/app/api/dependencies/__init__.py
"""
Central export point for all dependencies.

This module re-exports all dependencies from submodules
for convenient access throughout the application.
"""

from .database import get_database, get_db
from .services import get_catalog_service, get_inventory_service, get_order_service

__all__ = [
    # Database
    "get_database",
    "get_db",
    # Services
    "get_catalog_service",
    "get_inventory_service",
    "get_order_service",
]
