# backend/app/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...database import Database
from ...services.catalog_service import CatalogService
from ...services.inventory_service import InventoryService
from ...services.order_service import OrderService
from .database import get_database, get_db


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_inventory_service(
    db: Session = Depends(get_db), database: Database = Depends(get_database)
) -> InventoryService:
    """Get InventoryService with the attempt budget from the running app's settings."""
    return InventoryService(db, max_attempts=database.settings.spaces_update_max_attempts)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)
