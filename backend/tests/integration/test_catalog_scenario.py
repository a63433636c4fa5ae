# backend/tests/integration/test_catalog_scenario.py
"""
End-to-end walk through the catalog: seed one lesson, find it by price and
by subject, book it out, and confirm it cannot be overbooked.
"""

import pytest

from app.core.exceptions import InsufficientSpacesException
from app.services.catalog_service import CatalogService
from app.services.inventory_service import InventoryService


def test_book_out_a_lesson_through_the_services(db, lesson_factory, read_spaces):
    lesson = lesson_factory(subject="Math", location="Room1", price=20, spaces=5)
    catalog = CatalogService(db)
    inventory = InventoryService(db)

    assert [found.id for found in catalog.search_lessons("20")] == [lesson.id]
    assert [found.id for found in catalog.search_lessons("math")] == [lesson.id]

    assert inventory.adjust_spaces(lesson.id, -5).spaces == 0

    with pytest.raises(InsufficientSpacesException):
        inventory.adjust_spaces(lesson.id, -1)
    assert read_spaces(lesson.id) == 0


def test_book_out_a_lesson_over_http(client, lesson_factory):
    lesson = lesson_factory(subject="Math", location="Room1", price=20, spaces=5)

    assert [row["id"] for row in client.get("/search?q=20").json()] == [lesson.id]
    assert [row["id"] for row in client.get("/search?q=math").json()] == [lesson.id]

    order = client.post(
        "/orders",
        json={"items": [{"lessonId": lesson.id, "spaces": 5}], "name": "Ada", "phone": "0123"},
    )
    assert order.status_code == 200

    # Orders do not reserve spaces; the client books them explicitly.
    assert client.get("/lessons").json()[0]["spaces"] == 5
    booked = client.put(f"/lessons/{lesson.id}", json={"spacesDelta": -5})
    assert booked.json()["spaces"] == 0

    overbooked = client.put(f"/lessons/{lesson.id}", json={"spacesDelta": -1})
    assert overbooked.status_code == 400
    assert overbooked.json()["code"] == "INSUFFICIENT_SPACES"
    assert client.get("/lessons").json()[0]["spaces"] == 0
