#!/usr/bin/env python3
"""
Seed the lesson catalog from YAML.

Lessons are created out-of-band; the API never creates or deletes them.
Existing rows (same subject and location) are updated in place, so the
script is safe to re-run. ``--reset-spaces`` also restores their spaces.

Usage:
    python scripts/seed_lessons.py
    python scripts/seed_lessons.py --database-url sqlite:///./lessons.db --reset-spaces
"""

import argparse
from pathlib import Path
import sys
from typing import Any, Dict, List, Optional

from sqlalchemy import select
import yaml

# Add the parent directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.core.config import Settings, settings
from app.database import Database
from app.models.lesson import Lesson

SEED_FILE = Path(__file__).parent / "seed_data" / "lessons.yaml"


def load_lessons_yaml(path: Path = SEED_FILE) -> List[Dict[str, Any]]:
    """Load lesson rows from a YAML file with a top-level ``lessons`` list."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    lessons = data.get("lessons", [])
    if not isinstance(lessons, list):
        raise ValueError(f"{path}: 'lessons' must be a list")
    return lessons


def seed_lessons(
    database_url: Optional[str] = None,
    *,
    rows: Optional[List[Dict[str, Any]]] = None,
    reset_spaces: bool = False,
    verbose: bool = True,
) -> Dict[str, int]:
    """
    Upsert catalog lessons.

    Returns:
        Dictionary with statistics: {'created': int, 'updated': int}
    """
    run_settings = settings if database_url is None else Settings(database_url=database_url)
    rows = rows if rows is not None else load_lessons_yaml()
    stats = {"created": 0, "updated": 0}

    database = Database(run_settings).connect()
    try:
        with database.session() as db:
            for row in rows:
                existing = db.execute(
                    select(Lesson).where(
                        Lesson.subject == row["subject"], Lesson.location == row["location"]
                    )
                ).scalar_one_or_none()

                if existing is None:
                    db.add(
                        Lesson(
                            subject=row["subject"],
                            location=row["location"],
                            description=row.get("description", ""),
                            price=row["price"],
                            spaces=row["spaces"],
                            image=row.get("image"),
                        )
                    )
                    stats["created"] += 1
                    continue

                existing.description = row.get("description", "")
                existing.price = row["price"]
                existing.image = row.get("image")
                if reset_spaces:
                    existing.spaces = row["spaces"]
                    existing.version = existing.version + 1
                stats["updated"] += 1
    finally:
        database.dispose()

    if verbose:
        print(f"Lessons created: {stats['created']}, updated: {stats['updated']}")
    return stats


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument("--file", type=Path, default=SEED_FILE, help="Seed YAML file")
    parser.add_argument(
        "--reset-spaces", action="store_true", help="Restore spaces on existing lessons"
    )
    args = parser.parse_args()

    seed_lessons(
        args.database_url,
        rows=load_lessons_yaml(args.file),
        reset_spaces=args.reset_spaces,
    )


if __name__ == "__main__":
    main()
