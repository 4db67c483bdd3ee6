#!/usr/bin/env python3
"""
Standalone database initialization script.

Creates the MealCheckin tables (and the per-day guest meal unique index) in
the configured store, and optionally loads guests from a CSV export of the
registration system.

CSV columns: external_id, first_name, last_name, full_name (optional, built
from first/last when blank), preferred_name, housing_status, age_group, gender
"""

import argparse
import csv
import logging
import sys
from pathlib import Path
from typing import Iterable, Mapping

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from app.config import get_settings
from domain.models import Guest, create_session_factory, create_store_engine, init_database

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("mealcheckin.init_db")

GUEST_FIELDS = (
    "external_id",
    "first_name",
    "last_name",
    "full_name",
    "preferred_name",
    "housing_status",
    "age_group",
    "gender",
)


def guest_from_row(row: Mapping[str, str]) -> Guest:
    """Build a Guest from one CSV row; blank optional fields become NULL"""
    values = {f: (row.get(f) or "").strip() or None for f in GUEST_FIELDS}
    if not values["external_id"] or not values["first_name"] or not values["last_name"]:
        raise ValueError(f"Guest row is missing external_id/first_name/last_name: {dict(row)}")
    if not values["full_name"]:
        values["full_name"] = f"{values['first_name']} {values['last_name']}"
    return Guest(**values)


def seed_guests(db: Session, rows: Iterable[Mapping[str, str]]) -> int:
    """Insert guests whose external ID is not present yet; returns the number inserted"""
    known = {external_id for (external_id,) in db.query(Guest.external_id).all()}
    inserted = 0
    for row in rows:
        guest = guest_from_row(row)
        if guest.external_id in known:
            logger.debug(f"Skipping existing guest {guest.external_id}")
            continue
        db.add(guest)
        known.add(guest.external_id)
        inserted += 1
    db.commit()
    return inserted


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create MealCheckin tables")
    parser.add_argument(
        "--seed-csv",
        type=Path,
        help="CSV file of guests to load after the schema is created",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    engine = create_store_engine(settings)
    try:
        init_database(engine)
        tables = inspect(engine).get_table_names()
        logger.info(f"✓ Tables present: {', '.join(tables)}")

        if args.seed_csv:
            with args.seed_csv.open(newline="", encoding="utf-8") as fh:
                with create_session_factory(engine)() as db:
                    count = seed_guests(db, csv.DictReader(fh))
            logger.info(f"✓ Loaded {count} new guest(s) from {args.seed_csv}")
    except Exception as e:
        logger.exception(f"✗ Database initialization failed: {e}")
        return 1
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
