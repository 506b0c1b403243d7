"""
python -m scripts.seed_places path/to/places.csv

CSV columns: store_code, business_name, latitude, longitude, address
"""

import sys

sys.path.insert(0, ".")

from dotenv import load_dotenv
load_dotenv()

import pandas as pd
from pydantic import ValidationError
from sqlalchemy import text

from app.crud import place as place_crud
from app.database import Base, SessionLocal, engine
from app.models.place import Place
from app.schemas.common import Location
from app.schemas.place import PlaceCreate

REQUIRED_COLUMNS = {"business_name", "latitude", "longitude"}


def load_rows(path: str) -> pd.DataFrame:
    df = pd.read_csv(path)
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")
    return df


def _clean(value):
    if pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def seed_places(path: str):
    """Add places from a CSV file, skipping store codes already present."""
    if engine is None:
        raise RuntimeError("DATABASE_URL environment variable is not set.")

    with engine.connect() as connection:
        connection.execute(text("CREATE EXTENSION IF NOT EXISTS postgis"))
        connection.commit()
    Base.metadata.create_all(bind=engine, tables=[Place.__table__])

    df = load_rows(path)
    db = SessionLocal()
    added = 0
    skipped = 0

    try:
        for row_number, row in enumerate(df.to_dict(orient="records"), start=2):
            store_code = _clean(row.get("store_code"))
            if store_code and place_crud.get_by_store_code(db, store_code):
                skipped += 1
                continue

            try:
                place_in = PlaceCreate(
                    store_code=store_code,
                    business_name=_clean(row.get("business_name")),
                    address=_clean(row.get("address")),
                    location=Location(lat=row["latitude"], lng=row["longitude"]),
                )
            except ValidationError as e:
                print(f"Row {row_number}: skipped, {e.errors()[0]['msg']}")
                skipped += 1
                continue

            place_crud.create(db, obj_in=place_in)
            added += 1

        print(f"\nSuccessfully added {added} places ({skipped} skipped)")

    except Exception as e:
        db.rollback()
        print(f"Error: {e}")
        raise
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(1)
    seed_places(sys.argv[1])
