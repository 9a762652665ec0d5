import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT / "server"))

from sqlalchemy import create_engine, inspect, select  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from config import settings  # noqa: E402
from db.models import SUPPORTED_MODEL, Base, ModelVersion  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the alert tables and schema version marker in an empty database.")
    parser.add_argument("--dsn", default=settings.DATABASE_URL, help="SQLAlchemy database URL")
    args = parser.parse_args()

    if not args.dsn:
        print("A database URL is required (--dsn or DATABASE_URL)")
        return 1

    engine = create_engine(args.dsn)
    try:
        current = None
        if inspect(engine).has_table(ModelVersion.__tablename__):
            with Session(engine) as db:
                current = db.execute(select(ModelVersion.version).order_by(ModelVersion.id)).scalars().first()

        if current is not None and current != SUPPORTED_MODEL:
            print(f"Database already holds model version {current}; refusing to touch it.")
            return 1

        Base.metadata.create_all(bind=engine)
        if current is None:
            with Session(engine) as db:
                db.add(ModelVersion(version=SUPPORTED_MODEL))
                db.commit()
            print(f"Created schema, model version {SUPPORTED_MODEL}.")
        else:
            print(f"Schema already at model version {current}.")
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    raise SystemExit(main())
