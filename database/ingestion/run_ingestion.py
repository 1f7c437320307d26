"""
Master ingestion script - Run all ingestion steps in order
"""

import sys
import asyncio
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sqlalchemy import func, select

from database.config import init_db, reset_db, SessionLocal
from database.ingestion.ingest_catalog import DEFAULT_CATALOG, ingest_catalog
from database.models import Destination, DestinationToken, Path as StoredPath, Station, TransportOption, User


async def summarize() -> dict:
    async with SessionLocal() as db:
        counts = {}
        for label, model in (
            ('Destinations', Destination),
            ('Index tokens', DestinationToken),
            ('Paths', StoredPath),
            ('Stations', Station),
            ('Transport options', TransportOption),
            ('Users', User),
        ):
            counts[label] = await db.scalar(select(func.count()).select_from(model))
        return counts


def main():
    """
    Run complete ingestion pipeline
    """
    import argparse

    parser = argparse.ArgumentParser(description='Run complete data ingestion pipeline')
    parser.add_argument('--reset', action='store_true', help='Reset database before ingestion')
    parser.add_argument('--file', default=str(DEFAULT_CATALOG), help='Catalog JSON file')
    args = parser.parse_args()

    print("\n" + "=" * 70)
    print(" " * 20 + "TRAVELPATH DATA INGESTION")
    print("=" * 70 + "\n")

    # Step 0: Initialize or reset database
    if args.reset:
        print("⚠️  Resetting database (all existing data will be deleted)...")
        response = input("Are you sure? (yes/no): ")
        if response.lower() == 'yes':
            reset_db()
        else:
            print("Aborting reset")
            return
    else:
        print("Initializing database...")
        init_db()

    print("\n" + "-" * 70)

    # Step 1: Destinations and paths
    print("\nSTEP 1: Ingesting Destinations and Paths")
    print("-" * 70)
    catalog_file = Path(args.file)

    if catalog_file.exists():
        asyncio.run(ingest_catalog(str(catalog_file)))
    else:
        print(f"⚠️  Catalog file not found at {catalog_file}")

    print("\n" + "=" * 70)
    print(" " * 20 + "INGESTION COMPLETED SUCCESSFULLY")
    print("=" * 70 + "\n")

    print("Database Summary:")
    for label, count in asyncio.run(summarize()).items():
        print(f"  {label + ':':<19}{count}")

    print("\n" + "=" * 70 + "\n")


if __name__ == "__main__":
    main()
