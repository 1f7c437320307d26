"""
Ingest destinations and paths from a catalog JSON file

File layout:
    {
        "destinations": [{"name": ..., "type": ..., "country": ..., ...}],
        "paths": [{"from": ..., "to": ..., "stations": [...], "transport_options": [...]}]
    }
"""

import sys
import json
import asyncio
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pydantic import ValidationError as SchemaError

from database.config import SessionLocal, init_db
from app.models import DestinationCreate, PathCreate
from app.services import DestinationService, PathService

DEFAULT_CATALOG = Path(__file__).parent / 'seed_catalog.json'


def load_catalog(catalog_path: str) -> dict:
    print(f"Loading catalog from {catalog_path}...")
    with open(catalog_path, 'r', encoding='utf-8') as f:
        return json.load(f)


async def ingest_destinations(records: list, session_factory=SessionLocal) -> int:
    """
    Insert destinations with their search index tokens

    Returns:
        Number of destinations created
    """
    print("Ingesting destinations...")
    count = 0

    async with session_factory() as db:
        service = DestinationService(db)
        for record in records:
            try:
                data = DestinationCreate.model_validate(record)
            except SchemaError as e:
                print(f"Skipping destination {record.get('name')}: {e.error_count()} invalid fields")
                continue
            await service.create(data)
            count += 1

    print(f"✓ Destinations ingested: {count}")
    return count


async def ingest_paths(records: list, session_factory=SessionLocal) -> int:
    """
    Insert paths with their ordered stations and transport options

    Returns:
        Number of paths created
    """
    print("Ingesting paths...")
    count = 0

    async with session_factory() as db:
        service = PathService(db)
        for record in records:
            try:
                data = PathCreate.model_validate(record)
            except SchemaError as e:
                print(f"Skipping path {record.get('from')} -> {record.get('to')}: {e.error_count()} invalid fields")
                continue
            await service.create(data)
            count += 1

    print(f"✓ Paths ingested: {count}")
    return count


async def ingest_catalog(catalog_path: str, session_factory=SessionLocal) -> dict:
    catalog = load_catalog(catalog_path)
    return {
        'destinations': await ingest_destinations(catalog.get('destinations', []), session_factory),
        'paths': await ingest_paths(catalog.get('paths', []), session_factory),
    }


def main():
    """
    Main function to ingest a catalog file
    """
    import argparse

    parser = argparse.ArgumentParser(description='Ingest destinations and paths')
    parser.add_argument('--file', default=str(DEFAULT_CATALOG), help='Catalog JSON file')
    args = parser.parse_args()

    print("=" * 60)
    print("Ingesting Catalog")
    print("=" * 60)

    init_db()
    asyncio.run(ingest_catalog(args.file))

    print("\n" + "=" * 60)
    print("Catalog ingestion completed")
    print("=" * 60)


if __name__ == "__main__":
    main()
