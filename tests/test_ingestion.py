from database.ingestion.ingest_catalog import DEFAULT_CATALOG, ingest_catalog, ingest_paths
from database.models import Destination, Path
from app.services import DestinationService


class TestCatalogIngestion:
    async def test_seed_catalog_loads_and_is_searchable(self, session_factory, sync_session):
        counts = await ingest_catalog(str(DEFAULT_CATALOG), session_factory)

        assert counts == {"destinations": 10, "paths": 4}
        assert sync_session.query(Destination).count() == 10
        assert sync_session.query(Path).count() == 4

        async with session_factory() as db:
            results = await DestinationService(db).search("aus")

        assert {d.country for d in results} == {"Austria"}
        assert [d.name for d in results] == ["Vienna", "Salzburg", "Hallstatt"]

    async def test_invalid_records_are_skipped(self, session_factory, sync_session):
        records = [
            {"from": "A", "to": "B", "stations": [{"name": "A"}]},
            {"from": "Paris", "to": "Rome"},
        ]

        assert await ingest_paths(records, session_factory) == 1
        assert sync_session.query(Path).count() == 1
