import asyncio

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from database.models import Path
from app.core import guarded, settings, StoreTimeoutError, StoreUnavailableError
from app.core.errors import NotFoundError, TravelPathError, ValidationError
from app.services import DestinationService, PathService


@pytest.fixture
def unreachable_factory(tmp_path):
    url = f"sqlite+aiosqlite:///{tmp_path / 'missing-dir' / 'store.db'}"
    engine = create_async_engine(url, poolclass=NullPool)
    return async_sessionmaker(bind=engine, expire_on_commit=False)


class TestGuarded:
    async def test_passes_result_through(self):
        async def op():
            return 42

        assert await guarded("op", op()) == 42

    async def test_timeout_is_its_own_kind(self, monkeypatch):
        monkeypatch.setattr(settings, "STORE_TIMEOUT_SECONDS", 0.01)

        async def slow():
            await asyncio.sleep(1)

        with pytest.raises(StoreTimeoutError) as exc_info:
            await guarded("slow_op", slow())

        assert exc_info.value.details["operation"] == "slow_op"
        assert exc_info.value.status_code == 504

    async def test_operational_error_becomes_store_unavailable(self):
        async def broken():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailableError):
            await guarded("broken", broken())

    async def test_domain_errors_pass_untouched(self):
        async def missing():
            raise NotFoundError("Path not found")

        with pytest.raises(NotFoundError):
            await guarded("missing", missing())


class TestTimedOutWrites:
    async def test_timed_out_search_leaves_popularity_unchanged(
        self, monkeypatch, session_factory, add_path, read_popularity
    ):
        path = add_path("Paris", "Rome", popularity=3)
        monkeypatch.setattr(settings, "STORE_TIMEOUT_SECONDS", 0.05)

        async def slow_commit():
            await asyncio.sleep(0.2)

        async with session_factory() as db:
            monkeypatch.setattr(db, "commit", slow_commit)
            with pytest.raises(StoreTimeoutError):
                await PathService(db).find("Paris", "Rome")

        assert read_popularity(Path, path.id) == 3

    async def test_timed_out_fetch_leaves_popularity_unchanged(
        self, monkeypatch, session_factory, add_path, read_popularity
    ):
        path = add_path("Paris", "Rome", popularity=3)
        monkeypatch.setattr(settings, "STORE_TIMEOUT_SECONDS", 0.05)

        async def slow_commit():
            await asyncio.sleep(0.2)

        async with session_factory() as db:
            monkeypatch.setattr(db, "commit", slow_commit)
            with pytest.raises(StoreTimeoutError):
                await PathService(db).get_by_id(path.id)

        assert read_popularity(Path, path.id) == 3


class TestUnreachableStore:
    async def test_destination_search_reports_unavailable_not_empty(self, unreachable_factory):
        async with unreachable_factory() as db:
            with pytest.raises(StoreUnavailableError):
                await DestinationService(db).search("paris")

    async def test_path_search_reports_unavailable(self, unreachable_factory):
        async with unreachable_factory() as db:
            with pytest.raises(StoreUnavailableError):
                await PathService(db).find("Paris", "Rome")

    async def test_validation_still_wins_before_store_access(self, unreachable_factory):
        async with unreachable_factory() as db:
            with pytest.raises(ValidationError):
                await PathService(db).find("Paris", "")


class TestErrorPayload:
    def test_to_dict(self):
        error = ValidationError("From and to parameters are required", details={"missing": ["to"]})

        assert error.to_dict() == {
            "error": "VALIDATION_ERROR",
            "message": "From and to parameters are required",
            "details": {"missing": ["to"]},
        }
        assert isinstance(error, TravelPathError)
        assert error.status_code == 400
