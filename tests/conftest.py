import os
import sys
import asyncio
import inspect

import pytest
from sqlalchemy import create_engine
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

# Ensure project root is on sys.path so `import app` works in tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from database.models import Base, Destination, Path, Station, TransportOption, User, index_destination, utcnow
from app.services.user_service import hash_password


def pytest_pyfunc_call(pyfuncitem):
    """Allow running async tests without pytest-asyncio.

    If the test function is a coroutine, run it in a fresh event loop.
    """
    testfunction = pyfuncitem.obj
    if inspect.iscoroutinefunction(testfunction):
        funcargs = pyfuncitem.funcargs
        sig = inspect.signature(testfunction)
        # Filter only the parameters that the test function expects
        allowed = {name: funcargs[name] for name in sig.parameters.keys() if name in funcargs}
        asyncio.run(testfunction(**allowed))
        return True
    return None


@pytest.fixture
def db_path(tmp_path):
    """Fresh SQLite file with the full schema"""
    path = tmp_path / "travelpath_test.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    return path


@pytest.fixture
def session_factory(db_path):
    """Async sessions as the app uses them; NullPool keeps connections off any one event loop"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def sync_session(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    session = sessionmaker(bind=engine, expire_on_commit=False)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def add_destination(sync_session):
    def _add(name, country, type="city", popularity=0, **kwargs):
        destination = Destination(
            name=name, country=country, type=type, popularity=popularity,
            tags=kwargs.pop("tags", []), **kwargs
        )
        index_destination(destination)
        sync_session.add(destination)
        sync_session.commit()
        return destination
    return _add


@pytest.fixture
def add_path(sync_session):
    def _add(from_location, to_location, popularity=0, transport_types=("train",), stations=None):
        stations = stations or [from_location, to_location]
        path = Path(
            from_location=from_location,
            to_location=to_location,
            popularity=popularity,
            tags=[],
            stations=[
                Station(position=i, name=name, cost_from_start=10.0 * i, distance_from_start=100.0 * i)
                for i, name in enumerate(stations)
            ],
            transport_options=[
                TransportOption(position=i, type=t, cost=50.0, duration="3h", comfort_level="comfort", features=[])
                for i, t in enumerate(transport_types)
            ]
        )
        sync_session.add(path)
        sync_session.commit()
        return path
    return _add


@pytest.fixture
def add_user(sync_session):
    def _add(email="traveller@example.com", password="secret123", name="Traveller", created_at=None):
        creds = hash_password(password)
        user = User(
            name=name,
            email=email,
            password_hash=creds["hash"],
            password_salt=creds["salt"],
            travel_style="comfort",
            preferred_transport=[],
            created_at=created_at or utcnow()
        )
        sync_session.add(user)
        sync_session.commit()
        return user
    return _add


@pytest.fixture
def read_popularity(sync_session):
    def _read(model, record_id):
        sync_session.expire_all()
        return sync_session.get(model, record_id).popularity
    return _read
