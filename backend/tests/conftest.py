"""
Central pytest configuration for the Medeina tests.

This file provides common fixtures, test markers, and setup
for both unit and integration tests.
"""

import logging
import os

# Test configuration (set early so import-time lookups use it)
TEST_DATABASE_URL = "sqlite:///:memory:"  # In-memory SQLite for fast tests
os.environ["DATABASE_URL"] = TEST_DATABASE_URL
os.environ["MEDEINA_STORE"] = "memory"

import pytest  # noqa: E402

from medeina.db.session import build_engine, create_tables, dispose_engine  # noqa: E402
from medeina.repositories import ClinicRepository, InMemoryClinicStore  # noqa: E402
from medeina.services.add_service import AddService  # noqa: E402
from medeina.services.command_service import CommandService  # noqa: E402
from medeina.services.search_service import SearchService  # noqa: E402
from medeina.services.undo_service import UndoService  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from tests.config.markers import (  # noqa: E402,F401
    pytest_collection_modifyitems,
    pytest_configure,
)
from tests.factories.entity_factories import (  # noqa: E402
    ClinicStoreFactory,
    make_appointment,
    make_owner,
    make_pet_patient,
)

# =====================================================
# STORE FIXTURES
# =====================================================


@pytest.fixture
def memory_store():
    """Empty in-memory clinic store."""
    return InMemoryClinicStore()


@pytest.fixture
def mock_store():
    """Store mock where nothing exists yet."""
    return ClinicStoreFactory.create_mock_store()


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine with the clinic tables."""
    engine = build_engine(TEST_DATABASE_URL)
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """Session on the per-test in-memory database."""
    session = sessionmaker(bind=db_engine, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clinic_repo(db_session):
    return ClinicRepository(db_session=db_session)


@pytest.fixture(autouse=True)
def _reset_cached_engine():
    """Drop any engine cached by medeina.db.session during a test."""
    yield
    dispose_engine()


# =====================================================
# SERVICE FIXTURES
# =====================================================


@pytest.fixture
def undo_service(memory_store):
    return UndoService(memory_store, history_limit=50)


@pytest.fixture
def add_service(memory_store, undo_service):
    return AddService(memory_store, undo_service)


@pytest.fixture
def command_service(memory_store, add_service, undo_service):
    return CommandService(
        memory_store,
        add_service=add_service,
        search_service=SearchService(),
        undo_service=undo_service,
    )


# =====================================================
# DATA FIXTURES
# =====================================================


@pytest.fixture
def owner():
    return make_owner()


@pytest.fixture
def pet_patient():
    return make_pet_patient()


@pytest.fixture
def appointment():
    return make_appointment()


@pytest.fixture
def seeded_store(memory_store):
    """Store holding one owner with one pet patient."""
    stored_owner = memory_store.add_owner(make_owner())
    memory_store.add_pet_patient(make_pet_patient().with_owner(stored_owner.nric))
    return memory_store


# =====================================================
# LOGGING FIXTURES
# =====================================================


@pytest.fixture
def restore_root_logging():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    app_level = logging.getLogger("medeina").level
    yield root
    logging.getLogger("medeina").setLevel(app_level)
    for handler in root.handlers[:]:
        if handler not in handlers:
            handler.close()
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
