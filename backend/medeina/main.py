"""
Application factory for the Medeina clinic core.

Builds the configured store and wires the services around it. Front ends
(the click CLI, tests) only talk to the returned ``CommandService``.
"""

import logging
from typing import Optional

from dotenv import load_dotenv

from medeina.core.config import (
    STORE_MEMORY,
    get_database_url,
    get_log_json,
    get_log_level,
    get_log_to_file,
    get_sql_echo,
    get_store_backend,
    log_clinic_config,
)
from medeina.core.logging_config import setup_logging
from medeina.domain.interfaces import IClinicStore
from medeina.repositories import ClinicRepository, InMemoryClinicStore
from medeina.services.add_service import AddService
from medeina.services.command_service import CommandService
from medeina.services.search_service import SearchService
from medeina.services.undo_service import UndoService

logger = logging.getLogger(__name__)


def build_store(
    store_backend: Optional[str] = None, database_url: Optional[str] = None
) -> IClinicStore:
    """Create the store selected by ``store_backend`` (or MEDEINA_STORE)."""
    backend = store_backend or get_store_backend()
    if backend == STORE_MEMORY:
        return InMemoryClinicStore()

    from medeina.db.session import SessionLocal, create_tables, get_engine

    url = database_url or get_database_url()
    create_tables(get_engine(url))
    return ClinicRepository(db_session=SessionLocal(url))


def create_clinic(
    database_url: Optional[str] = None,
    store_backend: Optional[str] = None,
    configure_logging: bool = True,
) -> CommandService:
    """Create a ready-to-use command service.

    Args:
        database_url: SQLAlchemy URL, defaults to DATABASE_URL
        store_backend: "sqlalchemy" or "memory", defaults to MEDEINA_STORE
        configure_logging: set up handlers from LOG_* variables
    """
    load_dotenv()

    if configure_logging:
        setup_logging(
            log_level=get_log_level(),
            enable_sql_echo=get_sql_echo(),
            log_to_file=get_log_to_file(),
            use_json_format=get_log_json(),
        )
        log_clinic_config()

    store = build_store(store_backend, database_url)
    undo_service = UndoService(store)
    service = CommandService(
        store,
        add_service=AddService(store, undo_service),
        search_service=SearchService(),
        undo_service=undo_service,
    )
    logger.info(
        "Clinic ready",
        extra={"context": {"store": type(store).__name__}},
    )
    return service
