"""
Database table creation script.

Creates the pgvector extension and all tables defined in ORM models.

Dependencies: sqlalchemy, pgvector, ragcore.configs
System role: Database schema initialization

Usage:
    python -m ragcore.boundary.db.create_tables
"""

import logging

from sqlalchemy import text

from ragcore.boundary.db.base import Base
from ragcore.boundary.db.connection import get_engine
from ragcore.observability.logger import configure_logging

# Import all models to register them with Base.metadata
from ragcore.boundary.db import models  # noqa: F401

logger = logging.getLogger(__name__)


def create_all_tables() -> None:
    """
    Create the vector extension and all database tables.

    Idempotent: CREATE EXTENSION IF NOT EXISTS plus CREATE TABLE IF NOT EXISTS
    for each model, so safe to run multiple times.

    The embedding column has no fixed dimension, so no HNSW index is created
    here; build one per dimension once a corpus is uniformly embedded.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_engine()

    with engine.begin() as conn:
        conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))
        Base.metadata.create_all(bind=conn)

    logger.info(f"{__name__}:create_all_tables - All tables created successfully")


if __name__ == "__main__":
    configure_logging()
    create_all_tables()
