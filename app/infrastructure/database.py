"""
Record store wiring.

Declares the SQLAlchemy Core tables used by the repository adapters and
builds engines from application settings. SQLite is the default for
local development; Postgres is reached through psycopg2.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    create_engine,
    true,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

metadata = MetaData()

contacts = Table(
    "contacts",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("email", String(255), nullable=False, index=True),
    Column("message", Text, nullable=False),
    Column("submitted_at", DateTime(timezone=True), nullable=False, index=True),
    Column("ip_address", String(64)),
    Column("user_agent", String(512)),
    Column("status", String(16), nullable=False, default="new", index=True),
)

profiles = Table(
    "profiles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("title", String(200), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("location", String(100)),
    Column("bio", Text, nullable=False),
    Column("experience", JSON, nullable=False, default=list),
    Column("website", String(255)),
    Column("github", String(255)),
    Column("linkedin", String(255)),
    Column("resume", String(255)),
    Column("profile_image", String(255)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("version", Integer, nullable=False, default=1),
    Column("updated_at", DateTime(timezone=True)),
)

# Only one active profile at a time.
Index(
    "uq_profiles_single_active",
    profiles.c.is_active,
    unique=True,
    sqlite_where=profiles.c.is_active == true(),
    postgresql_where=profiles.c.is_active == true(),
)

skills = Table(
    "skills",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("category", String(32), nullable=False),
    Column("name", String(100), nullable=False),
    Column("proficiency", String(16), nullable=False, default="intermediate"),
    Column("years_of_experience", Integer, nullable=False, default=0),
    Column("description", String(500)),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("display_order", Integer, nullable=False, default=0),
    UniqueConstraint("category", "name", name="uq_skills_category_name"),
    Index("ix_skills_category_order", "category", "display_order"),
)


def build_engine(database_url: str) -> Engine:
    """Build a SQLAlchemy engine for the configured record store."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Sync handlers run on the threadpool.
        connect_args["check_same_thread"] = False
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


def create_schema(engine: Engine) -> None:
    """Create any missing tables."""
    metadata.create_all(engine)
    logger.info("Record store schema ready (%s).", engine.url.render_as_string(hide_password=True))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
