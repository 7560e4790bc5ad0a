#!/usr/bin/env python3
"""
Seed the profile and skills catalog from a JSON file.

Usage:
    python scripts/seed_profile.py
    python scripts/seed_profile.py --replace --backup backups/
    python scripts/seed_profile.py --file data/profile.json --database-url sqlite:///./portfolio.db
"""

import argparse
import logging
import sys
from pathlib import Path

from app.core.config import settings
from app.domain.portfolio.errors import StorageError
from app.infrastructure.database import build_engine, create_schema
from app.infrastructure.portfolio.profile_repository import ProfileRepositoryAdapter
from app.infrastructure.portfolio.seeding import SeedConflictError, load_seed_file, seed_profile
from app.shared.logging import configure_logging

logger = logging.getLogger("scripts.seed_profile")

DEFAULT_SEED_FILE = Path(__file__).resolve().parent.parent / "data" / "profile.json"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Load the portfolio profile into the database.")
    parser.add_argument("--file", type=Path, default=DEFAULT_SEED_FILE, help="Seed JSON file")
    parser.add_argument(
        "--database-url", default=settings.database_url, help="SQLAlchemy database URL"
    )
    parser.add_argument("--replace", action="store_true", help="Overwrite existing data")
    parser.add_argument(
        "--backup", type=Path, metavar="DIR", help="Back up existing data to DIR first"
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Seed the database. Returns the process exit status."""
    args = parse_args(argv)
    configure_logging(level=settings.log_level)

    engine = build_engine(args.database_url)
    try:
        create_schema(engine)
        seed = load_seed_file(args.file)
        seed_profile(
            ProfileRepositoryAdapter(engine=engine),
            seed,
            replace=args.replace,
            backup_dir=args.backup,
        )
    except SeedConflictError as exc:
        logger.error("%s", exc)
        return 1
    except (OSError, StorageError) as exc:
        logger.error("Seeding failed: %s", exc)
        return 2
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
