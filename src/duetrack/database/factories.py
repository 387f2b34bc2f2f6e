"""Repository factory functions."""

import os
from pathlib import Path
from typing import Optional

from duetrack.database.sqlalchemy_db import SQLAlchemyPaymentRepository

DB_PATH_ENV = "DUETRACK_DB_PATH"
DEFAULT_DB_FILE = Path(".duetrack") / "duetrack.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file to use.

    An explicit path wins, then ``DUETRACK_DB_PATH``, then
    ``~/.duetrack/duetrack.db``. The parent directory of the chosen file is
    created if missing.
    """
    chosen = database_path or os.environ.get(DB_PATH_ENV)
    path = Path(chosen).expanduser() if chosen else Path.home() / DEFAULT_DB_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def create_sqlite_repository(database_path: Optional[str] = None) -> SQLAlchemyPaymentRepository:
    """Create a SQLite-backed payment repository.

    Args:
        database_path: Path to the SQLite file; see ``resolve_database_path``

    Returns:
        SQLAlchemyPaymentRepository bound to the resolved file
    """
    return SQLAlchemyPaymentRepository(f"sqlite:///{resolve_database_path(database_path)}")
