from __future__ import annotations

import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import inspect

from roulette.config import configure_logging
from roulette.db.engine import make_engine

logger = logging.getLogger("roulette.scripts.init_db")


def upgrade_db(target_revision: str = "head") -> None:
    """Apply Alembic migrations up to ``target_revision``."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def main() -> None:
    configure_logging()
    upgrade_db()
    tables = inspect(make_engine()).get_table_names()
    logger.info(f"Schema ready: {', '.join(sorted(tables))}")


if __name__ == "__main__":
    main()
