from __future__ import annotations

import logging

from roulette import RouletteService
from roulette.config import configure_logging
from roulette.db import create_schema, get_sessionmaker, make_engine
from roulette.models import RouletteMode
from roulette.persistence import RECORD_KEYS, SQLAlchemyKeyValueStore

logger = logging.getLogger("roulette.scripts.seed_dev")

PARTICIPANTS = """\
João Silva
Maria Souza
Ana Lima
Carlos Pereira
Beatriz Costa
"""

TASKS = """\
Write release notes | Summarise the sprint changes
Review open pull requests
Update the on-call calendar | Cover next week
Run the retro
"""


def main() -> None:
    """Reset the development database and load sample participants and tasks."""
    configure_logging()
    engine = make_engine()
    create_schema(engine)
    store = SQLAlchemyKeyValueStore(get_sessionmaker(engine))

    # Overwrite every record so the service starts from a clean slate.
    for key in RECORD_KEYS:
        store.set(key, None)

    service = RouletteService(store)
    service.clear_participants()
    service.clear_tasks()
    service.clear_history()
    participants = service.add_participants_bulk(PARTICIPANTS)
    tasks = service.add_task_bulk(TASKS)
    service.set_mode(RouletteMode.TASKS)
    logger.info(f"Seeded {len(participants)} participants and {len(tasks)} tasks")


if __name__ == "__main__":
    main()
