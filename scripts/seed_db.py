from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.office_tracker.office_tracker.database.bootstrap import ensure_demo_users

logger = logging.getLogger("office_tracker.scripts")


def main() -> None:
    logging.basicConfig(level=logging.INFO, handlers=[logging.StreamHandler()])
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    ensure_demo_users(db_config, default_capacity=getattr(settings, "DEFAULT_OFFICE_CAPACITY", 10) or 10)
    logger.info(
        "seeded demo users -> %s@%s:%s/%s",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )


if __name__ == "__main__":
    main()
