"""Example: call the service layer directly (no Flask).

Controllers are thin; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.office_tracker.office_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    ctx = container.auth_service.load_context(user_id=1)
    print(container.capacity_service.week_capacity(week_offset=0).to_dict())
    print(container.analytics_service.compute_personal_stats(ctx).to_dict())


if __name__ == "__main__":
    main()
