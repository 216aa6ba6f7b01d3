from __future__ import annotations

from flask import Flask, g

from ..common.web import int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/office-capacity", endpoint="api_office_capacity")
    @auth
    def office_capacity():
        week = container.capacity_service.week_capacity(
            week_offset=int_arg("weekOffset") or 0,
            today=g.context.today,
        )
        data = week.to_dict()
        data["capacitySettings"] = [s.to_dict() for s in container.capacity_service.settings()]
        return ok(data)

    @app.route("/api/office-capacity/settings", methods=["PUT"], endpoint="api_office_capacity_update")
    @auth
    def update_capacity():
        body = json_body()
        setting = container.capacity_service.update_capacity(
            g.context,
            day_of_week=body.get("dayOfWeek", ""),
            capacity=body.get("capacity"),
        )
        return ok(setting.to_dict())
