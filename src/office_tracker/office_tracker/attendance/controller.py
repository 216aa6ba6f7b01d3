from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import normalize_date
from ..common.web import int_arg, json_body, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @auth
    def list_attendance():
        records = container.attendance_service.list_records(
            user_id=int_arg("userId"),
            start_date=request.args.get("startDate") or None,
            end_date=request.args.get("endDate") or None,
            status=request.args.get("status") or None,
        )
        return ok([r.to_dict() for r in records])

    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_set")
    @auth
    def set_own():
        body = json_body()
        record = container.attendance_service.set_own_attendance(
            g.context,
            work_date=body.get("date") or g.context.today,
            status=body.get("status", ""),
            notes=body.get("notes"),
        )
        return ok(record.to_dict(), 201)

    @app.route("/api/attendance/allocate", methods=["POST"], endpoint="api_attendance_allocate")
    @auth
    def allocate():
        body = json_body()
        record = container.attendance_service.allocate_attendance(
            g.context,
            target_user_id=int_arg("userId", body.get("userId"), required=True),
            work_date=body.get("date") or g.context.today,
            status=body.get("status", ""),
            notes=body.get("notes"),
        )
        return ok(record.to_dict(), 201)

    @app.route("/api/attendance/week", endpoint="api_attendance_week")
    @auth
    def week():
        return ok(
            container.attendance_service.week_view(
                week_offset=int_arg("weekOffset") or 0,
                today=g.context.today,
            )
        )

    @app.route("/api/attendance/history", endpoint="api_attendance_history")
    @auth
    def history():
        user_id = int_arg("userId") or g.context.user_id
        limit = int_arg("limit") or DEFAULT_HISTORY_LIMIT
        return ok([r.to_dict() for r in container.attendance_service.history(user_id, limit=limit)])

    @app.route("/api/attendance/in-office", endpoint="api_attendance_in_office")
    @auth
    def in_office():
        day = normalize_date(request.args.get("date") or g.context.today)
        return ok([u.to_dict() for u in container.attendance_service.in_office_on(day)])
