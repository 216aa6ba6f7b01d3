from __future__ import annotations

from flask import Flask, g, request

from ..common.web import int_arg, login_required, ok
from ..container import Container
from .model import AnalyticsScope


def _scope_from_args() -> AnalyticsScope:
    chapter = request.args.get("chapterLeadId") or ""
    everyone = chapter.lower() == "all" or (request.args.get("scope") or "").lower() == "all"
    return AnalyticsScope(
        user_id=int_arg("userId"),
        chapter_lead_id=None if everyone else int_arg("chapterLeadId", chapter),
        everyone=everyone,
    )


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    # Open to every signed-in user: reporters see their team's view only, and
    # picking a scope is gated in resolve_scope.
    def _report():
        return container.analytics_service.compute_analytics(
            g.context,
            start_date=request.args.get("startDate") or None,
            end_date=request.args.get("endDate") or None,
            scope=_scope_from_args(),
        )

    @app.route("/api/analytics", endpoint="api_analytics")
    @auth
    def analytics():
        return ok(_report().to_dict())

    @app.route("/api/analytics/overview", endpoint="api_analytics_overview")
    @auth
    def overview():
        return ok(_report().overview.to_dict())

    @app.route("/api/analytics/occupancy", endpoint="api_analytics_occupancy")
    @auth
    def occupancy():
        return ok(_report().occupancy_data)

    @app.route("/api/analytics/weekly-pattern", endpoint="api_analytics_weekly_pattern")
    @auth
    def weekly_pattern():
        return ok(_report().weekly_pattern)

    @app.route("/api/analytics/status-distribution", endpoint="api_analytics_status_distribution")
    @auth
    def status_distribution():
        return ok(_report().status_distribution)

    @app.route("/api/analytics/personal", endpoint="api_analytics_personal")
    @auth
    def personal():
        stats = container.analytics_service.compute_personal_stats(
            g.context,
            user_id=int_arg("userId"),
            month=request.args.get("month") or None,
        )
        return ok(stats.to_dict())
