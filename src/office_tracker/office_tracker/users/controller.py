from __future__ import annotations

from flask import Flask, g, session

from ..common.web import int_arg, json_body, login_required, ok
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..delegations.engine import active_delegations_for
from . import permissions


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/login", methods=["POST"], endpoint="api_login")
    def login():
        body = json_body()
        user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("remember"))
        session["user_id"] = user.user_id
        return ok({"user": user.to_dict()})

    @app.route("/api/logout", methods=["POST"], endpoint="api_logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/me", endpoint="api_me")
    @auth
    def me():
        ctx = g.context
        active = active_delegations_for(ctx.user_id, ctx.delegations, as_of=ctx.today)
        return ok(
            {
                "user": ctx.user.to_dict(),
                "roleName": permissions.role_display_name(ctx.user.role),
                "permissions": sorted(p.value for p in ctx.permissions),
                "hasActiveDelegation": bool(active),
            }
        )

    @app.route("/api/me/password", methods=["POST"], endpoint="api_change_password")
    @auth
    def change_password():
        body = json_body()
        if body.get("newPassword") != body.get("confirmPassword", body.get("newPassword")):
            raise ValidationError("New passwords do not match")
        container.auth_service.change_password(
            g.context,
            current_password=body.get("currentPassword", ""),
            new_password=body.get("newPassword", ""),
        )
        return ok()

    @app.route("/api/users", methods=["GET"], endpoint="api_users")
    @auth
    def list_users():
        return ok([u.to_dict() for u in container.user_service.list_users()])

    @app.route("/api/users", methods=["POST"], endpoint="api_users_create")
    @auth
    def create_user():
        body = json_body()
        try:
            role = Role(body.get("role", Role.REPORTER.value))
        except ValueError:
            raise ValidationError("Invalid role")

        user_id = container.user_service.create_user(
            g.context,
            email=body.get("email", ""),
            name=body.get("name", ""),
            password=body.get("password", ""),
            role=role,
            chapter_lead_id=int_arg("chapterLeadId", body.get("chapterLeadId")),
            team_name=body.get("teamName"),
        )
        return ok(container.user_service.get_user(user_id).to_dict(), 201)

    @app.route("/api/users/<int:user_id>", methods=["GET"], endpoint="api_user")
    @auth
    def get_user(user_id: int):
        return ok(container.user_service.get_user(user_id).to_dict())

    @app.route("/api/users/<int:user_id>", methods=["PATCH"], endpoint="api_user_update")
    @auth
    def update_user(user_id: int):
        body = json_body()
        user = container.user_service.update_profile(
            g.context, user_id, name=body.get("name", ""), avatar=body.get("avatar")
        )
        return ok(user.to_dict())

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="api_user_delete")
    @auth
    def delete_user(user_id: int):
        container.user_service.delete_user(g.context, user_id)
        return ok()

    @app.route("/api/users/<int:user_id>/reports", endpoint="api_user_reports")
    @auth
    def direct_reports(user_id: int):
        return ok([u.to_dict() for u in container.user_service.direct_reports(g.context, user_id)])

    @app.route("/api/teams/my-team", endpoint="api_my_team")
    @auth
    def my_team():
        team = container.user_service.my_team(g.context)
        return ok(
            {
                "lead": team["lead"].to_dict() if team["lead"] else None,
                "members": [u.to_dict() for u in team["members"]],
            }
        )

    @app.route("/api/teams/hierarchy", endpoint="api_team_hierarchy")
    @auth
    def hierarchy():
        return ok(container.user_service.team_hierarchy(g.context).to_dict())
