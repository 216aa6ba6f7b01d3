from __future__ import annotations

from flask import Flask, g

from ..common.web import int_arg, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    auth = login_required(container)

    @app.route("/api/delegations", methods=["GET"], endpoint="api_delegations")
    @auth
    def list_delegations():
        return ok([d.to_dict() for d in container.delegation_service.list_delegations(g.context)])

    @app.route("/api/delegations", methods=["POST"], endpoint="api_delegations_create")
    @auth
    def create_delegation():
        body = json_body()
        delegation = container.delegation_service.create_delegation(
            g.context,
            delegate_id=int_arg("delegateId", body.get("delegateId"), required=True),
            start_date=body.get("startDate", ""),
            end_date=body.get("endDate", ""),
        )
        return ok(delegation.to_dict(), 201)

    @app.route("/api/delegations", methods=["DELETE"], endpoint="api_delegations_revoke")
    @app.route("/api/delegations/<int:delegation_id>", methods=["DELETE"], endpoint="api_delegation_revoke")
    @auth
    def revoke_delegation(delegation_id: int | None = None):
        if delegation_id is None:
            delegation_id = int_arg("id", required=True)
        container.delegation_service.revoke(g.context, delegation_id)
        return ok()

    @app.route("/api/delegations/active", endpoint="api_delegations_active")
    @auth
    def active_delegation():
        delegation = container.delegation_service.active_delegation_for(g.context.user_id, as_of=g.context.today)
        return ok(
            {
                "hasActiveDelegation": delegation is not None,
                "delegation": delegation.to_dict() if delegation else None,
            }
        )
