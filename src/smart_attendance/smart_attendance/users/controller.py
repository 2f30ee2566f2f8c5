from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..access.session import Session
from ..common.http import current_session, json_body
from ..common.validators import require_bool
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    def register_account():
        data = json_body()
        account = container.auth_service.register(
            data.get("email"),
            data.get("password"),
            data.get("fullName"),
            data.get("role"),
        )
        return jsonify({"message": "User registered successfully", "user": account.to_public_dict()}), 201

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        account = container.auth_service.authenticate(data.get("email"), data.get("password"))

        session.clear()
        session.permanent = bool(data.get("rememberMe"))
        session.update(Session.for_account(account).to_mapping())

        return jsonify({"message": "Login successful", "user": account.to_public_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        account = container.user_service.get_current(current_session())
        return jsonify({"user": account.to_public_dict()})

    @app.route("/api/auth/password", methods=["POST"], endpoint="change_password")
    def change_password():
        data = json_body()
        container.user_service.change_password(
            current_session(),
            old_password=data.get("currentPassword"),
            new_password=data.get("newPassword"),
        )
        return jsonify({"message": "Password updated"})

    @app.route("/api/users", methods=["GET"], endpoint="list_users")
    def list_users():
        accounts = container.user_service.list_accounts(current_session(), role=request.args.get("role"))
        return jsonify([a.to_public_dict() for a in accounts])

    @app.route("/api/users/<int:account_id>/active", methods=["PATCH"], endpoint="set_user_active")
    def set_user_active(account_id: int):
        data = json_body()
        account = container.user_service.set_active(
            current_session(),
            account_id=account_id,
            is_active=require_bool(data.get("isActive"), "isActive"),
        )
        return jsonify({"message": "Account updated", "user": account.to_public_dict()})
