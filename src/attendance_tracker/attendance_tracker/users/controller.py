from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, parse_bool
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    configs = container.user_config_service
    keys = container.keys

    @app.route("/api/users/<uid>/config", methods=["GET"], endpoint="users_get_config")
    def get_config(uid: str):
        config = configs.get_config(uid)
        return jsonify(config.to_fields())

    @app.route("/api/users/<uid>/config", methods=["PUT"], endpoint="users_put_config")
    def put_config(uid: str):
        data = json_body()
        days = data.get("weeklyDaysOff")
        if not isinstance(days, list):
            raise ValidationError("weeklyDaysOff must be a list of ISO weekdays (1-7)")
        config = configs.set_weekly_days_off(uid, days)
        return jsonify(config.to_fields())

    @app.route("/api/users/<uid>/link", methods=["POST"], endpoint="users_link")
    def link(uid: str):
        data = json_body()
        account = keys.link(
            uid,
            str(data.get("attendanceKey") or ""),
            replace=parse_bool(data.get("replace", False), "replace"),
        )
        return jsonify({"uid": account.uid, "attendanceKey": account.attendance_key, "linkedAt": account.linked_at})

    @app.route("/api/users/<uid>/link", methods=["DELETE"], endpoint="users_unlink")
    def unlink(uid: str):
        return jsonify({"unlinked": keys.unlink(uid)})
