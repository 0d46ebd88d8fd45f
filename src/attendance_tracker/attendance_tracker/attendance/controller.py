from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..common.http import body_attributes, json_body, parse_bool
from ..container import Container
from .model import AnswerResult, DayStatus, MarkResult


def status_json(status: Optional[DayStatus]) -> Optional[Dict[str, Any]]:
    if status is None:
        return None
    return {"status": status.kind.value, "holidayName": status.holiday_name}


def _mark_json(result: MarkResult, attributes: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "outcome": result.outcome.value,
        "date": result.day.isoformat(),
        "status": status_json(result.status),
        "existing": status_json(result.existing),
        "attributes": attributes,
    }


def _answer_json(result: AnswerResult, attributes: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "outcome": result.outcome.value,
        "date": result.day.isoformat() if result.day else None,
        "status": status_json(result.status),
        "previous": status_json(result.previous),
        "attributes": attributes,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/<uid>/mark", methods=["POST"], endpoint="attendance_mark")
    def mark(uid: str):
        data = json_body()
        attributes = body_attributes(data)
        result = service.mark(
            uid,
            data.get("status"),
            day=data.get("date") or None,
            holiday_name=data.get("holidayName"),
            attributes=attributes,
        )
        return jsonify(_mark_json(result, attributes))

    @app.route("/api/attendance/<uid>/confirm", methods=["POST"], endpoint="attendance_confirm")
    def confirm(uid: str):
        data = json_body()
        attributes = body_attributes(data)
        result = service.answer(uid, parse_bool(data.get("answer"), "answer"), attributes)
        return jsonify(_answer_json(result, attributes))

    @app.route("/api/attendance/<uid>/days/<day>", methods=["GET"], endpoint="attendance_day")
    def get_day(uid: str, day: str):
        record = service.get_day(uid, day)
        if record is None:
            return jsonify({"date": day, "status": None}), 404
        return jsonify(
            {
                "date": record.day.isoformat(),
                "status": status_json(record.status),
                "createdAt": record.created_at,
                "updatedAt": record.updated_at,
            }
        )

    @app.route("/api/attendance/<uid>/pending", methods=["DELETE"], endpoint="attendance_discard")
    def discard(uid: str):
        data = json_body()
        attributes = body_attributes(data)
        discarded = service.discard_pending(attributes)
        return jsonify({"discarded": discarded, "attributes": attributes})
