from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify

from ..common.http import json_body, parse_bool
from ..container import Container
from ..core.exceptions import AmbiguousSession, SessionNotFound
from .model import SelectResult, Session


def session_json(s: Session) -> Dict[str, Any]:
    return {
        "id": s.session_id,
        "name": s.name,
        "code": s.code,
        "startDate": s.start_date.isoformat(),
        "endDate": s.end_date.isoformat() if s.end_date else None,
        "createdAt": s.created_at,
        "selected": s.is_selected,
    }


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    @app.route("/api/sessions/<uid>", methods=["GET"], endpoint="sessions_list")
    def list_sessions(uid: str):
        sessions = service.list_sessions(uid)
        return jsonify({"sessions": [session_json(s) for s in sessions]})

    @app.route("/api/sessions/<uid>", methods=["POST"], endpoint="sessions_create")
    def create_session(uid: str):
        data = json_body()
        session = service.create_session(
            uid,
            name=data.get("name") or "",
            start_date=data.get("startDate") or "",
            end_date=data.get("endDate") or None,
            make_selected=parse_bool(data.get("select", False), "select"),
        )
        return jsonify({"session": session_json(session)}), 201

    @app.route("/api/sessions/<uid>/select", methods=["POST"], endpoint="sessions_select")
    def select_session(uid: str):
        data = json_body()
        identifier = str(data.get("session") or "").strip()
        result = service.select_session(uid, identifier)
        if result.ok:
            return jsonify({"session": session_json(result.session)})
        if result.reason == SelectResult.AMBIGUOUS:
            raise AmbiguousSession(identifier, candidates=result.candidates)
        raise SessionNotFound(identifier, available=service.available_names(uid))

    @app.route("/api/sessions/<uid>/selection", methods=["DELETE"], endpoint="sessions_clear_selection")
    def clear_selection(uid: str):
        service.clear_selection(uid)
        return jsonify({"selected": None})

    @app.route("/api/sessions/<uid>/<identifier>", methods=["DELETE"], endpoint="sessions_delete")
    def delete_session(uid: str, identifier: str):
        deleted = service.delete_session(uid, identifier)
        return jsonify({"deleted": session_json(deleted)})
