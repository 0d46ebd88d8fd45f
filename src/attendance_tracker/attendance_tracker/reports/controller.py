from __future__ import annotations

from typing import Any, Dict

from flask import Flask, jsonify, request

from ..container import Container
from ..sessions.controller import session_json
from .model import PercentageResult


def _result_json(result: PercentageResult) -> Dict[str, Any]:
    return {
        "start": result.start.isoformat(),
        "end": result.end.isoformat(),
        "presentDays": result.present_days,
        "totalWorkingDays": result.total_working_days,
        "percentage": result.percentage,
    }


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports/<uid>/monthly", methods=["GET"], endpoint="reports_monthly")
    def monthly(uid: str):
        month = request.args.get("month") or None
        result = service.monthly_percentage(uid, month)
        return jsonify(_result_json(result))

    @app.route("/api/reports/<uid>/session", methods=["GET"], endpoint="reports_session")
    def session_report(uid: str):
        name = request.args.get("name") or None
        report = service.session_percentage(uid, name)
        payload = _result_json(report.result)
        payload["source"] = report.window.source.value
        payload["session"] = session_json(report.window.session) if report.window.session else None
        return jsonify(payload)
