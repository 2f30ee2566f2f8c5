from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_session, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    def mark_attendance():
        data = json_body()
        record = container.attendance_service.mark_attendance(
            current_session(),
            data.get("studentId"),
            data.get("date"),
            name=data.get("name"),
            time=data.get("time"),
            confidence=data.get("confidence"),
            timestamp=data.get("timestamp"),
        )
        return jsonify({"message": "Attendance marked successfully", "attendance": record.to_dict()}), 201

    @app.route("/api/attendance/capture", methods=["POST"], endpoint="capture_attendance")
    def capture_attendance():
        data = json_body()
        outcome = container.attendance_service.mark_from_capture(
            current_session(),
            data.get("image"),
            date=data.get("date"),
        )
        return jsonify(outcome.to_dict()), 201 if outcome.matched else 200

    @app.route("/api/attendance", methods=["GET"], endpoint="query_attendance")
    def query_attendance():
        args = request.args
        if "startDate" in args or "endDate" in args:
            records = container.attendance_service.query_by_range(
                current_session(), args.get("startDate"), args.get("endDate")
            )
        else:
            records = container.attendance_service.query_by_date(current_session(), args.get("date"))
        return jsonify([r.to_dict() for r in records])
