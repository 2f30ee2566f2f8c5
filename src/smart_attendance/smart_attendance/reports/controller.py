from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_str
from ..common.http import current_session
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    def attendance_stats():
        args = request.args
        if args.get("date"):
            stats = container.report_service.daily_stats(current_session(), args.get("date"))
        else:
            stats = container.report_service.range_stats(
                current_session(), args.get("startDate"), args.get("endDate")
            )
        return jsonify(stats.to_dict(include_records=True))

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    def attendance_export():
        args = request.args
        start, end = args.get("startDate"), args.get("endDate")
        text = container.report_service.export_csv(current_session(), start, end)

        filename = f"attendance_{start or 'all'}_{end or today_str()}.csv"
        return app.response_class(
            text.encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
