from __future__ import annotations

import logging

from flask import Flask, request

from ..common.api import bearer_required, current_user, domain_error_response, json_error, json_ok
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.auth_service)

    @app.route("/api/attendance", methods=["GET"], endpoint="get_attendance")
    @auth_required
    def get_attendance():
        date = request.args.get("date")
        student_id = request.args.get("studentId")
        try:
            records = container.attendance_service.query(current_user(), date=date, student_id=student_id)
            return json_ok([r.to_dict() for r in records])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching attendance")
            return json_error("Failed to fetch attendance", 500)

    @app.route("/api/attendance", methods=["POST"], endpoint="mark_attendance")
    @auth_required
    def mark_attendance():
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        try:
            result = container.attendance_service.mark(
                current_user(),
                date=body.get("date"),
                records=body.get("records"),
            )
            return json_ok(result.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error marking attendance")
            return json_error("Failed to mark attendance", 500)

    @app.route("/api/attendance/students", methods=["GET"], endpoint="attendance_roster")
    @auth_required
    def attendance_roster():
        try:
            rows = container.attendance_service.roster(current_user(), date=request.args.get("date"))
            return json_ok([r.to_dict() for r in rows])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching students for attendance")
            return json_error("Failed to fetch students", 500)

    @app.route("/api/attendance/reconcile", methods=["POST"], endpoint="reconcile_attendance")
    @auth_required
    def reconcile_attendance():
        body = request.get_json(silent=True) or {}
        if not isinstance(body, dict):
            body = {}
        try:
            report = container.reconciler.reconcile_for(
                current_user(),
                date=body.get("date"),
                dry_run=bool(body.get("dryRun", False)),
            )
            return json_ok(report.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error reconciling attendance")
            return json_error("Failed to reconcile attendance", 500)
