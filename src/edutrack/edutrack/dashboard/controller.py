from __future__ import annotations

import logging

from flask import Flask, request

from ..common.api import bearer_required, current_user, domain_error_response, json_error, json_ok
from ..core.exceptions import DomainError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    auth_required = bearer_required(container.auth_service)

    @app.route("/api/dashboard/attendance", methods=["GET"], endpoint="dashboard_attendance")
    @auth_required
    def dashboard_attendance():
        try:
            day = container.stats_service.day(current_user(), date=request.args.get("date"))
            return json_ok(day.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching attendance rate")
            return json_error("Failed to fetch dashboard stats", 500)

    @app.route("/api/dashboard/attendance-trends", methods=["GET"], endpoint="dashboard_attendance_trends")
    @auth_required
    def dashboard_attendance_trends():
        try:
            trends = container.stats_service.weekly_trends(
                current_user(),
                start=request.args.get("startDate"),
                end=request.args.get("endDate"),
            )
            return json_ok(trends)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching attendance trends")
            return json_error("Failed to fetch analytics", 500)
