from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.exceptions import (
    AttendanceError,
    GeofenceMisconfigured,
    InvalidRequest,
    RoleNotAllowed,
    StateConflictError,
    StorageUnavailable,
    UserNotFound,
)
from ..container import Container
from .payloads import CheckInRequest, CheckOutRequest
from .serializers import record_to_dict

logger = logging.getLogger(__name__)


def status_code_for(error: AttendanceError) -> int:
    if isinstance(error, UserNotFound):
        return 404
    if isinstance(error, RoleNotAllowed):
        return 403
    if isinstance(error, StateConflictError):
        return 409
    if isinstance(error, StorageUnavailable):
        return 503
    if isinstance(error, GeofenceMisconfigured):
        return 500
    return 400


def register(app: Flask, container: Container) -> None:
    service = container.check_in_out_service
    clock = service.clock

    def _render(record, *, live: bool = False):
        if record is None:
            return None
        hours = service.live_hours_worked(record) if live else None
        return record_to_dict(record, clock, live_hours_worked=hours)

    def _query_arg(name: str) -> str:
        return require_non_empty(request.args.get(name), name)

    @app.errorhandler(AttendanceError)
    def handle_attendance_error(error: AttendanceError):
        if isinstance(error, StorageUnavailable):
            logger.error("%s %s failed: storage unavailable", request.method, request.path, exc_info=error)
        return jsonify(error.to_dict()), status_code_for(error)

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    def checkin():
        payload = request.get_json(silent=True)
        record = service.check_in(CheckInRequest.from_payload(payload))
        return jsonify(_render(record)), 200

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    def checkout():
        payload = request.get_json(silent=True)
        record = service.check_out(CheckOutRequest.from_payload(payload))
        return jsonify(_render(record)), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    def today():
        record = service.get_today_record(_query_arg("userId"))
        return jsonify(_render(record, live=True))

    @app.route("/api/attendance/active", methods=["GET"], endpoint="attendance_active")
    def active():
        record = service.get_active_record(_query_arg("userId"))
        return jsonify(_render(record, live=True))

    @app.route("/api/attendance/user", methods=["GET"], endpoint="attendance_user_history")
    def user_history():
        user_id = _query_arg("userId")
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise InvalidRequest("limit must be an integer") from None
        if limit <= 0:
            raise InvalidRequest("limit must be positive")
        return jsonify([_render(r) for r in service.get_history(user_id, limit=limit)])

    @app.route("/api/attendance/company", methods=["GET"], endpoint="attendance_company")
    def company():
        company_code = _query_arg("companyCode")
        date_s = request.args.get("date")
        try:
            work_date = parse_iso_date(date_s) if date_s else None
        except ValueError:
            raise InvalidRequest("date must be YYYY-MM-DD") from None
        records = service.list_company_attendance(company_code, work_date)
        return jsonify([_render(r, live=True) for r in records])
