# Overview: Read-only routes for the polling clients: full state and the dashboard projection.

from flask import Blueprint, request, jsonify, current_app

from ..services import state_service, projection_service
from ..services.projection_service import EventSettings
from eventpos.time_utils import utcnow, parse_iso_datetime


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api")


@dashboard_bp.get("/state")
def state_route():
    """
    Bulk read for terminals. Clients replace their local copy wholesale
    with this response every REFRESH_INTERVAL_SECONDS.
    """
    state = state_service.load_state()
    body = state.to_dict()
    body["refresh_interval_seconds"] = current_app.config["REFRESH_INTERVAL_SECONDS"]
    return jsonify(body), 200


@dashboard_bp.get("/dashboard")
def dashboard_route():
    """
    Projection at the current instant, or at `?as_of=<ISO-8601>`.

    `as_of` moves the clock only: every sale and expense of that event day
    is still counted.
    """
    try:
        now = parse_iso_datetime(request.args.get("as_of")) or utcnow()
    except ValueError:
        return jsonify({"error": "as_of must be an ISO-8601 datetime"}), 400

    settings = EventSettings.from_config(current_app.config)
    state = state_service.load_state()
    projection = projection_service.compute_projection(state, now, settings)
    return jsonify({
        "projection": projection.to_dict(),
        "settings": {
            "event_start_hour": settings.start_hour,
            "event_end_hour": settings.end_hour,
            "partner_count": settings.partner_count,
            "goal_per_partner_cents": settings.goal_per_partner_cents,
            "timezone": settings.timezone,
        },
    }), 200
