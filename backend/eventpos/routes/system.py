# backend/eventpos/routes/system.py
"""
System health endpoint.

Used by the stand's phone to tell "server down" apart from "no sales yet".
"""

import time
from flask import Blueprint, current_app

from ..extensions import db
from ..models import Product, SaleRecord
from eventpos.time_utils import utcnow, to_utc_z

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    """Check database connectivity with two cheap counts."""
    start_time = time.time()
    try:
        product_count = db.session.query(Product).count()
        sale_count = db.session.query(SaleRecord).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {
                "products": product_count,
                "sales": sale_count,
            },
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error",
        }


@system_bp.get("/health")
def health():
    database = check_database_health()
    status = 200 if database["status"] == "healthy" else 503
    return {
        "status": database["status"],
        "time": to_utc_z(utcnow()),
        "checks": {"database": database},
    }, status
