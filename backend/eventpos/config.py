# backend/eventpos/config.py
from __future__ import annotations
import os


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/eventpos.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///eventpos.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Event window, in local hours of EVENT_TIMEZONE (18.5 = 18:30)
    EVENT_START_HOUR = float(os.environ.get("EVENT_START_HOUR", "8"))
    EVENT_END_HOUR = float(os.environ.get("EVENT_END_HOUR", "18.5"))
    EVENT_TIMEZONE = os.environ.get("EVENT_TIMEZONE", "America/Sao_Paulo")

    # Profit sharing
    PARTNER_COUNT = int(os.environ.get("PARTNER_COUNT", "2"))
    GOAL_PER_PARTNER_CENTS = int(os.environ.get("GOAL_PER_PARTNER_CENTS", "400000"))

    # Clients poll /api/state on this interval
    REFRESH_INTERVAL_SECONDS = int(os.environ.get("REFRESH_INTERVAL_SECONDS", "12"))
    RECENT_SALES_LIMIT = int(os.environ.get("RECENT_SALES_LIMIT", "15"))

    # Comma-separated origins of the terminal web UI
    CORS_ALLOWED_ORIGINS = {
        o.strip()
        for o in os.environ.get(
            "CORS_ALLOWED_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        ).split(",")
        if o.strip()
    }
