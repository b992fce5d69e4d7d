"""
Forex Session Utility

Handles UTC trading-session windows. All times are UTC; naive datetimes
are treated as UTC.
"""

from datetime import datetime
from typing import Optional
import pytz

from smartsignal.schemas.indicators import TradingSession

UTC = pytz.utc

# Session windows (UTC hour, inclusive on both ends)
SESSION_HOURS = {
    TradingSession.TOKYO: (0, 9),
    TradingSession.LONDON: (8, 17),
    TradingSession.NEW_YORK: (13, 22),
}


def utc_now() -> datetime:
    """Get current time in UTC. The only wall-clock read in the project."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Normalize a datetime to aware UTC."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def active_sessions(dt: Optional[datetime] = None) -> list[TradingSession]:
    """Sessions whose window contains the given instant."""
    if dt is None:
        dt = utc_now()

    hour = to_utc(dt).hour
    return [
        session
        for session, (start, end) in SESSION_HOURS.items()
        if start <= hour <= end
    ]


def is_session_active(dt: Optional[datetime] = None) -> bool:
    """Check if any major forex session is open."""
    return len(active_sessions(dt)) > 0


def get_session_status(dt: Optional[datetime] = None) -> dict:
    """Get session status for the health endpoint."""
    now = to_utc(dt) if dt is not None else utc_now()
    sessions = active_sessions(now)

    return {
        "is_active": len(sessions) > 0,
        "sessions": [s.value for s in sessions],
        "current_time_utc": now.strftime("%H:%M:%S"),
        "current_date": now.date().isoformat(),
    }
