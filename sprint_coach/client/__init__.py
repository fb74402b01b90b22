"""
Client side of the sprint coach.

Keeps the session log on the athlete's machine, sends the most recent
sessions to the coach endpoint, and renders what comes back.
"""

from .api_client import CoachClient, CoachResult
from .render import render_history, render_recommendation
from .store import SESSIONS_KEY, SessionStore

__all__ = [
    "CoachClient",
    "CoachResult",
    "SESSIONS_KEY",
    "SessionStore",
    "render_history",
    "render_recommendation",
]
