"""
Auth module - session providers and the mirrored session cell.

Providers:
- rest: managed auth service (GoTrue-compatible HTTP API)
- local: offline accounts stored in the local SQLite database
"""

from memgrid.auth.base import Session, SessionCell, SessionEvent, SessionProvider

__all__ = ["Session", "SessionEvent", "SessionProvider", "SessionCell"]
