"""
Core module - configuration, logging, shared error types.

Components:
- config: Settings management via pydantic-settings
- errors: Error taxonomy shared by the repository and its adapters
- logging: Structured logging setup
"""

from memgrid.core.config import Settings
from memgrid.core.errors import AuthError, InvalidInput, MemoryGridError, StoreError, Unauthenticated

__all__ = [
    "Settings",
    "MemoryGridError",
    "Unauthenticated",
    "InvalidInput",
    "StoreError",
    "AuthError",
]
