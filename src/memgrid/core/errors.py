"""
Error taxonomy.

- Unauthenticated: write attempted without a resolvable identity
- InvalidInput: missing/empty required field or out-of-enumeration value
- StoreError: any failure reported by the data store or the auth service
"""


class MemoryGridError(Exception):
    """Base class for all Memory Grid errors."""


class Unauthenticated(MemoryGridError):
    """No active session carries a usable identity."""

    def __init__(self, message: str = "Sign in required") -> None:
        super().__init__(message)


class InvalidInput(MemoryGridError):
    """A draft field failed validation."""

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"Invalid value for '{field}'")


class StoreError(MemoryGridError):
    """Failure from the external store or session provider."""

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed: {detail}")


class AuthError(StoreError):
    """Credentials or account request rejected by the auth service."""
