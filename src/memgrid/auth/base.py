"""
Session provider interface.

A provider owns the current authenticated identity and pushes a notification
to every subscriber when it changes. Nothing is replayed to late subscribers.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from memgrid.core.logging import get_logger

logger = get_logger("auth")


class SessionEvent(Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class Session:
    """Authenticated identity."""

    user_id: str
    email: str | None = None
    access_token: str | None = None


SessionListener = Callable[[SessionEvent, Session | None], None]


class SessionProvider(ABC):
    """Abstract authentication provider."""

    def __init__(self) -> None:
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> Session:
        """Authenticate with email and password."""
        ...

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> Session | None:
        """Register a new account.

        Returns the new session, or None when the service requires
        confirmation before the first sign-in.
        """
        ...

    @abstractmethod
    async def sign_out(self) -> None:
        """End the current session."""
        ...

    async def get_session(self) -> Session | None:
        """Current session, if any."""
        return self._session

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to session changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Session | None) -> None:
        """Replace the session and notify subscribers."""
        self._session = session
        event = SessionEvent.SIGNED_IN if session else SessionEvent.SIGNED_OUT
        logger.debug(f"Session change: {event.value}")
        for listener in list(self._listeners):
            try:
                listener(event, session)
            except Exception as e:
                logger.error(f"Session listener failed: {e}", exc_info=True)


class SessionCell:
    """Mirror of the provider's session, written only by its subscription.

    Views read the mirrored identity for display and read filters. Writes
    must not rely on it; they re-derive identity from the provider.
    """

    def __init__(self) -> None:
        self._session: Session | None = None
        self._unsubscribe: Callable[[], None] | None = None

    async def attach(self, provider: SessionProvider) -> None:
        """Seed from the provider and follow its change notifications."""
        self.detach()
        self._session = await provider.get_session()
        self._unsubscribe = provider.on_session_change(self._on_change)

    def detach(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, event: SessionEvent, session: Session | None) -> None:
        # Replaced wholesale, last write wins
        self._session = session if event == SessionEvent.SIGNED_IN else None

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def user_id(self) -> str | None:
        return self._session.user_id if self._session else None
