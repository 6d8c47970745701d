"""Session provider backed by a GoTrue-compatible auth service over HTTP."""

from typing import Any

import httpx

from memgrid.auth.base import Session, SessionProvider
from memgrid.core.errors import AuthError, StoreError
from memgrid.core.logging import get_logger

logger = get_logger("auth.rest")


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an auth error response."""
    try:
        data = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(data, dict):
        for key in ("msg", "error_description", "message", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {response.status_code}"


def _session_from_payload(data: dict[str, Any]) -> Session | None:
    """Build a session from a token/signup response, None if no token issued."""
    token = data.get("access_token")
    if not token:
        return None
    user = data.get("user") or {}
    user_id = user.get("id")
    if not user_id:
        return None
    return Session(user_id=user_id, email=user.get("email"), access_token=token)


class RestAuthProvider(SessionProvider):
    """Email/password auth against the managed service's /auth/v1 endpoints."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__()
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=f"{self.base_url}/auth/v1",
            timeout=self.timeout,
            transport=self._transport,
            headers={"apikey": self.anon_key, "Content-Type": "application/json"},
        )

    async def _post(
        self,
        operation: str,
        path: str,
        payload: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
        token: str | None = None,
    ) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        try:
            async with self._client() as client:
                response = await client.post(path, json=payload, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise StoreError(operation, str(e)) from e

        if response.status_code in (400, 401, 403, 422):
            raise AuthError(operation, _error_message(response))
        if response.is_error:
            raise StoreError(operation, f"HTTP {response.status_code}: {_error_message(response)}")

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise StoreError(operation, "malformed response") from e
        return data if isinstance(data, dict) else {}

    async def sign_in(self, email: str, password: str) -> Session:
        data = await self._post(
            "sign in",
            "/token",
            payload={"email": email, "password": password},
            params={"grant_type": "password"},
        )
        session = _session_from_payload(data)
        if session is None:
            raise AuthError("sign in", "no session returned")
        logger.info(f"Signed in as {session.email}")
        self._set_session(session)
        return session

    async def sign_up(self, email: str, password: str) -> Session | None:
        data = await self._post("sign up", "/signup", payload={"email": email, "password": password})
        session = _session_from_payload(data)
        if session is None:
            logger.info(f"Sign up for {email} pending confirmation")
            return None
        logger.info(f"Signed up and signed in as {session.email}")
        self._set_session(session)
        return session

    async def sign_out(self) -> None:
        session = self._session
        if session and session.access_token:
            try:
                await self._post("sign out", "/logout", token=session.access_token)
            except StoreError as e:
                # Local session is dropped regardless; the token expires server-side
                logger.warning(f"Remote sign out failed: {e}")
        self._set_session(None)
