# bookgram/services/auth_service.py
"""
Session-holding auth client, one per storefront.

It plays the part of a hosted auth provider: sign-up, sign-in, sign-out,
current-session lookup and a change subscription. Accounts live in the
``auth_users`` collection; sessions are signed JWTs.
"""
import logging
import uuid
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel

from bookgram.config import settings
from bookgram.errors import AuthError, translate_auth_error
from bookgram.services.record_store import RecordStore
from bookgram.utils.hash import hash_password, verify_password
from bookgram.utils.token import create_access_token, decode_access_token

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"
INITIAL_SESSION = "INITIAL_SESSION"


class AuthUser(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class AuthSession(BaseModel):
    access_token: str
    user: AuthUser


Listener = Callable[[str, Optional[AuthSession]], Awaitable[None]]


class AuthClient:
    def __init__(self, store: RecordStore):
        self.store = store
        self._session: Optional[AuthSession] = None
        self._listeners: List[Listener] = []

    # ---------------------------------------------------------
    # subscription
    # ---------------------------------------------------------

    def on_auth_state_change(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, event: str, session: Optional[AuthSession]):
        for listener in list(self._listeners):
            await listener(event, session)

    # ---------------------------------------------------------
    # session
    # ---------------------------------------------------------

    async def get_session(self) -> Optional[AuthSession]:
        return self._session

    async def restore_session(self, token: str) -> Optional[AuthSession]:
        """Adopt an existing token, e.g. after the process restarted."""
        payload = decode_access_token(token)
        if not payload or not payload.get("sub"):
            return None

        row = await self.store.get("auth_users", payload["sub"])
        if row is None:
            return None

        self._session = AuthSession(access_token=token, user=self._auth_user(row))
        await self._emit(INITIAL_SESSION, self._session)
        return self._session

    # ---------------------------------------------------------
    # sign up / in / out
    # ---------------------------------------------------------

    async def sign_up(self, name: str, email: str, password: str) -> Optional[AuthSession]:
        """Create an account. Returns no session while email confirmation is pending."""
        existing = await self.store.select("auth_users", {"email": email.lower()})
        if existing:
            raise AuthError(translate_auth_error("User already registered"))

        confirmed = not settings.auth_require_email_confirmation
        row = await self.store.insert_one("auth_users", {
            "id": uuid.uuid4().hex,
            "email": email.lower(),
            "password": hash_password(password),
            "full_name": name,
            "email_confirmed": confirmed,
        })
        logger.info(f"Registered auth user {row['id']}")

        if not confirmed:
            return None
        return await self._start_session(row)

    async def confirm_email(self, email: str) -> None:
        rows = await self.store.select("auth_users", {"email": email.lower()})
        if not rows:
            raise AuthError("No account found for this email.")
        await self.store.update("auth_users", rows[0]["id"], {"email_confirmed": True})

    async def sign_in(self, email: str, password: str) -> AuthSession:
        rows = await self.store.select("auth_users", {"email": email.lower()})
        row = rows[0] if rows else None

        if row is None or not verify_password(password, row["password"]):
            raise AuthError(translate_auth_error("Invalid login credentials"))

        if not row["email_confirmed"]:
            raise AuthError(translate_auth_error("Email not confirmed"))

        return await self._start_session(row)

    async def sign_out(self) -> None:
        self._session = None
        await self._emit(SIGNED_OUT, None)

    async def _start_session(self, row) -> AuthSession:
        token = create_access_token({"sub": row["id"]})
        self._session = AuthSession(access_token=token, user=self._auth_user(row))
        await self._emit(SIGNED_IN, self._session)
        return self._session

    @staticmethod
    def _auth_user(row) -> AuthUser:
        return AuthUser(
            id=row["id"],
            email=row["email"],
            full_name=row.get("full_name"),
            avatar_url=row.get("avatar_url"),
        )
