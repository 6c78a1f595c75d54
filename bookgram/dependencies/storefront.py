import logging
import time
import uuid
from collections import OrderedDict
from typing import Callable, Dict, Optional, Tuple

from fastapi import Depends, Header, Request, Response
from fastapi.security import OAuth2PasswordBearer

from bookgram.config import settings
from bookgram.errors import AuthError
from bookgram.services.record_store import RecordStore
from bookgram.services.recommendation_service import RecommendationClient
from bookgram.storefront import Storefront
from bookgram.utils.token import decode_access_token

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

GUEST_HEADER = "X-Guest-Id"

# seconds between sweeps for expired tokens and idle guests
SWEEP_INTERVAL = 60


class StorefrontRegistry:
    """
    Live storefronts keyed by session token, or by guest id for guests.

    Session storefronts go away when their token expires. Guest storefronts
    go away after ``guest_idle_seconds`` without a request, and the oldest
    guests are dropped once there are more than ``max_guests``.
    """

    def __init__(
        self,
        store: RecordStore,
        guest_idle_seconds: Optional[float] = None,
        max_guests: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.store = store
        self.guest_idle_seconds = (
            settings.guest_idle_minutes * 60 if guest_idle_seconds is None else guest_idle_seconds
        )
        self.max_guests = settings.max_guest_storefronts if max_guests is None else max_guests
        self._clock = clock
        self._last_sweep: Optional[float] = None

        self._sessions: Dict[str, Storefront] = {}
        self._guests: "OrderedDict[str, Storefront]" = OrderedDict()
        self._guest_seen: Dict[str, float] = {}

    async def _open(self) -> Storefront:
        storefront = Storefront(self.store)
        await storefront.start()
        return storefront

    # ---------------------------------------------------------
    # eviction
    # ---------------------------------------------------------

    def _drop_guest(self, guest_id: str):
        storefront = self._guests.pop(guest_id, None)
        self._guest_seen.pop(guest_id, None)
        if storefront is not None:
            storefront.close()

    def sweep(self):
        """Drop storefronts of expired tokens and idle guests."""
        now = self._clock()
        self._last_sweep = now

        expired = [token for token in self._sessions if decode_access_token(token) is None]
        for token in expired:
            self.drop(token)

        idle = [g for g, seen in self._guest_seen.items() if now - seen > self.guest_idle_seconds]
        for guest_id in idle:
            self._drop_guest(guest_id)

        if expired or idle:
            logger.info(f"Evicted {len(expired)} expired sessions and {len(idle)} idle guests")

    def _maybe_sweep(self):
        if self._last_sweep is None or self._clock() - self._last_sweep >= SWEEP_INTERVAL:
            self.sweep()

    # ---------------------------------------------------------
    # lookup
    # ---------------------------------------------------------

    async def guest(self, guest_id: Optional[str]) -> Tuple[str, Storefront]:
        """Storefront for ``guest_id``; a new id is issued when none is given."""
        self._maybe_sweep()

        guest_id = guest_id or uuid.uuid4().hex
        storefront = self._guests.get(guest_id)
        if storefront is None:
            storefront = await self._open()
            self._guests[guest_id] = storefront
        else:
            self._guests.move_to_end(guest_id)
        self._guest_seen[guest_id] = self._clock()

        while len(self._guests) > self.max_guests:
            self._drop_guest(next(iter(self._guests)))

        return guest_id, storefront

    async def for_token(self, token: str) -> Storefront:
        self._maybe_sweep()

        if decode_access_token(token) is None:
            self.drop(token)
            raise AuthError("Could not validate credentials")

        storefront = self._sessions.get(token)
        if storefront is not None:
            return storefront

        storefront = await self._open()
        if await storefront.auth.restore_session(token) is None:
            storefront.close()
            raise AuthError("Could not validate credentials")

        self._sessions[token] = storefront
        return storefront

    def register(self, token: str, storefront: Storefront):
        self._sessions[token] = storefront

    def drop(self, token: str):
        storefront = self._sessions.pop(token, None)
        if storefront is not None:
            storefront.close()


def get_registry(request: Request) -> StorefrontRegistry:
    return request.app.state.registry


def get_store(request: Request) -> RecordStore:
    return request.app.state.registry.store


def get_recommender(request: Request) -> RecommendationClient:
    return request.app.state.recommender


async def get_storefront(
    response: Response,
    token: Optional[str] = Depends(oauth2_scheme),
    x_guest_id: Optional[str] = Header(default=None),
    registry: StorefrontRegistry = Depends(get_registry),
) -> Storefront:
    if token:
        return await registry.for_token(token)

    # guests send this back to keep their cart
    guest_id, storefront = await registry.guest(x_guest_id)
    response.headers[GUEST_HEADER] = guest_id
    return storefront
