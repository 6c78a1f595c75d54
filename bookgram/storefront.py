# bookgram/storefront.py
import logging
from typing import Callable, Optional

from bookgram.constants.views import View
from bookgram.errors import RemoteStoreError
from bookgram.services import cart_service, catalog_service, profile_service
from bookgram.services.auth_service import AuthClient, AuthSession, AuthUser
from bookgram.services.record_store import RecordStore
from bookgram.state import AppState, UndoableChange, signed_out, with_cart, with_view

logger = logging.getLogger(__name__)


class Storefront:
    """
    One shopper's view of the shop: the state snapshot plus the collaborators
    every operation needs. Services receive it by reference and swap
    ``state`` for a new snapshot as they go.
    """

    def __init__(self, store: RecordStore, auth: Optional[AuthClient] = None):
        self.store = store
        self.auth = auth or AuthClient(store)
        self.state = AppState()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def user(self):
        return self.state.user

    def update(self, fn, *args) -> AppState:
        self.state = fn(self.state, *args)
        return self.state

    def apply(self, change: UndoableChange) -> UndoableChange:
        self.state = change.apply(self.state)
        return change

    def revert(self, change: UndoableChange) -> None:
        self.state = change.revert(self.state)

    # ---------------------------------------------------------
    # session lifecycle
    # ---------------------------------------------------------

    async def start(self):
        await catalog_service.load_books(self)
        self._unsubscribe = self.auth.on_auth_state_change(self._on_auth_change)

        session = await self.auth.get_session()
        if session:
            await self._load_session(session.user)

    def close(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    async def sign_out(self):
        await self.auth.sign_out()
        self.update(with_view, View.STORE)

    async def _on_auth_change(self, event: str, session: Optional[AuthSession]):
        logger.info(f"Auth event {event}")
        if session:
            await self._load_session(session.user)
        else:
            self.update(signed_out)

    async def _load_session(self, auth_user: AuthUser):
        await profile_service.load_profile(self, auth_user)

        # guest items never carry over into the signed-in cart
        try:
            await cart_service.fetch_cart(self)
        except RemoteStoreError as e:
            logger.error(f"Error fetching cart for {auth_user.id}: {e.message}")
            self.update(with_cart, [])
