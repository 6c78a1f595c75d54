from fastapi import APIRouter, Depends
from typing import Optional

from bookgram.dependencies.storefront import StorefrontRegistry, get_registry, get_storefront, oauth2_scheme
from bookgram.schemas.user_schemas import SessionResponse, SignInRequest, SignUpRequest
from bookgram.storefront import Storefront


router = APIRouter()


@router.post("/signup", response_model=SessionResponse)
async def signup(payload: SignUpRequest, registry: StorefrontRegistry = Depends(get_registry)):
    storefront = Storefront(registry.store)
    await storefront.start()

    session = await storefront.auth.sign_up(payload.name, payload.email, payload.password)
    if session is None:
        storefront.close()
        return SessionResponse(
            message="Sign up successful! Please check your email to verify your account before logging in."
        )

    registry.register(session.access_token, storefront)
    return SessionResponse(message="Registration successful.", access_token=session.access_token, user=storefront.user)


@router.post("/login", response_model=SessionResponse)
async def login(payload: SignInRequest, registry: StorefrontRegistry = Depends(get_registry)):
    # a fresh storefront: whatever a guest had in the cart stays behind
    storefront = Storefront(registry.store)
    await storefront.start()

    try:
        session = await storefront.auth.sign_in(payload.email, payload.password)
    except Exception:
        storefront.close()
        raise

    registry.register(session.access_token, storefront)
    return SessionResponse(message="Login successful.", access_token=session.access_token, user=storefront.user)


@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(oauth2_scheme),
    storefront: Storefront = Depends(get_storefront),
    registry: StorefrontRegistry = Depends(get_registry),
):
    await storefront.sign_out()
    if token:
        registry.drop(token)
    return {"message": "Logged out"}


@router.get("/session", response_model=SessionResponse)
async def current_session(storefront: Storefront = Depends(get_storefront)):
    session = await storefront.auth.get_session()
    if session is None:
        return SessionResponse(message="No active session")
    return SessionResponse(message="Active session", access_token=session.access_token, user=storefront.user)
