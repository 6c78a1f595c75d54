from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from bookgram.config import settings
from bookgram.database import create_db_and_tables, engine
from bookgram.dependencies.storefront import GUEST_HEADER, StorefrontRegistry
from bookgram.errors import StorefrontError
from bookgram.services.record_store import RecordStore
from bookgram.services.recommendation_service import RecommendationClient
from bookgram.routes import (
    ai_helper,
    auth,
    books,
    cart,
    checkout,
    community,
    contact,
    review,
    users,
)


def create_app(bind=None, recommender: RecommendationClient = None) -> FastAPI:
    bind = bind or engine

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Run DB creation ONLY in local
        if settings.env == "local":
            create_db_and_tables(bind)
        yield

    app = FastAPI(title="Bookgram Storefront API", lifespan=lifespan)
    app.state.registry = StorefrontRegistry(RecordStore(bind))
    app.state.recommender = recommender or RecommendationClient()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[GUEST_HEADER],
    )

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
    app.include_router(users.router, prefix="/users", tags=["Users"])
    app.include_router(books.router, prefix="/books", tags=["Books"])
    app.include_router(cart.router, prefix="/cart", tags=["Cart"])
    app.include_router(checkout.router, prefix="/checkout", tags=["Checkout"])
    app.include_router(review.router, prefix="/reviews", tags=["Reviews"])
    app.include_router(community.router, prefix="/community", tags=["Community"])
    app.include_router(contact.router, prefix="/contact", tags=["Contact"])
    app.include_router(ai_helper.router, prefix="/ai", tags=["AI Helper"])

    @app.get("/")
    def root():
        return {
            "auth_endpoints": ["/auth/signup", "/auth/login", "/auth/logout", "/auth/session"],
            "books": ["/books", "/books/{book_id}", "/books/{book_id}/favorite"],
            "cart": [
                "/cart", "/cart/add", "/cart/update/{item_id}",
                "/cart/rent-duration/{item_id}", "/cart/remove/{item_id}",
            ],
            "checkout": ["/checkout/summary", "/checkout/place-order"],
            "reviews": ["/reviews/books/{book_id}"],
            "community": ["/community/posts", "/community/posts/{post_id}/replies"],
            "contact": ["/contact"],
            "ai": ["/ai/recommend"],
        }

    return app


app = create_app()
