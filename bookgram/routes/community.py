from fastapi import APIRouter, Depends

from bookgram.schemas.forum_schemas import ForumPost, PostCreate, ReplyCreate
from bookgram.services import forum_service
from bookgram.constants.views import View
from bookgram.dependencies.storefront import get_storefront
from bookgram.state import with_view
from bookgram.storefront import Storefront


router = APIRouter()


@router.get("/posts")
async def list_posts(category: str = "All", storefront: Storefront = Depends(get_storefront)):
    storefront.update(with_view, View.COMMUNITY)
    posts = await forum_service.fetch_posts(storefront)
    if category != "All":
        posts = [p for p in posts if p.category == category]
    return [p.model_dump(by_alias=True) for p in posts]


@router.post("/posts", response_model=ForumPost)
async def create_post(data: PostCreate, storefront: Storefront = Depends(get_storefront)):
    return await forum_service.create_post(storefront, data)


@router.post("/posts/{post_id}/replies", response_model=ForumPost)
async def reply(post_id: str, data: ReplyCreate, storefront: Storefront = Depends(get_storefront)):
    return await forum_service.reply(storefront, post_id, data)


@router.post("/posts/{post_id}/like", response_model=ForumPost)
async def like_post(post_id: str, storefront: Storefront = Depends(get_storefront)):
    return await forum_service.toggle_post_like(storefront, post_id)


@router.post("/posts/{post_id}/replies/{reply_id}/like", response_model=ForumPost)
async def like_reply(post_id: str, reply_id: str, storefront: Storefront = Depends(get_storefront)):
    return await forum_service.toggle_reply_like(storefront, post_id, reply_id)
