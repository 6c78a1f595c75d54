# bookgram/services/forum_service.py
import logging
from collections import defaultdict

from bookgram.errors import NotFoundError, RemoteStoreError, ValidationFailed
from bookgram.mappers import forum_post_from_row, forum_reply_from_row
from bookgram.schemas.forum_schemas import ForumPost, PostCreate, ReplyCreate
from bookgram.services.profile_service import require_user
from bookgram.state import find_post, replace_post, with_posts

logger = logging.getLogger(__name__)


def _toggle(ids, user_id):
    return [i for i in ids if i != user_id] if user_id in ids else [*ids, user_id]


def _get_post(storefront, post_id: str) -> ForumPost:
    post = find_post(storefront.state, post_id)
    if post is None:
        raise NotFoundError("Post not found")
    return post


async def fetch_posts(storefront):
    """Posts newest first, each with its replies oldest first."""
    try:
        post_rows = await storefront.store.select("forum_posts", order_by="created_at", descending=True)
        reply_rows = await storefront.store.select("forum_replies", order_by="created_at")
    except RemoteStoreError as e:
        logger.error(f"Error fetching community posts: {e.message}")
        return storefront.state.posts

    replies = defaultdict(list)
    for row in reply_rows:
        replies[row["post_id"]].append(row)

    posts = [forum_post_from_row(row, replies[row["id"]]) for row in post_rows]
    storefront.update(with_posts, posts)
    return posts


async def create_post(storefront, data: PostCreate) -> ForumPost:
    user = require_user(storefront, "Please login to post a question.")

    row = await storefront.store.insert_one("forum_posts", {
        "author_id": user.id,
        "author_name": user.name,
        "title": data.title,
        "content": data.content,
        "category": data.category,
        "liked_by": [],
        "tags": [],
    })

    post = forum_post_from_row(row)
    storefront.update(with_posts, [post, *storefront.state.posts])
    return post


async def reply(storefront, post_id: str, data: ReplyCreate) -> ForumPost:
    user = require_user(storefront, "Please login to reply.")
    if not data.content.strip():
        raise ValidationFailed("Reply cannot be empty.")
    post = _get_post(storefront, post_id)

    row = await storefront.store.insert_one("forum_replies", {
        "post_id": int(post_id),
        "author_id": user.id,
        "author_name": user.name,
        "content": data.content,
        "liked_by": [],
    })

    updated = post.model_copy(update={"replies": [*post.replies, forum_reply_from_row(row)]})
    storefront.update(replace_post, updated)
    return updated


async def toggle_post_like(storefront, post_id: str) -> ForumPost:
    user = require_user(storefront, "Please login to like posts.")
    post = _get_post(storefront, post_id)

    updated = post.model_copy(update={"liked_by": _toggle(post.liked_by, user.id)})
    storefront.update(replace_post, updated)

    try:
        await storefront.store.update("forum_posts", int(post_id), {"liked_by": updated.liked_by})
    except RemoteStoreError as e:
        logger.error(f"Error saving like on post {post_id}: {e.message}")
    return updated


async def toggle_reply_like(storefront, post_id: str, reply_id: str) -> ForumPost:
    user = require_user(storefront, "Please login to like replies.")
    post = _get_post(storefront, post_id)

    target = next((r for r in post.replies if r.id == reply_id), None)
    if target is None:
        raise NotFoundError("Reply not found")

    liked = target.model_copy(update={"liked_by": _toggle(target.liked_by, user.id)})
    updated = post.model_copy(update={
        "replies": [liked if r.id == reply_id else r for r in post.replies]
    })
    storefront.update(replace_post, updated)

    try:
        await storefront.store.update("forum_replies", int(reply_id), {"liked_by": liked.liked_by})
    except RemoteStoreError as e:
        logger.error(f"Error saving like on reply {reply_id}: {e.message}")
    return updated
