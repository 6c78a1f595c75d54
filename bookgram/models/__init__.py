from bookgram.models.book import BookRow
from bookgram.models.cart import CartItemRow
from bookgram.models.profile import ProfileRow
from bookgram.models.order import OrderRow
from bookgram.models.forum import ForumPostRow, ForumReplyRow
from bookgram.models.inquiry import InquiryRow
from bookgram.models.auth_user import AuthUserRow

# collection name -> table model, as addressed by the record store
COLLECTIONS = {
    "books": BookRow,
    "cart_items": CartItemRow,
    "profiles": ProfileRow,
    "orders": OrderRow,
    "forum_posts": ForumPostRow,
    "forum_replies": ForumReplyRow,
    "inquiries": InquiryRow,
    "auth_users": AuthUserRow,
}
