from fastapi import APIRouter, Depends

from bookgram.constants.views import View
from bookgram.errors import EmptyCartError
from bookgram.routes.cart import cart_summary
from bookgram.schemas.orders_schemas import OrderPlacement, PlaceOrderRequest
from bookgram.services import order_service
from bookgram.dependencies.storefront import get_storefront
from bookgram.state import with_view
from bookgram.storefront import Storefront


router = APIRouter()


@router.get("/summary")
async def checkout_summary(storefront: Storefront = Depends(get_storefront)):
    if not storefront.state.cart:
        raise EmptyCartError()
    storefront.update(with_view, View.CHECKOUT)
    return cart_summary(storefront)


#Order Confirmation Page

@router.post("/place-order")
async def place_order(data: PlaceOrderRequest, storefront: Storefront = Depends(get_storefront)):
    placement: OrderPlacement = await order_service.place_order(
        storefront, data.address, data.payment_method
    )

    message = "Order placed successfully"
    if order_service.STEP_ORDER in placement.failed_steps:
        message = "Order processed but failed to save to history. Please contact support."

    return {
        "message": message,
        "view": storefront.state.view,
        "placement": placement.model_dump(by_alias=True),
    }
