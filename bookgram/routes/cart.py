from fastapi import APIRouter, Depends

from bookgram.schemas.cart_schemas import CartAddRequest, CartDurationUpdate, CartQuantityUpdate
from bookgram.services import cart_service
from bookgram.services.pricing import order_total, subtotal
from bookgram.constants.views import View
from bookgram.dependencies.storefront import get_storefront
from bookgram.state import with_view
from bookgram.storefront import Storefront


router = APIRouter()


def cart_summary(storefront: Storefront):
    items = storefront.state.cart
    amount = subtotal(items)
    total = order_total(items)
    return {
        "items": [item.model_dump(by_alias=True) for item in items],
        "summary": {
            "subtotal": amount,
            "fee": total - amount,
            "total": total,
        },
    }


# View Cart

@router.get("/")
async def get_cart(storefront: Storefront = Depends(get_storefront)):
    storefront.update(with_view, View.CART)
    return cart_summary(storefront)


# Add to Cart

@router.post("/add")
async def add_to_cart(data: CartAddRequest, storefront: Storefront = Depends(get_storefront)):
    item = await cart_service.add_to_cart(storefront, data)
    return {"message": f"{item.title} added to cart!", "item": item.model_dump(by_alias=True)}


# Update Cart

@router.put("/update/{item_id}")
async def update_quantity(item_id: str, data: CartQuantityUpdate, storefront: Storefront = Depends(get_storefront)):
    item = await cart_service.update_quantity(storefront, item_id, data.quantity)
    return {"message": "Quantity updated", "item": item.model_dump(by_alias=True)}


@router.put("/rent-duration/{item_id}")
async def update_rent_duration(item_id: str, data: CartDurationUpdate, storefront: Storefront = Depends(get_storefront)):
    item = await cart_service.update_rent_duration(storefront, item_id, data.duration)
    return {"message": "Rent duration updated", "item": item.model_dump(by_alias=True)}


# Remove Cart

@router.delete("/remove/{item_id}")
async def remove_item(item_id: str, storefront: Storefront = Depends(get_storefront)):
    await cart_service.remove_from_cart(storefront, item_id)
    return {"message": "Item removed from cart"}
