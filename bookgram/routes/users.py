from fastapi import APIRouter, Depends

from bookgram.schemas.user_schemas import ProfileUpdate, User
from bookgram.services import profile_service
from bookgram.constants.views import View
from bookgram.dependencies.storefront import get_storefront
from bookgram.state import with_view
from bookgram.storefront import Storefront


router = APIRouter()


@router.get("/me", response_model=User)
async def me(storefront: Storefront = Depends(get_storefront)):
    user = profile_service.require_user(storefront)
    storefront.update(with_view, View.PROFILE)
    return user


@router.put("/update-profile", response_model=User)
async def update_profile(data: ProfileUpdate, storefront: Storefront = Depends(get_storefront)):
    return await profile_service.update_profile(storefront, data)
