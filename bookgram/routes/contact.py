from fastapi import APIRouter, Depends

from bookgram.schemas.inquiry_schemas import InquiryCreate
from bookgram.services.inquiry_service import submit_inquiry
from bookgram.services.record_store import RecordStore
from bookgram.dependencies.storefront import get_store


router = APIRouter()


@router.post("/")
async def contact(data: InquiryCreate, store: RecordStore = Depends(get_store)):
    row = await submit_inquiry(store, data)
    return {"message": "Thanks! We'll get back to you soon.", "inquiry_id": row["id"]}
