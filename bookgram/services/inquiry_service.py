# bookgram/services/inquiry_service.py
import logging

from bookgram.schemas.inquiry_schemas import InquiryCreate
from bookgram.services.record_store import RecordStore

logger = logging.getLogger(__name__)


async def submit_inquiry(store: RecordStore, data: InquiryCreate) -> dict:
    row = await store.insert_one("inquiries", {
        "full_name": data.full_name,
        "email": data.email,
        "mobile": data.mobile,
        "query": data.query,
        "time_slot": data.time_slot,
    })
    logger.info(f"Inquiry {row['id']} received from {data.email}")
    return row
