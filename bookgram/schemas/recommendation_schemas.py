from pydantic import Field

from bookgram.schemas.base import CamelModel


class RecommendationRequest(CamelModel):
    query: str = Field(..., min_length=1)


class RecommendationResponse(CamelModel):
    text: str
