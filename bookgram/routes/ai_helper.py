from fastapi import APIRouter, Depends

from bookgram.schemas.recommendation_schemas import RecommendationRequest, RecommendationResponse
from bookgram.services.recommendation_service import RecommendationClient
from bookgram.dependencies.storefront import get_recommender


router = APIRouter()


@router.post("/recommend", response_model=RecommendationResponse)
async def recommend(data: RecommendationRequest, recommender: RecommendationClient = Depends(get_recommender)):
    text = await recommender.recommend(data.query)
    return RecommendationResponse(text=text)
