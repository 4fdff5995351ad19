"""Marketing router - AI generated copy"""

from typing import Optional

from fastapi import APIRouter, Depends

from ...state import AppState, get_app_state
from .service import (
    GenerationRequest,
    GenerationResponse,
    IdeaCategory,
    MarketingService,
    MessageCategory,
)

router = APIRouter(prefix="/marketing", tags=["Marketing"])


def get_marketing_service(state: AppState = Depends(get_app_state)) -> MarketingService:
    """Dependency injection for MarketingService"""
    return MarketingService(state)


@router.post("/messages/{category}", response_model=GenerationResponse)
async def generate_message(
    category: MessageCategory,
    data: Optional[GenerationRequest] = None,
    service: MarketingService = Depends(get_marketing_service),
):
    """Client message (daily tip, prospect, promo, birthday, reminder)"""
    return await service.generate_message(category, data.clientName if data else None)


@router.post("/ideas/{category}", response_model=GenerationResponse)
async def generate_idea(
    category: IdeaCategory,
    service: MarketingService = Depends(get_marketing_service),
):
    return await service.generate_idea(category)


@router.get("/mascot-tip", response_model=GenerationResponse)
async def mascot_tip(service: MarketingService = Depends(get_marketing_service)):
    return await service.mascot_tip()


@router.get("/dashboard-suggestion", response_model=GenerationResponse)
async def dashboard_suggestion(service: MarketingService = Depends(get_marketing_service)):
    return await service.dashboard_suggestion()


@router.get("/usage", response_model=dict[str, int])
async def get_usage(service: MarketingService = Depends(get_marketing_service)):
    return service.get_usage()
